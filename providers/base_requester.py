import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from arena_engine.types import ChatCompletionRequest

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class BaseRequester(ABC):
    """Abstract base class for chat completion transports.

    A requester is the injected transport of an arena round: awaiting it with
    a request body returns the provider's response with the body still
    unread, so the caller can consume it as one JSON document or as a
    server-sent event stream. The caller closes the response.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, timeout: float = DEFAULT_TIMEOUT):
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the provider this requester talks to."""
        pass

    @abstractmethod
    def build_request_args(self, payload: ChatCompletionRequest) -> dict[str, Any]:
        """Return url, json body and headers for ``payload``."""
        pass

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def __call__(self, payload: ChatCompletionRequest) -> httpx.Response:
        args = self.build_request_args(payload)
        request = self.client.build_request("POST", timeout=self._timeout, **args)
        logger.debug(
            f"{self.provider_name}: POST {request.url} model={payload.get('model')} "
            f"stream={payload.get('stream', False)}"
        )
        return await self.client.send(request, stream=True)

    async def aclose(self) -> None:
        """Close the HTTP client if this requester created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "BaseRequester":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
