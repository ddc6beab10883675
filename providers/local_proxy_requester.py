from typing import Any

import httpx

from arena_engine.types import ChatCompletionRequest

from .base_requester import DEFAULT_TIMEOUT, BaseRequester

DEFAULT_PROXY_ENDPOINT = "/api/chat"


class LocalProxyRequester(BaseRequester):
    """Sends requests through the arena's own chat proxy route.

    The proxy resolves the provider's credentials server-side, so only the
    provider key travels with the request.
    """

    def __init__(
        self,
        provider_key: str,
        endpoint: str = DEFAULT_PROXY_ENDPOINT,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = "",
    ):
        super().__init__(client=client, timeout=timeout)
        self.provider_key = provider_key
        self.endpoint = f"{base_url.rstrip('/')}{endpoint}" if base_url else endpoint

    @property
    def provider_name(self) -> str:
        return f"proxy:{self.provider_key}"

    def build_request_args(self, payload: ChatCompletionRequest) -> dict[str, Any]:
        return {
            "url": self.endpoint,
            "json": {"providerKey": self.provider_key, "payload": payload},
            "headers": {"Content-Type": "application/json"},
        }
