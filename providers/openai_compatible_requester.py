from typing import Any

import httpx

from arena_engine.types import ChatCompletionRequest

from .base_requester import DEFAULT_TIMEOUT, BaseRequester


class OpenAICompatibleRequester(BaseRequester):
    """Talks directly to an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        name: str = "openai-compatible",
    ):
        super().__init__(client=client, timeout=timeout)
        self._api_key = api_key
        self._name = name
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"

    @property
    def provider_name(self) -> str:
        return self._name

    def build_request_args(self, payload: ChatCompletionRequest) -> dict[str, Any]:
        return {
            "url": self.endpoint,
            "json": payload,
            "headers": {
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
        }
