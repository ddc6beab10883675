from typing import TYPE_CHECKING

import httpx

from .base_requester import DEFAULT_TIMEOUT, BaseRequester
from .local_proxy_requester import LocalProxyRequester
from .openai_compatible_requester import OpenAICompatibleRequester

if TYPE_CHECKING:
    from config.settings import ProviderConfig


class RequesterFactory:
    """Factory for creating chat completion requesters."""

    @classmethod
    def create(
        cls,
        provider: "ProviderConfig",
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> BaseRequester:
        """Requester that calls the provider with its configured credentials."""
        return OpenAICompatibleRequester(
            api_key=provider.api_key,
            base_url=provider.base_url,
            client=client,
            timeout=timeout,
            name=provider.key or provider.name,
        )

    @classmethod
    def create_proxy(
        cls,
        provider_key: str,
        base_url: str = "",
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> BaseRequester:
        """Requester that goes through the arena's chat proxy route."""
        return LocalProxyRequester(
            provider_key=provider_key,
            base_url=base_url,
            client=client,
            timeout=timeout,
        )
