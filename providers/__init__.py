"""Chat completion transports."""

from .base_requester import BaseRequester
from .local_proxy_requester import LocalProxyRequester
from .openai_compatible_requester import OpenAICompatibleRequester
from .requesters import RequesterFactory

__all__ = [
    "BaseRequester",
    "LocalProxyRequester",
    "OpenAICompatibleRequester",
    "RequesterFactory",
]
