"""Shared types and enums for the arena engine."""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Literal, NotRequired, TypedDict

import httpx

if TYPE_CHECKING:
    from .models import Message


class AgentStatus(Enum):
    """What an agent is doing right now."""

    IDLE = "idle"
    THINKING = "thinking"
    SPEAKING = "speaking"


class ChatMessage(TypedDict):
    """One message of an OpenAI-compatible chat completion request."""

    role: Literal["system", "user", "assistant"]
    content: str


class ChatCompletionRequest(TypedDict):
    """Body of an OpenAI-compatible chat completion request."""

    model: str
    messages: list[ChatMessage]
    temperature: NotRequired[float]
    stream: NotRequired[bool]


# Transport: performs the HTTP call and hands back an unread response
type ChatCompletionRequester = Callable[
    [ChatCompletionRequest], Awaitable[httpx.Response]
]

# Round observer callbacks
type AgentStatusCallback = Callable[[str, AgentStatus], Awaitable[None]]
type MessageCallback = Callable[[Message], Awaitable[None]]
type MessageUpdatedCallback = Callable[[str, str], Awaitable[None]]
type MessageRemovedCallback = Callable[[str], Awaitable[None]]
type ChunkCallback = Callable[[str], Awaitable[None]]
