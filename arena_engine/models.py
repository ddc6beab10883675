"""Data models for the arena engine."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

from .types import (
    AgentStatus,
    AgentStatusCallback,
    ChatCompletionRequester,
    MessageCallback,
    MessageRemovedCallback,
    MessageUpdatedCallback,
)

if TYPE_CHECKING:
    from .agent import Agent


MessageRole = Literal["system", "agent"]
MESSAGE_ROLES: tuple[str, ...] = ("system", "agent")


@dataclass
class Message:
    """A single entry of the shared transcript."""

    id: str
    agent_id: str | None
    role: MessageRole
    content: str
    time: str

    def to_dict(self) -> dict[str, Any]:
        """Wire form, with the camelCase keys browser clients use."""
        return {
            "id": self.id,
            "agentId": self.agent_id,
            "role": self.role,
            "content": self.content,
            "time": self.time,
        }

    @classmethod
    def system(cls, content: str, message_id: str = "m0") -> "Message":
        """Narrator message, e.g. the proposition that opens a session."""
        return cls(
            id=message_id,
            agent_id=None,
            role="system",
            content=content,
            time=datetime.now().isoformat(),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        agent_id = data.get("agentId", data.get("agent_id"))
        role = data.get("role", "agent" if agent_id is not None else "system")
        if role not in MESSAGE_ROLES:
            raise ValueError(f"Unsupported message role {role!r}; expected one of {list(MESSAGE_ROLES)}")
        return cls(
            id=str(data["id"]),
            agent_id=None if agent_id is None else str(agent_id),
            role=role,
            content=str(data.get("content", "")),
            time=str(data.get("time", "")),
        )


@dataclass(frozen=True)
class AgentSnapshot:
    """Read-only view of an agent's identity and current status."""

    id: str
    name: str
    persona: str
    accent: str
    status: AgentStatus

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "persona": self.persona,
            "accent": self.accent,
            "status": self.status.value,
        }


@dataclass
class ParsedAgentResponse:
    """Decision extracted from a model reply."""

    should_respond: bool
    content: str


@dataclass
class RoundHandlers:
    """Optional observers notified about every change a round makes."""

    on_agent_status: AgentStatusCallback | None = None
    on_message_added: MessageCallback | None = None
    on_message_updated: MessageUpdatedCallback | None = None
    on_message_removed: MessageRemovedCallback | None = None
    on_agent_spoke: MessageCallback | None = None


@dataclass
class RoundParams:
    """Everything a single round needs."""

    model: str
    temperature: float
    max_agents: int
    streaming: bool
    agents: list["Agent"]
    messages: list[Message]
    requester: ChatCompletionRequester
    now: Callable[[], int] | None = None  # milliseconds, used for message ids
    random_source: Callable[[], float] | None = None
    shuffle_agents: bool = True
    attempt_floor: int = 3


@dataclass
class RoundResult:
    """Outcome of a round."""

    messages: list[Message]
    responded: int
    error: str | None = None
    attempts: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "messages": [message.to_dict() for message in self.messages],
            "responded": self.responded,
            "error": self.error,
        }
