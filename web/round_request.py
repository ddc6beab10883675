from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from arena_engine.models import MESSAGE_ROLES


class RoundRequest(BaseModel):
    """Request model for running one arena round server-side."""

    model_config = ConfigDict(populate_by_name=True)

    provider_key: str | None = Field(default=None, alias="providerKey")
    roster_key: str | None = Field(default=None, alias="rosterKey")
    model: str | None = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_agents: int = Field(default=5, ge=1, alias="maxAgents")
    streaming: bool = False
    messages: list[dict[str, Any]] = Field(default_factory=list)
    proposition: str | None = None

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, v):
        """Every message needs an id and, when given, a system or agent role."""
        for message in v:
            if "id" not in message:
                raise ValueError("Every message must have an id")
            if "role" in message and message["role"] not in MESSAGE_ROLES:
                raise ValueError(f"Message role must be one of {list(MESSAGE_ROLES)}")
        return v
