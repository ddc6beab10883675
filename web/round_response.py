from typing import Any

from pydantic import BaseModel


class RoundResponse(BaseModel):
    """Response model for a finished round."""

    messages: list[dict[str, Any]]
    responded: int
    error: str | None = None
