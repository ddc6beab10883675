from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatProxyRequest(BaseModel):
    """Request model for forwarding a chat completion to a configured provider."""

    model_config = ConfigDict(populate_by_name=True)

    provider_key: Any = Field(default=None, alias="providerKey")
    payload: Any = None
