"""Shared FastAPI dependencies."""

import logging

import httpx
from fastapi import HTTPException, Request

from config.settings import ArenaConfig, ConfigError, get_default_config

logger = logging.getLogger(__name__)


def get_arena_config() -> ArenaConfig:
    """Load the arena config for the current request.

    The file is read on every call so edits show up without a restart.
    """
    try:
        return get_default_config()
    except ConfigError as e:
        logger.error(f"Failed to load arena config: {e}")
        raise HTTPException(status_code=500, detail=str(e))


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the application's shared upstream HTTP client."""
    return request.app.state.http_client
