"""Chat completion proxy endpoint."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from config.settings import ArenaConfig
from providers import RequesterFactory
from web.chat_proxy_request import ChatProxyRequest
from web.dependencies import get_arena_config, get_http_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

PASSTHROUGH_HEADERS = ("content-type", "cache-control")


@router.post("/chat")
async def proxy_chat_completion(
    request: ChatProxyRequest,
    config: ArenaConfig = Depends(get_arena_config),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Forward a chat completion request to the provider and stream the reply back."""
    provider_key = request.provider_key if isinstance(request.provider_key, str) else ""
    if not provider_key.strip():
        raise HTTPException(status_code=400, detail="Missing providerKey.")
    if not isinstance(request.payload, dict):
        raise HTTPException(status_code=400, detail="Missing payload.")

    try:
        provider = config.get_provider(provider_key)
        requester = RequesterFactory.create(
            provider, client=client, timeout=config.system.request_timeout
        )
        upstream = await requester(request.payload)
    except Exception as e:
        logger.error(f"Chat proxy to '{provider_key}' failed: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Chat proxy failed.")

    headers = {
        name: upstream.headers[name]
        for name in PASSTHROUGH_HEADERS
        if name in upstream.headers
    }
    if "text/event-stream" in headers.get("content-type", ""):
        headers["connection"] = "keep-alive"
        headers["x-accel-buffering"] = "no"

    logger.debug(
        f"Proxying {provider_key} response: {upstream.status_code} "
        f"{headers.get('content-type', '')}"
    )
    return StreamingResponse(
        upstream.aiter_bytes(),
        status_code=upstream.status_code,
        headers=headers,
        background=BackgroundTask(upstream.aclose),
    )
