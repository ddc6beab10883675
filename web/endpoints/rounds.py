"""Server-side arena round endpoint."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException

from arena_engine import (
    Message,
    RoundParams,
    create_agents_from_roster,
    format_system_proposition,
    run_arena_round,
)
from config.settings import ArenaConfig, ConfigError
from providers import RequesterFactory
from web.dependencies import get_arena_config, get_http_client
from web.round_request import RoundRequest
from web.round_response import RoundResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/rounds", response_model=RoundResponse)
async def run_round(
    request: RoundRequest,
    config: ArenaConfig = Depends(get_arena_config),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Run one round against the configured provider and return the new log.

    Round failures are reported in ``error`` alongside the partial log, not as
    an HTTP error.
    """
    try:
        provider_key = request.provider_key or config.pick_default_provider_key()
        provider = config.get_provider(provider_key)
        roster_key = request.roster_key or config.pick_default_roster_key()
        roster = config.get_roster(roster_key)
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))

    model = (request.model or "").strip() or provider.models[0]

    messages = [Message.from_dict(item) for item in request.messages]
    if not messages:
        proposition = (request.proposition or "").strip() or config.get_default_proposition()
        if not proposition:
            raise HTTPException(status_code=400, detail="Missing proposition.")
        messages = [Message.system(format_system_proposition(proposition, config.prompts))]

    requester = RequesterFactory.create(
        provider, client=client, timeout=config.system.request_timeout
    )
    params = RoundParams(
        model=model,
        temperature=request.temperature,
        max_agents=request.max_agents,
        streaming=request.streaming,
        agents=create_agents_from_roster(roster.agents, config.prompts),
        messages=messages,
        requester=requester,
    )

    logger.info(
        f"Running round: provider={provider_key} roster={roster_key} model={model}"
    )
    result = await run_arena_round(params)
    return RoundResponse(**result.to_dict())
