"""Configuration, provider and roster endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from config.settings import ArenaConfig, ConfigError
from web.dependencies import get_arena_config

router = APIRouter(prefix="/api")


@router.get("/config")
async def get_config(config: ArenaConfig = Depends(get_arena_config)):
    """Everything a client needs to start a session."""
    return {
        "ui": {"defaultProposition": config.get_default_proposition()},
        "prompts": config.prompts.model_dump(by_alias=True),
        "defaultProvider": config.pick_default_provider_key(),
        "providers": config.list_provider_summaries(),
        "defaultRoster": config.pick_default_roster_key(),
        "rosters": config.list_roster_summaries(),
    }


@router.get("/providers")
async def get_providers(config: ArenaConfig = Depends(get_arena_config)):
    """List configured providers without their credentials."""
    return {
        "defaultProvider": config.pick_default_provider_key(),
        "providers": config.list_provider_summaries(),
    }


@router.get("/rosters")
async def get_rosters(config: ArenaConfig = Depends(get_arena_config)):
    return {
        "defaultRoster": config.pick_default_roster_key(),
        "rosters": config.list_roster_summaries(),
    }


@router.get("/roster")
async def get_roster(
    roster: str | None = None, config: ArenaConfig = Depends(get_arena_config)
):
    """Get one roster with its agents, falling back to the default roster."""
    key = (roster or "").strip() or config.pick_default_roster_key()
    try:
        selected = config.get_roster(key)
    except ConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "defaultRoster": config.pick_default_roster_key(),
        "roster": {
            "key": key,
            "name": selected.name,
            "agents": [agent.model_dump() for agent in selected.agents],
        },
    }
