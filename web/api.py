"""FastAPI web application for the persona arena."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from web.endpoints.chat import router as chat_router
from web.endpoints.config import router as config_router
from web.endpoints.rounds import router as rounds_router
from web.endpoints.system import router as system_router

logger: logging.Logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the shared upstream HTTP client for the app's lifetime."""
    app.state.http_client = httpx.AsyncClient()
    logger.info("Upstream HTTP client started")

    yield

    await app.state.http_client.aclose()
    logger.info("Upstream HTTP client closed")


def get_allowed_origins() -> list[str] | None:
    """Get CORS origins from environment or use development defaults."""
    env_origins: str | None = os.environ.get("ALLOWED_ORIGINS")
    if env_origins:
        origins = [origin.strip() for origin in env_origins.split(",")]
        return origins
    return None


def create_app() -> FastAPI:
    app = FastAPI(
        title="Persona Arena",
        description="Multi-agent persona debates over OpenAI-compatible providers",
        version="0.1.0",
        lifespan=lifespan,
    )

    allowed_origins = get_allowed_origins()
    if allowed_origins:
        logger.info(f"Setting CORS allowed origins: {allowed_origins}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        logger.info("No ALLOWED_ORIGINS set, using development CORS settings")
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(chat_router)
    app.include_router(config_router)
    app.include_router(rounds_router)
    app.include_router(system_router)
    return app


app: FastAPI = create_app()
