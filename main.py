#!/usr/bin/env python3
"""Web server entry point for the persona arena."""

import logging
import os


def setup_logging(level: str | int = logging.INFO):
    """Configure logging for the arena entry points."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger().setLevel(level)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def start_web_server():
    """Start the FastAPI web server."""
    from config.settings import ConfigError, get_default_config

    try:
        setup_logging(get_default_config().system.log_level)
    except ConfigError as e:
        setup_logging()
        logging.getLogger(__name__).warning(f"Config not loaded at startup: {e}")

    import uvicorn

    from web.api import app

    port = int(os.environ.get("PORT", 8000))

    print("Starting Persona Arena web server...")
    print(f"API Documentation: http://localhost:{port}/docs")

    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info", access_log=True)


def main():
    start_web_server()


if __name__ == "__main__":
    main()
