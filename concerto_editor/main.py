"""
Concerto editor service - Main entry point.

Usage:
    python -m concerto_editor

Configuration is entirely via EDITOR_* environment variables.
See config.py for all available settings.
"""

from __future__ import annotations

import logging

import uvicorn

from .app import create_app
from .config import Settings

logger = logging.getLogger(__name__)


def setup_logging(settings: Settings) -> None:
    """Configure logging based on configuration.

    Args:
        settings: Service configuration
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(settings.log_format))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Reduce noise from libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def main() -> None:
    """Run the editor service."""
    settings = Settings()
    setup_logging(settings)

    logger.info(f"Starting Concerto editor on {settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
