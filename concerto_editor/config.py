"""
Configuration for the Concerto editor service.

Uses pydantic-settings for environment variable loading.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Editor service configuration loaded from environment."""

    # Server settings
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8082, description="Bind port")

    # CORS settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )

    # Sessions
    max_sessions: int = Field(default=100, description="Maximum open editor sessions")

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="logging.Formatter format string",
    )

    model_config = {"env_prefix": "EDITOR_"}
