"""
Loop API — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the Supabase store and the realtime layer.
When:  Loaded once at module import time; checked during application startup.

Variable names:
    The web frontend of Loop exposes the same backend through NEXT_PUBLIC_*
    variables. Both spellings are accepted so a single .env file can serve
    the frontend and this API:

        SUPABASE_URL        or  NEXT_PUBLIC_SUPABASE_URL
        SUPABASE_ANON_KEY   or  NEXT_PUBLIC_SUPABASE_ANON_KEY
        REALTIME_URL        or  NEXT_PUBLIC_WEBSOCKET_URL
"""

import logging
from typing import Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field has a development default, so the process always starts.
    Missing backend credentials are reported by check_environment() at
    startup instead of failing import.
    """

    # ── Hosted Backend (Supabase) ─────────────────────────────────────────
    # What: Base URL of the hosted backend; PostgREST lives under /rest/v1
    # and the identity provider under /auth/v1
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
        description="Hosted backend base URL",
    )

    # What: Public (anon) key; used as the apikey header when no privileged
    # key is configured
    supabase_anon_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
        description="Hosted backend public key",
    )

    # What: Privileged (service role) key used for all table and RPC access
    supabase_service_role_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_SERVICE_ROLE_KEY"),
        description="Hosted backend privileged key",
    )

    # What: Seconds before a backend call is abandoned. None = wait forever,
    # leaving timeouts to the hosting runtime.
    backend_timeout: Optional[float] = Field(default=None, gt=0)

    # ── Realtime ──────────────────────────────────────────────────────────
    realtime_url: str = Field(
        default="http://localhost:3001",
        validation_alias=AliasChoices("REALTIME_URL", "NEXT_PUBLIC_WEBSOCKET_URL"),
        description="socket.io server endpoint",
    )

    # What: Open the realtime connection during startup
    realtime_enabled: bool = Field(default=True)

    # What: Reconnection attempts handed to the socket.io client (0 = forever)
    realtime_reconnection_attempts: int = Field(default=5, ge=0, le=100)

    # ── Media Storage ─────────────────────────────────────────────────────
    # Checked at startup alongside the backend keys; consumed by the upload
    # pipeline, which is not part of this service.
    cloudinary_cloud_name: str = Field(default="")
    cloudinary_api_key: str = Field(default="")
    cloudinary_api_secret: str = Field(default="")

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (split by cors_origins_list)
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def backend_api_key(self) -> str:
        """Key sent to the backend: the privileged key, else the public one."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("supabase_url", "realtime_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }

    def required_environment(self) -> Dict[str, str]:
        """
        What:  Maps each required environment variable to its loaded value.
        Who:   check_environment() and log_environment_status().
        """
        return {
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_ANON_KEY": self.supabase_anon_key,
            "SUPABASE_SERVICE_ROLE_KEY": self.supabase_service_role_key,
            "CLOUDINARY_CLOUD_NAME": self.cloudinary_cloud_name,
            "CLOUDINARY_API_KEY": self.cloudinary_api_key,
            "CLOUDINARY_API_SECRET": self.cloudinary_api_secret,
        }


def check_environment(config: Settings) -> bool:
    """
    Pass/fail check of the required environment variables.

    What:    Logs the names of any missing variables and returns False, or
             logs success and returns True.
    When:    Called from the application lifespan at startup.

    Never raises: the server keeps running so health checks and the public
    endpoints stay reachable while the operator fixes the configuration.
    """
    missing = [name for name, value in config.required_environment().items() if not value]
    if missing:
        logger.error("Missing environment variables: %s", ", ".join(missing))
        return False
    logger.info("All required environment variables are present")
    return True


def log_environment_status(config: Settings) -> None:
    """Logs which required variables are set, without their values."""
    status = {name: bool(value) for name, value in config.required_environment().items()}
    logger.info("Environment status: %s", status)


# Singleton instance, imported throughout the application
settings = Settings()
