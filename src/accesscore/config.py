"""Configuration contract for accesscore.

Pydantic-validated settings for the parts of the core that face the
calling layer: where a denied guard sends the user, which message it
carries, and how the package logs.

Direct os.environ/os.getenv usage is limited to
:func:`load_access_config_from_env`; everything else receives an
:class:`AccessConfig` instance.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AccessConfig(BaseModel):
    """Settings consumed by the guard and the logging setup.

    Environment variables (see :func:`load_access_config_from_env`):
        LOG_LEVEL                    — DEBUG | INFO | WARNING | ERROR | CRITICAL
        LOG_JSON                     — JSON log output (default: false)
        ACCESS_LOGIN_PATH            — redirect target for unauthenticated users
        ACCESS_FALLBACK_PATH         — redirect target for denied users
        ACCESS_UNAUTHORIZED_MESSAGE  — message carried by an unauthorized denial
        ACCESS_ADMIN_ONLY_MESSAGE    — message carried by an admin-only denial
        SERVICE_NAME                 — logger name for the embedding service
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Guard redirects
    login_path: str = Field(
        default="/login",
        description="Where an unauthenticated caller is sent",
    )
    fallback_path: str = Field(
        default="/dashboard",
        description="Where an authenticated but unauthorized caller is sent",
    )

    # Guard messages (user-facing)
    unauthenticated_message: str = Field(
        default="You need to sign in to access this resource",
    )
    unauthorized_message: str = Field(
        default="You do not have permission to access this resource",
    )
    admin_only_message: str = Field(
        default="This area is restricted to administrators",
    )

    service_name: Optional[str] = Field(
        default=None,
        description="Service name used for the service logger",
    )

    @field_validator("login_path", "fallback_path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Redirect targets are absolute application paths."""
        if not v.startswith("/"):
            raise ValueError(f"Redirect path must start with '/', got {v!r}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


def load_access_config_from_env() -> AccessConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed for accesscore
    settings. Unset variables fall back to the model defaults.

    Raises:
        ConfigurationError: if a variable holds an invalid value.
    """
    import os

    values: dict[str, object] = {
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_json": os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes", "on"),
        "service_name": os.getenv("SERVICE_NAME"),
    }
    env_fields = {
        "login_path": "ACCESS_LOGIN_PATH",
        "fallback_path": "ACCESS_FALLBACK_PATH",
        "unauthorized_message": "ACCESS_UNAUTHORIZED_MESSAGE",
        "admin_only_message": "ACCESS_ADMIN_ONLY_MESSAGE",
    }
    for field_name, env_name in env_fields.items():
        raw = os.getenv(env_name)
        if raw:
            values[field_name] = raw

    try:
        return AccessConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(str(e), errors=e.errors()) from e


__all__ = [
    "AccessConfig",
    "LogLevel",
    "load_access_config_from_env",
]
