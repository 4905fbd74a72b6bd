"""Logging utilities for accesscore.

This module provides:
- Logging configuration from AccessConfig
- Safe, bounded previews of values for log lines
- A formatter that carries the acting user's id and role
- A logger adapter that binds user context from a Snapshot
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Optional

from .config import AccessConfig, LogLevel

if TYPE_CHECKING:
    from .permissions.snapshot import Snapshot


# Attributes every LogRecord has; anything else was passed via ``extra``.
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "user_id", "role",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a length-bounded, single-line preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list, tuple)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class AccessLogFormatter(logging.Formatter):
    """Formatter that includes the acting user and renders JSON or plain text."""

    def __init__(
        self,
        include_user: bool = True,
        json_format: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_user = include_user
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        user_id = getattr(record, "user_id", None)
        role = getattr(record, "role", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_user:
            if user_id:
                log_data["user_id"] = str(user_id)
            if role:
                log_data["role"] = getattr(role, "value", role)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_preview(value)

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if self.include_user and user_id:
            parts.append(f"user_id={log_data['user_id']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class AccessLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds user_id and role to log records.

    Usage:
        logger = get_access_logger(__name__)
        logger.info("Snapshot replaced", snapshot=new_snapshot)
    """

    def __init__(
        self,
        logger: logging.Logger,
        user_id: Optional[str] = None,
        role: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.user_id = user_id
        self.role = role

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        user_id = kwargs.pop("user_id", self.user_id)
        role = kwargs.pop("role", self.role)

        snapshot: Snapshot | None = kwargs.pop("snapshot", None)
        if snapshot is not None and snapshot.user is not None:
            user_id = user_id or snapshot.user.id
            role = role or snapshot.user.role

        extra = kwargs.get("extra", {})
        if user_id:
            extra["user_id"] = user_id
        if role:
            extra["role"] = role
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[AccessConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure the root logger for a process embedding accesscore.

    Args:
        config: AccessConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
    """
    if config is None:
        from .config import load_access_config_from_env

        config = load_access_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)
    use_json = config.log_json if json_format is None else json_format

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(AccessLogFormatter(include_user=True, json_format=use_json))
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_access_logger(
    name: str,
    user_id: Optional[str] = None,
    role: Optional[str] = None,
) -> AccessLoggerAdapter:
    """Get a logger adapter bound to a user.

    Example:
        logger = get_access_logger(__name__, user_id=snapshot.user.id)
        logger.warning("Task lookup failed")
    """
    logger = logging.getLogger(name)
    return AccessLoggerAdapter(logger, user_id=user_id, role=role)


__all__ = [
    "AccessLogFormatter",
    "AccessLoggerAdapter",
    "get_access_logger",
    "safe_preview",
    "setup_logging",
]
