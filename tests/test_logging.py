"""Tests for accesscore.logging module."""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import patch

import pytest

from accesscore import (
    AccessConfig,
    AccessLogFormatter,
    LogLevel,
    Role,
    Snapshot,
    User,
    get_access_logger,
    safe_preview,
    setup_logging,
)


def _record(msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestSafePreview:
    """Tests for safe_preview function."""

    def test_none_value(self) -> None:
        """Test that None returns empty string."""
        assert safe_preview(None) == ""

    def test_string_with_whitespace(self) -> None:
        """Test that whitespace is normalized."""
        assert safe_preview("task\n\tt1  denied") == "task t1 denied"

    def test_string_truncation(self) -> None:
        """Test that long strings are truncated."""
        result = safe_preview("a" * 300, limit=100)
        assert len(result) == 100
        assert result.endswith("…")

    def test_dict_value(self) -> None:
        """Test that dicts are converted to JSON."""
        result = safe_preview({"resource": "project", "id": "p1"})
        assert json.loads(result) == {"resource": "project", "id": "p1"}

    def test_str_enum_value(self) -> None:
        """Test that str enums preview as their value."""
        assert safe_preview(Role.ADMIN) == "admin"


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_with_config(self) -> None:
        """Test logging setup with AccessConfig."""
        setup_logging(config=AccessConfig(log_level=LogLevel.DEBUG), json_format=False)
        assert logging.getLogger().level == logging.DEBUG

    @patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}, clear=True)
    def test_setup_with_env(self) -> None:
        """Test logging setup loading from environment."""
        setup_logging(json_format=False)
        assert logging.getLogger().level == logging.WARNING

    def test_service_logger_level(self) -> None:
        setup_logging(config=AccessConfig(log_level=LogLevel.ERROR, service_name="projects-web"))
        assert logging.getLogger("projects-web").level == logging.ERROR

    def test_json_format(self, capsys: pytest.CaptureFixture) -> None:
        """Test JSON format output."""
        setup_logging(config=AccessConfig(log_level=LogLevel.INFO), json_format=True)

        logging.getLogger("test").info("Guard denied task:edit")

        data = json.loads(capsys.readouterr().err.strip())
        assert data["level"] == "INFO"
        assert data["message"] == "Guard denied task:edit"
        assert data["logger"] == "test"

    def test_plain_format(self, capsys: pytest.CaptureFixture) -> None:
        """Test plain text format output."""
        setup_logging(config=AccessConfig(log_level=LogLevel.INFO), json_format=False)

        logging.getLogger("test").info("Snapshot replaced")

        output = capsys.readouterr().err.strip()
        assert "INFO" in output
        assert "Snapshot replaced" in output
        assert not output.startswith("{")


class TestAccessLogFormatter:
    """Tests for AccessLogFormatter."""

    def test_json_includes_user(self) -> None:
        record = _record()
        record.user_id = "u1"
        record.role = Role.MANAGER
        data = json.loads(AccessLogFormatter(json_format=True).format(record))
        assert data["user_id"] == "u1"
        assert data["role"] == "manager"

    def test_json_previews_extras(self) -> None:
        record = _record()
        record.resource = {"kind": "task", "id": "t1"}
        data = json.loads(AccessLogFormatter(json_format=True).format(record))
        assert json.loads(data["resource"]) == {"kind": "task", "id": "t1"}

    def test_user_omitted_when_disabled(self) -> None:
        record = _record()
        record.user_id = "u1"
        data = json.loads(AccessLogFormatter(include_user=False, json_format=True).format(record))
        assert "user_id" not in data

    def test_plain_format(self) -> None:
        record = _record()
        record.user_id = "u1"
        result = AccessLogFormatter(json_format=False).format(record)
        assert "INFO" in result
        assert "user_id=u1" in result
        assert result.endswith(": Test message")


class TestAccessLoggerAdapter:
    """Tests for the user-bound logger adapter."""

    def test_bound_user(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("accesscore.test", user_id="u1", role="member")
        with caplog.at_level(logging.INFO, logger="accesscore.test"):
            logger.info("Filter applied")
        record = caplog.records[-1]
        assert record.user_id == "u1"
        assert record.role == "member"

    def test_user_from_snapshot(self, caplog: pytest.LogCaptureFixture) -> None:
        snapshot = Snapshot(user=User(id="u7", role=Role.ADMIN))
        logger = get_access_logger("accesscore.test")
        with caplog.at_level(logging.INFO, logger="accesscore.test"):
            logger.info("Snapshot replaced", snapshot=snapshot)
        record = caplog.records[-1]
        assert record.user_id == "u7"
        assert record.role == Role.ADMIN

    def test_without_user(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_access_logger("accesscore.test")
        with caplog.at_level(logging.INFO, logger="accesscore.test"):
            logger.info("No snapshot", snapshot=Snapshot.unavailable())
        assert not hasattr(caplog.records[-1], "user_id")
