"""Unit tests for structured logging setup."""

import io
import json
import logging

import pytest
import structlog

from talkvote.observability import (
    bind_session_context,
    clear_session_context,
    configure_logging,
)


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.mark.unit
    def test_json_output_with_session_context(self) -> None:
        """Test JSON lines carry the bound session context."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=True)

        bind_session_context("session-1", "alice")
        try:
            structlog.get_logger().bind(component="store").info("vote_recorded")
        finally:
            clear_session_context()

        event = json.loads(output.getvalue().strip())
        assert event["event"] == "vote_recorded"
        assert event["level"] == "info"
        assert event["session_id"] == "session-1"
        assert event["user"] == "alice"
        assert event["component"] == "store"
        assert "timestamp" in event

    @pytest.mark.unit
    def test_level_filtering(self) -> None:
        """Test events below the configured level are dropped."""
        output = io.StringIO()
        configure_logging(level=logging.WARNING, output=output)

        log = structlog.get_logger()
        log.info("quiet_event")
        log.warning("loud_event")

        text = output.getvalue()
        assert "quiet_event" not in text
        assert "loud_event" in text

    @pytest.mark.unit
    def test_context_cleared(self) -> None:
        """Test cleared context is not attached to later events."""
        output = io.StringIO()
        configure_logging(level=logging.INFO, output=output, json_format=True)

        bind_session_context("session-1", "alice")
        clear_session_context()
        structlog.get_logger().info("after_clear")

        event = json.loads(output.getvalue().strip())
        assert "session_id" not in event
