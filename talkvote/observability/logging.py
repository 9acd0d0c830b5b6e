"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    level: int = logging.WARNING,
    output: TextIO | None = None,
    json_format: bool = False,
) -> None:
    """Configure structured logging for the application.

    Logs go to stderr by default so they never interleave with the
    interactive prompts written to stdout.

    Args:
        level: Logging level (default: WARNING).
        output: Output stream (default: current sys.stderr).
        json_format: Whether to use JSON format (default: False).
    """
    output = output or sys.stderr

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=level,
    )


def bind_session_context(session_id: str, user: str) -> None:
    """Bind session context to all subsequent log messages.

    Args:
        session_id: Unique identifier of the CLI invocation.
        user: Voting user.
    """
    structlog.contextvars.bind_contextvars(session_id=session_id, user=user)


def clear_session_context() -> None:
    """Clear session context from log messages."""
    structlog.contextvars.unbind_contextvars("session_id", "user")
