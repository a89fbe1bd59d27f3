"""Structured logging built on Loguru.

This module configures Loguru for the StoreConfig service and routes
standard library logging through it, so every record shares one format.

Formatter types:
- **console**: Human-readable with inline context (development)
- **json**: One JSON object per line (deployed environments)

Context fields bound by the operation scope (correlation ID, store ID,
operation name) are rendered first in console output and copied as
top-level keys in JSON output.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from typing import Any, Final, Protocol, cast

from loguru import logger

from src.core.config import get_settings


class _LoggingState:
    """Whether ``setup_logging`` already ran in this process."""

    def __init__(self) -> None:
        self.configured = False


_state = _LoggingState()


class SettingsProtocol(Protocol):
    """What ``setup_logging`` reads from the settings."""

    @property
    def debug(self) -> bool:
        """Enables Loguru diagnose and backtrace output."""
        ...

    @property
    def log_config(self) -> LogConfigProtocol:
        """Nested logging section."""
        ...


class LogConfigProtocol(Protocol):
    """What ``setup_logging`` reads from the log configuration."""

    @property
    def log_level(self) -> str:
        """Minimum level name."""
        ...

    @property
    def log_formatter_type(self) -> str | None:
        """``console`` or ``json``."""
        ...


DEFAULT_LOG_FORMAT: Final[str] = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)
CORRELATION_ID_DISPLAY_LENGTH: Final[int] = 8
MAX_FIELD_VALUE_LENGTH: Final[int] = 100
PRIORITY_FIELDS: Final[tuple[str, ...]] = (
    "correlation_id",
    "operation",
    "store_id",
    "error_code",
)


def _escape(value: object) -> str:
    """Escape braces so Loguru does not treat them as format fields."""
    return str(value).replace("{", "{{").replace("}", "}}")


def _format_priority_field(field: str, value: object) -> str:
    """Render one of the ``PRIORITY_FIELDS``.

    Args:
        field: Name of the priority field.
        value: Its bound value.

    Returns:
        str: Formatted, brace-escaped value.
    """
    text = str(value)
    if field == "correlation_id" and len(text) > CORRELATION_ID_DISPLAY_LENGTH:
        text = text[:CORRELATION_ID_DISPLAY_LENGTH]
    return _escape(text)


def _format_extra_field(key: str, value: object) -> str:
    """Format an extra field for display, redacting sensitive names.

    Args:
        key: Name of the extra field.
        value: The field value.

    Returns:
        str: The ``key=value`` pair, escaped and truncated.
    """
    str_value = str(value)

    if key in get_settings().log_config.sensitive_fields:
        str_value = "[REDACTED]"
    elif len(str_value) > MAX_FIELD_VALUE_LENGTH:
        str_value = str_value[: MAX_FIELD_VALUE_LENGTH - 3] + "..."

    return f"{_escape(key)}={_escape(str_value)}"


def _format_context_fields(extra: dict[str, Any]) -> list[str]:
    """Render the bound context, priority fields first.

    Args:
        extra: The record's ``extra`` mapping.

    Returns:
        list[str]: Markup snippets, one per field.
    """
    context_parts = [
        f"<yellow>{_format_priority_field(field, extra[field])}</yellow>"
        for field in PRIORITY_FIELDS
        if extra.get(field) is not None
    ]

    context_parts.extend(
        f"<dim>{_format_extra_field(key, value)}</dim>"
        for key, value in extra.items()
        if key not in PRIORITY_FIELDS and not key.startswith("_") and value is not None
    )

    return context_parts


def format_console_with_context(record: dict[str, Any]) -> str:
    """Build the console line of a record, context included.

    Args:
        record: The Loguru record.

    Returns:
        str: Format string for Loguru, with context inlined.
    """
    try:
        time_str = record["time"].strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level_name = record["level"].name

        parts = [
            f"<green>{time_str}</green>",
            f"<level>{level_name: <8}</level>",
            f"<cyan>{record['name']}:{record['function']}:{record['line']}</cyan>",
        ]

        context_parts = _format_context_fields(record.get("extra", {}))
        if context_parts:
            parts.append(" ".join(f"[{part}]" for part in context_parts))

        parts.append(_escape(record.get("message", "")))

        if record.get("exception"):
            parts.append("\n{exception}")

        return " | ".join(parts) + "\n"
    except (AttributeError, TypeError, ValueError, KeyError):
        return DEFAULT_LOG_FORMAT + "\n"


def serialize_for_json(record: dict[str, Any]) -> str:
    """Format log record as a single JSON line.

    Args:
        record: The Loguru record.

    Returns:
        str: One JSON object followed by a newline.
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    if extra := record.get("extra", {}):
        log_entry.update({k: v for k, v in extra.items() if not k.startswith("_")})

    if exc := record.get("exception"):
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return json.dumps(log_entry, default=str) + "\n"


LOG_FORMATTERS: dict[str, Callable[[dict[str, Any]], str] | None] = {
    "console": None,
    "json": serialize_for_json,
}


class InterceptHandler(logging.Handler):
    """Standard library handler that re-emits records through Loguru.

    Libraries that log through the standard library end up in the same
    sinks and format as the application's own records.
    """

    def emit(self, record: logging.LogRecord) -> None:
        """Re-emit ``record`` at the matching Loguru level.

        Args:
            record: The standard library record.
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so Loguru reports the real caller
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _json_sink(message: object) -> None:
    """Write a Loguru message through the JSON serializer."""
    record = getattr(message, "record", None)
    if record is not None:
        sys.stdout.write(serialize_for_json(record))
        sys.stdout.flush()


def setup_logging(settings: SettingsProtocol) -> None:
    """Configure Loguru with the formatter selected in settings.

    Args:
        settings: Settings exposing ``debug`` and ``log_config``.

    Note:
        This function only configures logging once per process.
    """
    if _state.configured:
        return

    logger.remove()

    formatter_type = settings.log_config.log_formatter_type or "console"

    if LOG_FORMATTERS.get(formatter_type) is None:
        logger.add(
            sys.stdout,
            format=cast("Any", format_console_with_context),
            level=settings.log_config.log_level,
            colorize=True,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )
    else:
        logger.add(
            _json_sink,
            level=settings.log_config.log_level,
            diagnose=False,
            backtrace=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logger.info(
        "Logging configured with {} formatter",
        formatter_type,
        formatter_type=formatter_type,
        log_level=settings.log_config.log_level,
    )

    _state.configured = True
