"""
Logging setup for gqlroute.

Modules log through ``logging.getLogger(__name__)`` and attach structured
data as ``extra={"context": {...}}``. ``setup_logging`` installs one handler
on the ``gqlroute`` logger using either:

- ConsoleFormatter: short human-readable lines (respects NO_COLOR)
- JSONLFormatter: one JSON object per line for log shippers

Library users who configure logging themselves never need to call it.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import IO, Any

ROOT_LOGGER = "gqlroute"

_NO_COLOR = bool(os.environ.get("NO_COLOR")) or not sys.stderr.isatty()


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "" if _NO_COLOR else "\033[0m"
    DIM = "" if _NO_COLOR else "\033[2m"
    COMPONENT = "" if _NO_COLOR else "\033[35m"  # Magenta

    DEBUG = "" if _NO_COLOR else "\033[36m"  # Cyan
    WARNING = "" if _NO_COLOR else "\033[33m"  # Yellow
    ERROR = "" if _NO_COLOR else "\033[31m"  # Red
    CRITICAL = "" if _NO_COLOR else "\033[35m"  # Magenta


def _component(record: logging.LogRecord) -> str:
    """``gqlroute.handler`` -> ``handler``; other loggers keep their name."""
    component = getattr(record, "component", None)
    if component:
        return str(component)
    prefix = ROOT_LOGGER + "."
    if record.name.startswith(prefix):
        return record.name[len(prefix) :]
    return record.name


class JSONLFormatter(logging.Formatter):
    """
    Formats log records as JSON Lines.

    Example output:
    {"timestamp":"2024-01-15T10:30:45.123Z","level":"DEBUG","component":"handler","message":"GraphQL request handled","context":{"status":200}}
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).isoformat(timespec="milliseconds")
        entry: dict[str, Any] = {
            "timestamp": timestamp.replace("+00:00", "Z"),
            "level": record.levelname,
            "component": _component(record),
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        if record.levelno >= logging.WARNING:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(entry, default=str, separators=(",", ":"))


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DEBUG,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.ERROR,
        logging.CRITICAL: Colors.CRITICAL,
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        component = _component(record)

        if _NO_COLOR:
            prefix = f"[{timestamp}] [{component}]"
        else:
            prefix = f"{Colors.DIM}{timestamp}{Colors.RESET} {Colors.COMPONENT}[{component}]{Colors.RESET}"

        if record.levelno != logging.INFO:
            level_name = record.levelname
            if not _NO_COLOR:
                level_name = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level_name}{Colors.RESET}"
            prefix = f"{prefix} {level_name}:"

        line = f"{prefix} {record.getMessage()}"
        context = getattr(record, "context", None)
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: int | str = logging.INFO,
    log_format: str = "console",
    stream: IO[str] | None = None,
) -> logging.Logger:
    """
    Configure the ``gqlroute`` logger.

    Args:
        level: Minimum log level (number or name such as "DEBUG")
        log_format: "console" or "jsonl"
        stream: Output stream (default: stderr)

    Returns:
        The configured ``gqlroute`` logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    if log_format not in ("console", "jsonl"):
        raise ValueError(f"Unknown log format: {log_format!r} (expected 'console' or 'jsonl')")

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONLFormatter() if log_format == "jsonl" else ConsoleFormatter())
    handler.setLevel(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger
