"""Structured logging setup."""
from __future__ import annotations

import logging
from typing import Any

import structlog

_SENSITIVE_KEYS = {"password", "token", "secret", "authorization"}


def _redact_secrets(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Never let raw credentials reach the log sink."""
    for key in list(event_dict.keys()):
        lowered = key.lower()
        if any(sensitive in lowered for sensitive in _SENSITIVE_KEYS) and isinstance(event_dict[key], str):
            event_dict[key] = "[redacted]"
    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog for the process.

    JSON lines in production, coloured console output when ``json_output`` is off.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _redact_secrets,
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Get a logger bound to ``name``."""
    return structlog.get_logger(name)
