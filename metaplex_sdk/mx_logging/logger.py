"""
Structured logging for SDK events: operation dispatch, transaction submission
and confirmation, program error resolution.

Every module logs through get_logger() with an event_type as the first
argument and keyword context (signature, operation, program, mint ...).

The SDK never configures structlog itself: a host application keeps whatever
structlog or stdlib logging setup it already has. Scripts and services that
want the SDK's JSON output call configure_logging() once at startup; LOG_LEVEL
and LOG_FORMAT (json | console) are read from the environment when the
arguments are omitted.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

SDK_LOGGER_NAME = "metaplex_sdk"

# Program log lists are cut to their tail; the failing line is always last.
MAX_PROGRAM_LOG_LINES = 20


def _rename_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _render_solders(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Pubkey, Signature and Hash values as base58 strings."""
    for key, value in list(event_dict.items()):
        if type(value).__module__.startswith("solders"):
            event_dict[key] = str(value)
    return event_dict


def _tail_program_logs(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    logs = event_dict.get("logs")
    if isinstance(logs, list) and len(logs) > MAX_PROGRAM_LOG_LINES:
        event_dict["logs"] = logs[-MAX_PROGRAM_LOG_LINES:]
        event_dict["logs_omitted"] = len(logs) - MAX_PROGRAM_LOG_LINES
    return event_dict


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Install the SDK's structlog pipeline for the whole process."""
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    fmt = (fmt or os.getenv("LOG_FORMAT") or "json").strip().lower()
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        _rename_event,
        _render_solders,
        _tail_program_logs,
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), event_key="event_type"))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("rpc_tx_sent", signature=sig, instruction_count=3)

    Loggers are lazy: they pick up configure_logging() (or the host's own
    structlog configuration) on first use.
    """
    # structlog.get_logger(name, logger=name) collides with wrap_logger's
    # positional "logger" parameter; build the same lazy proxy directly.
    return structlog._config.BoundLoggerLazyProxy(
        None, logger_factory_args=(name,), initial_values={"logger": name}
    )


def bind_operation(operation_key: str) -> structlog.BoundLogger:
    """Logger with the operation key bound to all subsequent log calls."""
    return get_logger(SDK_LOGGER_NAME).bind(operation=operation_key)
