"""Structured logging for gitboot.

gitboot keeps two logs apart:

- The *output channel* (see ``gitboot.host.OutputChannel``) is what the user
  sees: git command lines, git stderr, discovery progress.
- The *developer log* configured here is structlog-based and carries
  snake_case events with key-value context (``git_not_found``,
  ``config_write_failed``, ...).

Console rendering is the default; set ``GITBOOT_LOG_FORMAT=json`` for JSON
lines. ``GITBOOT_LOG_LEVEL`` selects the level.

Usage:
    from gitboot.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.info("git_located", path="/usr/bin/git", version="2.43.0")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "clear_context",
]

LOG_FORMAT_ENV_VAR = "GITBOOT_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "GITBOOT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _level_from_env() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _json_requested() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _shared_processors() -> list[Processor]:
    """Processors applied to both structlog and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(use_json: bool) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and route stdlib logging through it.

    Safe to call more than once; each call replaces the root handler.

    Args:
        force_json: Emit JSON regardless of ``GITBOOT_LOG_FORMAT``.
        level: Explicit level. Defaults to ``GITBOOT_LOG_LEVEL`` or WARNING.
    """
    use_json = force_json or _json_requested()
    log_level = level if level is not None else _level_from_env()

    exception_processor: Processor = (
        structlog.processors.dict_tracebacks
        if use_json
        else structlog.processors.format_exc_info
    )

    structlog.configure(
        processors=[
            *_shared_processors(),
            exception_processor,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(use_json),
            ],
            foreign_pre_chain=_shared_processors(),
        )
    )

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, normally called as ``get_logger(__name__)``."""
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log


def bind_context(**context: Any) -> None:
    """Bind context (e.g. ``session_id``) to every subsequent log event.

    Uses contextvars, so the binding follows the current asyncio task.
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Drop all context bound with :func:`bind_context`."""
    structlog.contextvars.clear_contextvars()
