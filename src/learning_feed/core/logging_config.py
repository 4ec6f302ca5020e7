"""Log output for the API process and the scripts.

Everything ends up on stdout through one root handler.  Application code
logs with structlog and dotted event names::

    logger = structlog.get_logger(__name__)
    logger.info("content.completed", item_id=7, xp_awarded=150)

Third-party libraries (uvicorn, SQLAlchemy, httpx) log through the stdlib
and are rendered by the same ``ProcessorFormatter``, so both kinds of
record share one shape::

    {"event": "content.completed", "item_id": 7, "xp_awarded": 150,
     "service": "learning_feed", "version": "0.1.0", "request_id": "...",
     "level": "info", "logger": "learning_feed.core.lifecycle",
     "timestamp": "2026-03-10T12:00:00.000000Z"}

Values longer than :data:`MAX_LOGGED_VALUE_LENGTH` characters (article
bodies, long notes) are cut down before rendering.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from learning_feed import __version__

SERVICE_NAME = "learning_feed"

MAX_LOGGED_VALUE_LENGTH = 300
"""Longer string values are truncated and suffixed with the dropped length."""

_UNTRUNCATED_KEYS = frozenset({"event", "exception", "stack"})

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "aiosqlite")

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
"""Set by the request middleware in ``api/main.py`` for the current request."""


# ---------------------------------------------------------------------------
# Processors
# ---------------------------------------------------------------------------


def _add_service_context(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def _add_request_id(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Attach ``request_id`` to records from libraries that never see the
    structlog context (uvicorn, SQLAlchemy)."""
    request_id = request_id_var.get()
    if request_id is not None:
        event_dict.setdefault("request_id", request_id)
    return event_dict


def _truncate_long_values(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Shorten oversized string values.  ``event`` and tracebacks are kept whole."""
    for key, value in event_dict.items():
        if key in _UNTRUNCATED_KEYS or not isinstance(value, str):
            continue
        overflow = len(value) - MAX_LOGGED_VALUE_LENGTH
        if overflow > 0:
            event_dict[key] = f"{value[:MAX_LOGGED_VALUE_LENGTH]}...(+{overflow} chars)"
    return event_dict


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def configure_logging(log_level: str = "INFO") -> None:
    """Install the root handler and the structlog pipeline.

    ``DEBUG`` renders coloured console lines for local work; any other
    level renders one JSON object per line.  Below ``DEBUG`` the chatty
    access and HTTP client loggers are raised to ``WARNING``.

    Calling it again replaces the previous handler instead of adding one.

    Args:
        log_level: Standard level name, case-insensitive.  Unknown names
            fall back to ``INFO``.
    """
    level_name = log_level.upper()
    debug = level_name == "DEBUG"

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_request_id,
        _add_service_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _truncate_long_values,
    ]
    renderer: Processor = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if debug else logging.WARNING)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
