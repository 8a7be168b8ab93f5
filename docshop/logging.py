"""Structlog setup for the service and per-request log context."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

from docshop.settings import Settings, get_settings

if TYPE_CHECKING:
    from structlog.typing import EventDict

_configured = False


def _rename_event_key(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Store the log event under "message" instead of "event"."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Settings) -> None:
    """Apply *settings* to stdlib logging and structlog.

    Calling it again replaces the handlers and processor chain, so each
    application instance logs with its own settings.
    """
    global _configured  # noqa: PLW0603

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))
    logging.basicConfig(level=log_level, format="%(message)s", handlers=handlers, force=True)

    renderers: list[Any] = [_rename_event_key, structlog.processors.JSONRenderer()]
    if not settings.log_json:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach module-level loggers.
        cache_logger_on_first_use=False,
    )
    _configured = True


def bind_request_context(**values: Any) -> None:
    """Start a fresh log context for the current request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str = "docshop") -> structlog.BoundLogger:
    """Return a named logger; falls back to environment settings if nothing configured logging yet."""
    if not _configured:
        configure_logging(get_settings())
    return structlog.get_logger(name)
