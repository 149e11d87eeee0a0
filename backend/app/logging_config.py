"""structlog setup for StackFast.

Events are rendered as JSON in production and as a colored console line
elsewhere. Two processors scrub events before rendering: credentials
(matched by substring, e.g. ``redis_password``) and the free text a user
typed about their project (matched by exact key).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

import structlog

from app.config import Environment, Settings, get_settings

CREDENTIAL_FRAGMENTS = ("password", "secret", "token", "api_key", "authorization", "cookie")
PROJECT_TEXT_KEYS = frozenset({"project_idea", "description", "project_prompt"})

# Chatty at INFO and irrelevant to recommendation traces
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "redis")

EventDict = dict[str, Any]


def _redactor(
    should_redact: Callable[[str], bool], placeholder: str
) -> Callable[[Any, str, EventDict], EventDict]:
    def processor(_logger: Any, _method_name: str, event_dict: EventDict) -> EventDict:
        for key in event_dict:
            if should_redact(key):
                event_dict[key] = placeholder
        return event_dict

    return processor


_filter_sensitive_data = _redactor(
    lambda key: any(fragment in key.lower() for fragment in CREDENTIAL_FRAGMENTS),
    "[REDACTED]",
)
_filter_project_text = _redactor(lambda key: key in PROJECT_TEXT_KEYS, "[TEXT_REDACTED]")


def _renderer(settings: Settings) -> structlog.types.Processor:
    if settings.environment == Environment.PRODUCTION:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def setup_logging() -> None:
    """Route structlog and stdlib logging through one stdout handler."""
    settings = get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _filter_sensitive_data,
            _filter_project_text,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.log_level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
