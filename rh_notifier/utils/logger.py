"""structlog setup: human-readable console output plus a JSON-lines file under output/logs.

Fields that carry WhatsApp numbers are masked before rendering, whichever module logs them.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from rh_notifier.config import LOG_FILE, LOG_LEVEL, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

PHONE_FIELDS = ("whatsapp", "target", "to", "phone")
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access")

_configured = False


def _level() -> int:
    if VERBOSE_LOGGING:
        return logging.DEBUG
    if LOG_LEVEL.isdigit():
        return int(LOG_LEVEL)
    level = logging.getLevelName(LOG_LEVEL)
    return level if isinstance(level, int) else logging.INFO


def mask_phone_fields(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Keep only the last four digits of raw numbers in PHONE_FIELDS."""
    for key in PHONE_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > 4 and value.isdigit():
            event_dict[key] = "*" * (len(value) - 4) + value[-4:]
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        mask_phone_fields,
    ]


def _handler(handler: logging.Handler, renderer: Any, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_shared_processors())
    )
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = _level()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(
        _handler(logging.StreamHandler(), structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()), level)
    )
    root.addHandler(
        _handler(logging.FileHandler(LOG_FILE, encoding="utf-8"), structlog.processors.JSONRenderer(), level)
    )
    logging.captureWarnings(True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "rh_notifier", **bindings: Any) -> BoundLogger:
    """Logger for `name`; configures logging on first call."""
    _configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


def bind_context(**context: Any) -> None:
    """Attach fields (user_id, command, ...) to every entry logged in this context."""
    structlog.contextvars.bind_contextvars(**context)


def unbind_context(*keys: str) -> None:
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
