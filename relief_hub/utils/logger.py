"""structlog setup for the API, the CLI and the client.

Events go to stderr through the colored console renderer and to
``output/logs/app.jsonl`` as one JSON object per line. Context bound with
``log_context`` (the request id, for example) is merged into every event.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from typing import Any, Iterator, Optional

import structlog

from relief_hub.config import LOG_FILE, LOG_LEVEL, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Third-party loggers kept at WARNING; uvicorn's own lines pass through unchanged
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "passlib", "multipart")
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

_configured_level: Optional[int] = None


def level_from_name(name: str | int | None) -> int:
    if isinstance(name, int):
        return name
    if not name:
        return logging.INFO
    name = name.strip()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _handler(handler: logging.Handler, renderer: Any, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_pre_chain()))
    return handler


def configure_logging(level: str | int | None = None) -> int:
    """(Re)configure logging. ``level`` overrides LOG_LEVEL; VERBOSE_LOGGING forces DEBUG.

    Returns the effective level.
    """
    global _configured_level
    effective = logging.DEBUG if VERBOSE_LOGGING else level_from_name(level if level is not None else LOG_LEVEL)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(effective)
    root.addHandler(_handler(logging.StreamHandler(), structlog.dev.ConsoleRenderer(colors=True), effective))
    root.addHandler(
        _handler(
            RotatingFileHandler(LOG_FILE, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"),
            structlog.processors.JSONRenderer(),
            effective,
        )
    )
    logging.captureWarnings(True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=_pre_chain()
        + [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(effective),
        cache_logger_on_first_use=False,
    )
    _configured_level = effective
    return effective


def get_logger(name: str = "relief_hub", **bindings: Any) -> BoundLogger:
    if _configured_level is None:
        configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


@contextmanager
def log_context(**context: Any) -> Iterator[None]:
    """Bind context for one block (an HTTP request, a CLI command); restored on exit."""
    with structlog.contextvars.bound_contextvars(**context):
        yield
