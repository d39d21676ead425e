"""Logging for the pre-orders service.

structlog builds the event dicts; the standard library routes them. Every
handler shares one ``ProcessorFormatter`` so records from protean, uvicorn and
our own loggers come out in the same shape: coloured key/value lines on a
terminal, JSON lines in production and staging.

Files go to ``$LOG_DIR/preorders.log`` with errors duplicated into
``preorders_error.log``. Both rotate at 10 MB.
"""

import logging
import logging.handlers
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog

from preorders.config import get_environment, get_log_dir

_DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

_QUIET_LOGGERS = ("protean", "asyncio", "uvicorn.access")

_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_KEEP = 5


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _DEFAULT_LEVELS.get(get_environment(), "INFO")).upper()


def _wants_json() -> bool:
    return get_environment() in ("production", "staging")


def _pre_chain() -> list:
    """Processors applied to every record, structlog-born or not."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]


def _formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_ROTATE_BYTES,
        backupCount=_ROTATE_KEEP,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _build_handlers(level: str, log_dir: Path) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    handlers = [
        console,
        _rotating_file(log_dir / "preorders.log", level),
        _rotating_file(log_dir / "preorders_error.log", logging.ERROR),
    ]

    # Files are always JSON so they can be shipped as-is
    console.setFormatter(_formatter(_wants_json()))
    for handler in handlers[1:]:
        handler.setFormatter(_formatter(json_output=True))
    return handlers


def configure_logging(level: str | None = None, log_dir: str | None = None) -> None:
    """Wire structlog into the standard library root logger.

    Safe to call more than once; the root logger's handlers are replaced.
    """
    level = (level or get_log_level()).upper()
    directory = Path(log_dir or get_log_dir())
    directory.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.handlers = _build_handlers(level, directory)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_pre_chain(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def logging_context(**kwargs: Any):
    """Scope ``kwargs`` to the log lines emitted inside the block."""
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
