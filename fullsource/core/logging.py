"""Structured logging for the installer CLI: structlog rendered by a stdlib handler."""

from __future__ import annotations

import logging
import os
import sys

import structlog

# Third-party loggers that are only interesting when something breaks.
_QUIET_LOGGERS = ("httpx", "httpcore")


class _StderrHandler(logging.StreamHandler):
    """Marks the handler installed here so a second setup replaces it."""


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(level: str | None = None) -> None:
    """Route structlog and stdlib records through one stderr handler.

    *level* wins over ``FULLSOURCE_LOG_LEVEL`` (default INFO).
    ``FULLSOURCE_LOG_FORMAT`` picks ``console`` (default) or ``json``.
    Stdout is left to command output.
    """
    log_level = (level or os.environ.get("FULLSOURCE_LOG_LEVEL", "INFO")).upper()
    log_format = os.environ.get("FULLSOURCE_LOG_FORMAT", "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%H:%M:%S" if log_format == "console" else "iso"),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = _StderrHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, _StderrHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("fullsource").setLevel(log_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
