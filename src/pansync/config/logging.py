"""Log setup: structlog formatting on top of stdlib logging, always to stderr.

stdout carries command results only, so a sub-invocation's JSON can be
parsed while its log lines reach the user through the inherited stderr.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Chatty libraries; their INFO lines would drown the sync progress.
QUIET_LOGGERS = ("httpx", "httpcore")


def _level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    return logging.WARNING if quiet else logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Route ``pansync.*`` (and structlog) records to one stderr handler.

    Safe to call more than once; the previous handler is replaced.
    """
    stamp: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*stamp, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=stamp,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("pansync").setLevel(_level(verbose=verbose, quiet=quiet))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
