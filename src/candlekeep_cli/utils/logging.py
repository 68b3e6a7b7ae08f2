"""Structured logging setup using structlog.

All log output goes to **stderr** through the console renderer so that
stdout carries nothing but command output (tables, JSON, raw document
content).  The level is WARNING unless ``--verbose`` is given.

Standard-library ``logging`` is routed through the same structlog
formatter so that urllib3's connection messages look identical.
"""

from __future__ import annotations

import logging
import sys

import structlog

HANDLER_NAME: str = "candlekeep-cli"


def remove_handler(logger: logging.Logger) -> None:
    """Detach the handler installed by :func:`configure_logging`, if any."""
    for handler in list(logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            logger.removeHandler(handler)


def configure_logging(*, verbose: bool = False) -> None:
    """Configure structlog and stdlib logging for one CLI invocation."""
    level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    remove_handler(root)
    root.addHandler(handler)
    root.setLevel(level)

    # urllib3 is chatty at DEBUG; keep it one notch quieter.
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound with *name*.

    Configuration happens in the CLI entry point; until then structlog's
    defaults apply, which is what tests see.
    """
    return structlog.get_logger(logger_name=name)
