"""Structured logging for tokengate.

Package modules log through ``logging.getLogger(__name__)``. This module
attaches a structlog ``ProcessorFormatter`` to the root logger so those
records come out as JSON (or coloured console lines) with ISO timestamps
and any bound contextvars.
"""

import logging
import sys
from typing import IO, Literal

import structlog

HANDLER_NAME = "tokengate"


def setup_logging(
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "json",
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Route standard library logging through structlog renderers.

    Calling it again replaces the handler installed by the previous call,
    so reconfiguring never duplicates output.

    Args:
        log_level: Standard Python log level name (INFO, DEBUG, etc.).
        log_format: ``"json"`` for machine-readable output or ``"console"``
            for human-readable output during local development.
        stream: Destination, ``sys.stdout`` by default.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer(colors=False)
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # The redis client logs every connection at DEBUG
    logging.getLogger("redis").setLevel(logging.WARNING)
    return handler
