"""structlog configuration for safe_decoder.

The library never configures logging on import; every module only does
``structlog.get_logger(__name__)``.  Applications that want the decoder's
events call ``configure_logging`` once at startup.

Two output modes:
- Human (default): console-formatted output to stderr
- JSON (``log_json=True``): structured JSON lines to stderr

Events emitted by the decoder:
- ``coercion.applied`` / ``coercion.declined`` (debug)
- ``fallback.applied`` (info)
- ``diagnostic.reported`` (warning)
- ``session.begin`` / ``session.end`` / ``decode.failed`` / ``failure.fatal`` (debug)
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "safe_decoder"


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level decoder events. When False, only WARNING+
                 (i.e. reported diagnostics).
        log_json: Use JSON renderer instead of console renderer.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(level)
