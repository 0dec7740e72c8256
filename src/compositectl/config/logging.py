"""structlog configuration for compositectl.

Two output modes, both on stderr so stdout stays reserved for results:
- Human (default): console renderer, colored when stderr is a TTY
- JSON (--log-json): one structured JSON object per line

Build progress ("Resolved service ...") is logged at INFO, per-bind
checks at DEBUG. Without ``--verbose`` only warnings surface.
"""

from __future__ import annotations

import logging
import sys

import structlog

APP_LOGGER = "compositectl"

# Third-party loggers that stay at WARNING even under --verbose.
_QUIET_LOGGERS = ("pluggy", "networkx")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and route stdlib logging through them.

    Args:
        verbose: Enable DEBUG-level output for compositectl loggers.
            When False, only WARNING+.
        log_json: Use the JSON renderer instead of the console renderer.

    Safe to call repeatedly; the root handler is replaced, never stacked.
    """
    shared = _shared_processors()

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(APP_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_build_context(**fields: str) -> None:
    """Attach fields (e.g. the composite ident) to every log line of this build."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**fields)
