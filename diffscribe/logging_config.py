"""Structlog-based logging setup with a stdlib bridge.

Modules log through ``logging.getLogger(__name__)``; configure_logging()
routes those records through a structlog processor pipeline.
"""

import logging
import os
import sys
from typing import Any

import structlog

_CONFIGURED = False


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure structlog and the root stdlib logger.

    Only the first call installs handlers; later calls just adjust the level.
    The renderer is JSON when DIFFSCRIBE_LOG_FORMAT=json, console otherwise.

    Args:
        level: Root log level.
    """
    global _CONFIGURED
    root = logging.getLogger()
    root.setLevel(level)
    if _CONFIGURED:
        return
    _CONFIGURED = True

    renderer = _select_renderer()
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    # Log to stderr so suggestions on stdout stay machine-readable
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root.handlers.clear()
    root.addHandler(handler)


def _select_renderer() -> Any:
    """Choose renderer based on DIFFSCRIBE_LOG_FORMAT."""
    if os.environ.get("DIFFSCRIBE_LOG_FORMAT", "").lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
