"""Structured logging for the record store service and the command line tools."""
import logging
import sys
from typing import Any, List, MutableMapping, Optional, TextIO

import numpy as np
import structlog
from structlog.stdlib import ProcessorFormatter

from facefinder.core.config import settings

# Event keys whose values are face descriptors
DESCRIPTOR_KEYS = ("descriptor", "query", "values")


def redact_descriptors(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Replace descriptor vectors in an event with their length."""
    for key in DESCRIPTOR_KEYS:
        value = event_dict.get(key)
        if isinstance(value, (list, tuple, np.ndarray)):
            event_dict[key] = f"<descriptor len={len(value)}>"
    return event_dict


def setup_logging(stream: Optional[TextIO] = None) -> None:
    """Route stdlib and structlog output through one handler.

    Development gets colored console output, every other environment gets
    JSON lines. The server logs to stdout; the command line tools pass
    ``sys.stderr`` so their printed results stay on stdout.
    """
    processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_descriptors,
    ]

    if settings.ENVIRONMENT == "development":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()
        processors.append(structlog.processors.format_exc_info)
    processors.append(ProcessorFormatter.wrap_for_formatter)

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(ProcessorFormatter(processor=renderer))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    # uvicorn keeps its own handlers
    logging.getLogger("uvicorn.error").propagate = False
    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)
