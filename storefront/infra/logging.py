"""structlog setup.

JSON lines for Cloud Logging outside dev, a colored console in dev. Request
handlers get ``request_id``/``method``/``path`` merged into every event they
log through :func:`bind_request_context`.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from storefront.config import settings

# Third-party loggers that only matter at WARNING and above
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "google", "PIL")


def _renderer(use_json: bool) -> list[Processor]:
    if use_json:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def setup_logging() -> None:
    """Configure structlog and route stdlib logging to stdout at the same level."""
    level = logging.getLevelName(settings.log_level.upper())
    use_json = settings.log_json and settings.environment != "dev"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(use_json),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(request_id: str, method: str, path: str) -> None:
    """Attach request fields to every event logged until the context is cleared."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """Get a logger, optionally pre-bound with ``initial_context``.

    Args:
        name: Logger name (usually __name__)
        **initial_context: Key/value pairs added to every event

    Returns:
        Bound structlog logger
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
