import logging
import sys
from typing import Any, List

import structlog

from landmarks.core.config import Settings, settings as default_settings

# Loggers that would otherwise print through their own handlers
ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _renderers(settings: Settings) -> List[Any]:
    if settings.ENV.lower() == "development":
        return [structlog.dev.ConsoleRenderer()]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


def configure_logging(settings: Settings = default_settings) -> None:
    """
    Route structlog and stdlib records through one stdout handler.

    Console output in development, one JSON object per line elsewhere.
    Records below settings.LOG_LEVEL are dropped for both.
    """
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown LOG_LEVEL: {settings.LOG_LEVEL}")

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
    ] + _renderers(settings)

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(level)

    for name in ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers = []
        routed.propagate = True

    # One line per upstream call is already logged by the proxy itself
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
