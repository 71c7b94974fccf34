"""
Logging Configuration
====================

structlog over the standard library. Console output is coloured outside
production and JSON in production; rotating files are written only when
``log_dir`` is configured.
"""

import logging
import logging.config
import sys
from typing import Dict, Any, List, TYPE_CHECKING
import structlog
from structlog.types import Processor

from .settings import get_settings

if TYPE_CHECKING:
    from .settings import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024

# Third-party loggers that are noisy below WARNING
QUIET_LOGGERS = ("playwright", "PIL", "asyncio")


def setup_logging() -> None:
    """Configure structlog and the standard library handlers."""
    settings = get_settings()

    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.environment == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(get_logging_config(settings))


def _rotating_file(filename: str, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "plain",
        "filename": filename,
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": 5,
        "encoding": "utf-8",
    }


def get_logging_config(settings: "Settings") -> Dict[str, Any]:
    """Build the ``dictConfig`` mapping for the current settings."""
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.log_level,
            "formatter": "json" if settings.environment == "production" else "plain",
            "stream": sys.stdout,
        },
    }

    if settings.log_dir is not None and settings.environment != "testing":
        handlers["file"] = _rotating_file(str(settings.log_dir / "social_cards.log"), settings.log_level)
        handlers["error_file"] = _rotating_file(str(settings.log_dir / "error.log"), "ERROR")

    loggers: Dict[str, Any] = {
        "": {"level": settings.log_level, "handlers": list(handlers), "propagate": False},
        "socialcards": {
            # Render diagnostics are logged at INFO behind the debug flag
            "level": "DEBUG" if settings.render_debug else settings.log_level,
            "propagate": True,
        },
        "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING", "propagate": True}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": handlers,
        "loggers": loggers,
    }


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def ensure_log_directories() -> None:
    """Create the log directory when file logging is configured."""
    settings = get_settings()
    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)


# Initialize logging on import
ensure_log_directories()
setup_logging()
