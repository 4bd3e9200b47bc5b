import logging
import logging.config
import sys
from pathlib import Path
from typing import Dict, Any, Optional

from app.config import Settings, get_settings

# Fields the request middleware attaches to its records via ``extra``
REQUEST_FIELDS = ("request_id", "method", "path", "status_code", "processing_time_ms")


class RequestContextFilter(logging.Filter):
    """Give every record the request fields so formatters never hit a missing key.

    Records logged outside a request (startup, the store, the pipeline) get "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for field in REQUEST_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True


def configure_logging(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Build the dictConfig for the service.

    Console output is plain text tagged with the request id; the rotating
    file gets one JSON object per record including the request fields.

    Args:
        settings: Settings to read the level and log directory from

    Returns:
        Dict: Logging configuration dictionary
    """
    settings = settings or get_settings()
    log_path = Path(settings.LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)
    level = settings.LOG_LEVEL.upper()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_context": {"()": RequestContextFilter},
        },
        "formatters": {
            "console": {
                "format": "%(asctime)s - %(levelname)s - %(name)s [%(request_id)s] %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s "
                          + " ".join(f"%({field})s" for field in REQUEST_FIELDS),
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "filters": ["request_context"],
                "stream": sys.stdout,
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "json",
                "filters": ["request_context"],
                "filename": log_path / "devevent.log",
                "maxBytes": 5 * 1024 * 1024,
                "backupCount": 3,
                "encoding": "utf-8",
            },
        },
        "loggers": {
            "app": {
                "handlers": ["console", "file"],
                "level": level,
                "propagate": False,
            },
            # RequestLoggingMiddleware already records every request
            "uvicorn.access": {
                "level": "WARNING",
            },
            "sqlalchemy.engine": {
                "handlers": ["file"],
                "level": "INFO" if settings.DEBUG else "WARNING",
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Apply the service logging configuration."""
    logging.config.dictConfig(configure_logging(settings))


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name.

    Args:
        name: Name for the logger

    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(f"app.{name}")
