import logging
import logging.config
from pathlib import Path

from school_directory.core.config import Settings


def build_logging_config(settings: Settings) -> dict:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "detailed",
            "stream": "ext://sys.stdout"
        }
    }
    app_handlers = ["console"]

    if settings.LOG_DIR:
        log_path = Path(settings.LOG_DIR)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "detailed",
            "filename": str(log_path / "app.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": str(log_path / "error.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
        app_handlers = ["console", "file", "error_file"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": handlers,
        "root": {
            "level": settings.LOG_LEVEL,
            "handlers": app_handlers
        },
        "loggers": {
            "school_directory": {
                "level": settings.LOG_LEVEL,
                "handlers": app_handlers,
                "propagate": False
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        }
    }


def configure_logging(settings: Settings):
    logging.config.dictConfig(build_logging_config(settings))
