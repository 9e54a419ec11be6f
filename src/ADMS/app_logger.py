import logging
import logging.config

from ADMS.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(module)s"


def build_logging_config(level: str | None = None, json_logs: bool | None = None) -> dict:
    level = (level or settings.LOG_LEVEL).upper()
    json_logs = settings.LOG_JSON if json_logs is None else json_logs

    formatter = (
        {"()": "pythonjsonlogger.json.JsonFormatter", "fmt": JSON_FORMAT}
        if json_logs
        else {"format": LOG_FORMAT}
    )
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": level},
            "ADMS": {"level": level},
            "uvicorn": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.error": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> logging.Logger:
    # Configure root once; ADMS.* loggers propagate to it
    logging.config.dictConfig(build_logging_config(level, json_logs))
    return logging.getLogger("ADMS")


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("ADMS")
    return base.getChild(name) if name else base
