import json
import logging
import logging.config
import sys

# Third-party loggers that are chatty at INFO (yfinance retries, httpx request lines)
NOISY_LOGGERS = ("yfinance", "httpx", "httpcore", "peewee")


class JsonFormatter(logging.Formatter):
    """One JSON object per line for CloudWatch."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(log_level: str = "INFO") -> None:
    level = log_level.upper()
    app_handlers = ["stdout", "stderr"]

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JsonFormatter},
            "detailed": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(pathname)s:%(lineno)d\n%(message)s",
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "detailed",
                "stream": sys.stderr,
                "level": "WARNING",
            },
        },
        "root": {"handlers": app_handlers, "level": level},
        "loggers": {
            "phoenixapi": {"handlers": app_handlers, "level": level, "propagate": False},
            # Access lines are already one-per-request; keep them off stderr
            "phoenixapi.access": {"handlers": ["stdout"], "level": level, "propagate": False},
        },
    }
    for name in NOISY_LOGGERS:
        config["loggers"][name] = {"level": "WARNING"}

    logging.config.dictConfig(config)
    logging.getLogger("phoenixapi").info(f"Logging initialized at {level}")
