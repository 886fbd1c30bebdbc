# newsbubble/logging_setup.py
"""
Logging for the API, the ingestion job and the recommendation engine.

Events are logged as upper-case names with their details in `extra`
(`RECO_START`, `INGEST_FEED_FAILED`, ...). EventFormatter prints those extras as
key=value pairs after the message so the log line carries them.
"""
import logging
from logging.config import dictConfig
from logging import LogRecord
from pathlib import Path
import contextvars
import os

# ---- Correlation ID (filled by RequestContextMiddleware, "-" in jobs) ----
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")

class RequestIdFilter(logging.Filter):
    def filter(self, record: LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True

# Attributes every LogRecord has; anything else came in through `extra`
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "request_id", "taskName"}

class EventFormatter(logging.Formatter):
    def format(self, record: LogRecord) -> str:
        line = super().format(record)
        fields = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        return line

# ---- Paths & levels ----
BASE_DIR = Path(__file__).resolve().parents[1]  # project root (folder that contains 'newsbubble/')
LOG_DIR  = Path(os.getenv("LOG_DIR", BASE_DIR / "logs"))
LOG_FILE = LOG_DIR / "newsbubble.log"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
# Off in tests and containers that only collect stdout
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "1").lower() not in ("0", "false", "no")

def setup_logging() -> Path | None:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "events",
            "filters": ["request_id"],
        },
        "uvicorn_console": {
            "class": "logging.StreamHandler",
            "formatter": "uvicorn_access",
        },
    }
    app_handlers = ["console"]
    uvicorn_handlers = ["uvicorn_console"]
    if LOG_TO_FILE:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "formatter": "events",
            "filters": ["request_id"],
            "filename": str(LOG_FILE),
            "when": "midnight",
            "backupCount": 14,
            "encoding": "utf-8",
        }
        app_handlers.append("file")
        uvicorn_handlers.append("file")

    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,

        "filters": {
            "request_id": {"()": RequestIdFilter},
        },

        "formatters": {
            "events": {
                "()": EventFormatter,
                "format": (
                    "%(asctime)s | %(levelname)s | %(name)s | req=%(request_id)s | "
                    "%(message)s (%(filename)s:%(lineno)d)"
                ),
            },
            "uvicorn_access": {
                "format": "%(asctime)s | %(levelname)s | %(message)s"
            },
        },

        "handlers": handlers,

        "loggers": {
            # engine, routers, ingestion: everything under newsbubble.*
            "newsbubble": {"handlers": app_handlers, "level": LOG_LEVEL, "propagate": False},

            # feed ingestion job
            "apscheduler": {"handlers": app_handlers, "level": "INFO", "propagate": False},

            # the OpenAI SDK and httpx log every request at INFO
            "openai": {"handlers": app_handlers, "level": "WARNING", "propagate": False},
            "httpx": {"handlers": app_handlers, "level": "WARNING", "propagate": False},

            "uvicorn.error":  {"handlers": uvicorn_handlers, "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": uvicorn_handlers, "level": "INFO", "propagate": False},
        },

        "root": {"handlers": app_handlers, "level": LOG_LEVEL},
    })

    if LOG_TO_FILE:
        logging.getLogger("newsbubble").info("LOGGING_READY", extra={"log_file": str(LOG_FILE)})
        return LOG_FILE
    logging.getLogger("newsbubble").info("LOGGING_READY", extra={"log_file": None})
    return None

def get_logger(name: str = "newsbubble") -> logging.Logger:
    return logging.getLogger(name)
