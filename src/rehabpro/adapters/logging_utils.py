import json
import logging
import sys
from datetime import datetime, timezone

from .config import config

# attributes every LogRecord carries; anything else arrived through extra=
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "context"}


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        ctx = dict(getattr(record, "context", None) or {})
        for key, value in vars(record).items():
            if key not in _RESERVED:
                ctx.setdefault(key, value)
        if ctx:
            payload["context"] = ctx

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonLogFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel((level or config.LOG_LEVEL).upper())
    return logger
