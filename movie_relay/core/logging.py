import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any

_BASE_LOG_KEYS = set(logging.makeLogRecord({}).__dict__.keys())

# TMDB takes the credential as a query param, so it shows up in URLs and httpx error text
_SECRET_PARAM = re.compile(r"(api_key=)[^&\s'\"]+", re.IGNORECASE)
_SECRET_KEYS = {"api_key", "authorization"}


def redact(value: Any) -> Any:
    if isinstance(value, str):
        return _SECRET_PARAM.sub(r"\1***", value)
    if isinstance(value, dict):
        return {key: "***" if str(key).lower() in _SECRET_KEYS else redact(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    return redact(str(value))


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, service and every ``extra`` field."""

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
        }
        if self.service:
            payload["service"] = self.service
        for key, value in record.__dict__.items():
            if key in _BASE_LOG_KEYS or key in {"message", "asctime"}:
                continue
            payload[key] = redact(value)
        if record.exc_info:
            payload["exc_info"] = redact(self.formatException(record.exc_info))
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(level: str = "INFO", service: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonLogFormatter(service=service))

    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
