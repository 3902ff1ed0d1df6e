import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from stockapp.config import Settings, get_settings

_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def extra_fields(record: logging.LogRecord) -> dict:
    """Structured fields attached to a record through ``extra=``."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(extra_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class KeyValueFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = extra_fields(record)
        if not fields:
            return line
        rendered = " ".join(
            "{}={}".format(key, json.dumps(value, default=str)) for key, value in fields.items()
        )
        return "{} {}".format(line, rendered)


def _open_sink(log_file: Optional[str]) -> tuple[logging.Handler, bool]:
    if log_file:
        try:
            return logging.FileHandler(log_file, mode="a", encoding="utf-8"), True
        except OSError:
            return logging.StreamHandler(sys.stdout), False
    return logging.StreamHandler(sys.stdout), True


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler, sink_ok = _open_sink(settings.LOG_FILE)
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            KeyValueFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)

    if not sink_ok:
        logging.getLogger(__name__).info(
            "Failed to log to file, using default stdout", extra={"log_file": settings.LOG_FILE}
        )
