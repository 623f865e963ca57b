"""
Central logging configuration.

- JSON logs when LOG_JSON=1 (one object per line for log aggregators).
- LOG_LEVEL from env (default INFO).
- Structured fields go through `extra=` (holding_id, holdings, alerts, ...);
  the JSON formatter lifts them to top-level keys.
- Never log owner identifiers or holding names; holding ids and counts are fine.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from config import settings

# Attributes every LogRecord carries; anything else on a record came from `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def _to_jsonable(obj: Any):
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return str(obj)


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached to a record via `extra=`, in insertion order."""
    return {
        k: v
        for k, v in record.__dict__.items()
        if k not in _RECORD_ATTRS and not k.startswith("_") and v is not None
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, message, then extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "ts": ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for k, v in record_fields(record).items():
            payload.setdefault(k, v)
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_to_jsonable)


def configure_logging(level_name: str | None = None, use_json: bool | None = None) -> None:
    """Configure root logger: level from LOG_LEVEL, JSON format when LOG_JSON is set."""
    level_name = (level_name or settings.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    if use_json is None:
        use_json = settings.LOG_JSON

    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
