from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any, Iterable

# Structured fields the client passes through `extra=`.
UPBIT_LOG_FIELDS = ("market", "ord_type", "path", "status", "code", "order_uuid", "identifier")

# Never emitted, even if a caller puts them in `extra=`.
_SECRET_FIELDS = frozenset({"secret_key", "authorization", "token"})


class JsonFormatter(logging.Formatter):
    """One JSON object per line, UTC timestamps with millisecond precision."""

    def __init__(self, fields: Iterable[str] = UPBIT_LOG_FIELDS) -> None:
        super().__init__()
        self._fields = tuple(f for f in fields if f.lower() not in _SECRET_FIELDS)

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "ts": ts.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            {f: getattr(record, f) for f in self._fields if getattr(record, f, None) is not None}
        )
        if record.exc_info and record.exc_info[0] is not None:
            payload["exc_type"] = record.exc_info[0].__name__
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, *, stream: IO[str] | None = None) -> logging.Handler:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    # httpx logs every request URL at INFO, including order query strings.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # stderr by default, so command output on stdout stays machine readable.
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    return handler
