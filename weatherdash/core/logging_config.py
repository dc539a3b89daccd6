"""JSON logging with per-request view context and a recent-records ring."""

from __future__ import annotations

import logging
from collections import deque
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Iterator, Optional

from pythonjsonlogger import jsonlogger

from weatherdash.core.config import settings

# Record attributes copied into the in-memory ring when a log call or the
# request context provides them
CONTEXT_FIELDS = ("view_id", "path", "stage", "lat", "lon")

_REQUEST_CONTEXT: ContextVar[Optional[dict[str, str]]] = ContextVar("weatherdash_log_context", default=None)
_RECENT: deque[dict[str, str]] = deque(maxlen=200)
_configured = False


@contextmanager
def log_context(**fields: str) -> Iterator[None]:
    """Attach ``fields`` to every record logged inside the block, tasks included."""
    merged = dict(_REQUEST_CONTEXT.get() or {})
    merged.update({key: value for key, value in fields.items() if value})
    token = _REQUEST_CONTEXT.set(merged)
    try:
        yield
    finally:
        _REQUEST_CONTEXT.reset(token)


class _ContextFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        for key, value in (_REQUEST_CONTEXT.get() or {}).items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class _RecentRecordsHandler(logging.Handler):
    """Feeds ``/api/logs``; newest record first."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            for key in CONTEXT_FIELDS:
                value = getattr(record, key, None)
                if value is not None:
                    entry[key] = str(value)
        except Exception:
            self.handleError(record)
            return
        _RECENT.appendleft(entry)


def setup_logging(service_name: Optional[str] = None) -> None:
    global _configured
    if _configured:
        return

    context = _ContextFilter(service_name or settings.service_name)

    stream = logging.StreamHandler()
    stream.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
        )
    )
    stream.addFilter(context)
    recent = _RecentRecordsHandler()
    recent.addFilter(context)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(stream)
    root.addHandler(recent)
    root.setLevel(settings.log_level.upper())
    logging.captureWarnings(True)
    _configured = True


def recent_logs(
    limit: int = 100,
    *,
    view_id: Optional[str] = None,
    min_level: Optional[str] = None,
) -> list[dict[str, str]]:
    """Newest-first records, optionally narrowed to one browser view or a minimum level."""

    threshold = logging.getLevelName(min_level.upper()) if min_level else logging.NOTSET
    if not isinstance(threshold, int):
        raise ValueError(f"Unknown log level: {min_level}")
    selected = []
    for entry in _RECENT:
        if view_id and entry.get("view_id") != view_id:
            continue
        if logging.getLevelName(entry["level"]) < threshold:
            continue
        selected.append(entry)
        if len(selected) >= limit:
            break
    return selected


__all__ = ["CONTEXT_FIELDS", "log_context", "recent_logs", "setup_logging"]
