"""JSON request logs for the property API.

Every line is one JSON object. The trace id minted by the HTTP middleware
(and echoed as `X-Trace-Id`) is attached to every record logged while that
request is handled, so a search, its timing and any error share one id.
Search and lookup code passes its context through `extra=`; the keys in
`CONTEXT_KEYS` are copied onto the JSON line.
"""
import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from app.config import settings

trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")

# noisy libraries, capped at WARNING
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg", "uvicorn.access")


def set_trace_id(trace_id: str | None = None) -> str:
    """Bind a trace id to the current request context and return it."""
    tid = trace_id or uuid.uuid4().hex
    trace_id_var.set(tid)
    return tid


class JSONFormatter(logging.Formatter):
    CONTEXT_KEYS = (
        "listing_type",
        "property_id",
        "identifier",
        "operation",
        "total",
        "page",
        "duration",
    )

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.app_name,
            "logger": record.name,
            "message": record.getMessage(),
        }

        tid = trace_id_var.get()
        if tid:
            entry["trace_id"] = tid

        context = {key: getattr(record, key) for key in self.CONTEXT_KEYS if hasattr(record, key)}
        if context:
            entry["context"] = context

        if record.levelno >= logging.WARNING:
            entry["source"] = f"{record.module}.{record.funcName}:{record.lineno}"
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        # Decimal prices and UUIDs fall back to str()
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """Route all records through one stdout handler with the JSON formatter."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
