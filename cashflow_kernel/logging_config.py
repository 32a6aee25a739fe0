"""
Structured JSON logging for the cashflow kernel.

Every logger lives under the ``cashflow_kernel`` namespace and writes one
JSON object per line.  Service entry points bind an ``operation`` and a
``correlation_id`` through :func:`operation_context`; the CLI adds a
``request_id``.  Bound fields are merged into every record emitted while
the binding is active, including records from engines and selectors.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "operation_context",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from typing import Any
from uuid import uuid4

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_CONTEXT_FIELDS = ("correlation_id", "request_id", "operation")

_context_vars: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"cashflow_log_{name}", default=None)
    for name in _CONTEXT_FIELDS
}


def _context_var(name: str) -> ContextVar[str | None]:
    try:
        return _context_vars[name]
    except KeyError:
        raise ValueError(f"Unknown log context field: {name!r}") from None


class LogContext:
    """
    Request-scoped fields added to every structured log line.

    Fields: ``correlation_id`` ties together the records of one service
    call, ``request_id`` identifies the caller's request (one CLI run) and
    ``operation`` names the service method being executed.
    """

    FIELDS = _CONTEXT_FIELDS

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set the given fields. None values are ignored."""
        for name, value in fields.items():
            if value is not None:
                _context_var(name).set(value)

    @classmethod
    def get(cls, name: str) -> str | None:
        return _context_var(name).get()

    @classmethod
    def get_all(cls) -> dict[str, str]:
        """All fields currently set."""
        return {
            name: value
            for name, var in _context_vars.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in _context_vars.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of the block, restoring them on exit."""
        tokens = [
            (var, var.set(value))
            for var, value in ((_context_var(n), v) for n, v in fields.items())
            if value is not None
        ]
        try:
            yield cls
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


def operation_context(operation: str) -> AbstractContextManager[type[LogContext]]:
    """
    Bind ``operation`` for one service call.

    An outer call's ``correlation_id`` is kept, so a reporting call and the
    forecast it runs log under one id.  Otherwise a fresh id is bound.
    """
    correlation_id = LogContext.get("correlation_id") or str(uuid4())
    return LogContext.bind(correlation_id=correlation_id, operation=operation)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_STDLIB_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "taskName"}


class _JSONEncoder(json.JSONEncoder):
    """Dates in ISO format; UUIDs, Decimals and anything else via ``str``."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys: ``ts``, ``level``, ``logger`` and ``message``, then the bound
    :class:`LogContext` fields, then every ``extra`` key.  An ``extra`` key
    never overrides a bound field.  Exceptions add ``exc_*`` keys and a
    ``traceback``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, val in vars(record).items():
            if key not in _STDLIB_KEYS:
                payload.setdefault(key, val)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, cls=_JSONEncoder)

    @staticmethod
    def _exception_fields(exc: BaseException) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        # CashflowError subclasses carry their context as public attributes
        fields.update(
            (f"exc_{name}", value)
            for name, value in vars(exc).items()
            if not name.startswith("_") and name not in ("args", "code")
        )
        return fields


# ---------------------------------------------------------------------------
# Logger factory
# ---------------------------------------------------------------------------

_LOGGER_PREFIX = "cashflow_kernel"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the cashflow_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_configured = False
_lock = threading.Lock()


def _level_value(level: int | str) -> int | str:
    return level.upper() if isinstance(level, str) else level


def configure_logging(
    *,
    level: int | str | None = None,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach the JSON handler to the cashflow_kernel logger.

    The handler is attached once.  Later calls only re-apply ``level`` when
    one is passed, so ``init_engine_from_url`` (which calls this with no
    arguments) leaves an application-chosen level alone.

    Args:
        level: Level number or name (``"debug"`` is accepted).  Defaults to
            INFO on the first call.
        stream: Stream for the default handler (stderr when omitted).
        handler: Handler to use instead of a StreamHandler.
    """
    global _configured
    root_logger = logging.getLogger(_LOGGER_PREFIX)

    with _lock:
        first_call = not _configured
        _configured = True

    if not first_call:
        if level is not None:
            root_logger.setLevel(_level_value(level))
        return

    root_logger.setLevel(_level_value(level if level is not None else logging.INFO))
    root_logger.propagate = False

    h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
    h.setFormatter(StructuredFormatter())
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Detach handlers and forget the configuration. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
