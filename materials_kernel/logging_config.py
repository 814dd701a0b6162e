"""
Structured JSON logging for the materials kernel.

Every kernel module logs through ``get_logger(name)``.  Records leave the
``materials_kernel`` logger as one JSON object per line: a fixed envelope
(``ts``, ``level``, ``logger``, ``message``), the scan context of the
operation in progress, the record's ``extra`` fields and, when an exception
is attached, its type, message, ``code`` and structured attributes.

Scan context:
    ScanProcessor and UndoEngine wrap each operation in
    ``LogContext.scan(serial, mode, actor)``.  Anything logged inside that
    block, including by the store and the gateway, carries ``serial_number``,
    ``scan_mode`` and ``actor`` without those values being passed down.
    The context lives in a ContextVar, so the notifier's worker thread and
    concurrent scans on other threads never see each other's fields.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Iterator, TextIO

__all__ = [
    "LOGGER_NAMESPACE",
    "LogContext",
    "ScanContext",
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

LOGGER_NAMESPACE = "materials_kernel"


# ---------------------------------------------------------------------------
# Scan context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScanContext:
    """Fields identifying the scan or undo currently being processed."""

    serial_number: str | None = None
    scan_mode: str | None = None
    actor: str | None = None

    def fields(self) -> dict[str, str]:
        return {name: value for name, value in asdict(self).items() if value is not None}


_NO_SCAN = ScanContext()
_current_scan: ContextVar[ScanContext] = ContextVar(
    "materials_scan_context", default=_NO_SCAN
)


class LogContext:
    """Access to the scan context attached to log records."""

    @staticmethod
    @contextmanager
    def scan(
        serial_number: str,
        mode: Enum | str | None = None,
        actor: str | None = None,
    ) -> Iterator[ScanContext]:
        """Attach a scan context for the duration of the block.

        ``mode`` may be a ScanMode member; its value is logged.  The previous
        context is restored on exit, also when the block raises.
        """
        if isinstance(mode, Enum):
            mode = mode.value
        context = ScanContext(serial_number, mode, actor)
        token = _current_scan.set(context)
        try:
            yield context
        finally:
            _current_scan.reset(token)

    @staticmethod
    def current() -> dict[str, str]:
        """Fields of the active scan context (empty outside a scan)."""
        return _current_scan.get().fields()

    @staticmethod
    def clear() -> None:
        _current_scan.set(_NO_SCAN)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord has; anything else on a record came from `extra`.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """Type, message, ``code`` and public attributes of a logged exception."""
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    fields.update(
        (f"exc_{name}", value)
        for name, value in vars(exc).items()
        if not name.startswith("_")
    )
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.current(),
        }
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRIBUTES:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_value)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``materials_kernel.<name>``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_setup_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: TextIO | None = None,
    handler: logging.Handler | None = None,
) -> logging.Handler:
    """Install the JSON handler on the ``materials_kernel`` logger.

    Only the first call configures anything; later calls return the
    handler that is already installed.  ``level`` accepts a level number
    or name ("DEBUG", "INFO", ...).
    """
    global _installed_handler
    with _setup_lock:
        if _installed_handler is None:
            installed = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
            installed.setFormatter(StructuredFormatter())
            kernel_logger = logging.getLogger(LOGGER_NAMESPACE)
            kernel_logger.setLevel(level)
            kernel_logger.propagate = False
            kernel_logger.addHandler(installed)
            _installed_handler = installed
        return _installed_handler


def reset_logging() -> None:
    """Remove the installed handler and restore default propagation (tests)."""
    global _installed_handler
    with _setup_lock:
        kernel_logger = logging.getLogger(LOGGER_NAMESPACE)
        if _installed_handler is not None:
            kernel_logger.removeHandler(_installed_handler)
            _installed_handler = None
        kernel_logger.setLevel(logging.WARNING)
        kernel_logger.propagate = True
