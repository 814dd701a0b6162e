"""
Pure domain layer.

Immutable value types and transition functions with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Wall-clock time (a Clock is injected)
- I/O
"""

from materials_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from materials_kernel.domain.material import (
    SYSTEM_ACTOR,
    WAREHOUSE_POSITION,
    LogAction,
    LogEntry,
    Material,
)
from materials_kernel.domain.notification import Notification, Signal
from materials_kernel.domain.ports import NotificationChannel, PersistenceGateway
from materials_kernel.domain.results import OperationResult, ResultKind, ScanMode

__all__ = [
    "Clock",
    "DeterministicClock",
    "LogAction",
    "LogEntry",
    "Material",
    "Notification",
    "NotificationChannel",
    "OperationResult",
    "PersistenceGateway",
    "ResultKind",
    "SYSTEM_ACTOR",
    "ScanMode",
    "Signal",
    "SystemClock",
    "WAREHOUSE_POSITION",
]
