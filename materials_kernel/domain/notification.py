"""Cosmetic feedback signals derived from operation results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from materials_kernel.domain.results import OperationResult, ResultKind


class Signal(str, Enum):
    """Feedback category (drives tone choice / popup styling)."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


_SIGNAL_BY_KIND = {
    ResultKind.SUCCESS: Signal.SUCCESS,
    ResultKind.SILENT_NO_OP: Signal.SUCCESS,
    ResultKind.DELETED: Signal.SUCCESS,
    ResultKind.NOT_FOUND: Signal.ERROR,
    ResultKind.ALREADY_IN_WAREHOUSE: Signal.WARNING,
    ResultKind.NOT_IN_WAREHOUSE: Signal.WARNING,
    ResultKind.NO_HISTORY: Signal.WARNING,
    ResultKind.UNSUPPORTED_UNDO: Signal.WARNING,
}


@dataclass(frozen=True)
class Notification:
    signal: Signal
    kind: ResultKind
    message: str = ""

    @classmethod
    def for_result(cls, result: OperationResult) -> Notification:
        return cls(_SIGNAL_BY_KIND[result.kind], result.kind, result.message)
