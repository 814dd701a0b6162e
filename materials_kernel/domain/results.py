"""
Scan modes and operation results.

Every core operation returns an ``OperationResult``.  Domain outcomes such
as "not found" or "already in warehouse" are result kinds, not exceptions;
the presentation layer decides how to show them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from materials_kernel.domain.material import Material
from materials_kernel.exceptions import UnknownScanModeError

UNKNOWN_DESIGNATION = "Unknown"


class ScanMode(str, Enum):
    """Operating mode of the scanner station."""

    RECEIVE = "receive"
    ISSUE = "issue"

    @classmethod
    def parse(cls, value: ScanMode | str) -> ScanMode:
        """Resolve a mode from an enum, value, name or legacy station label."""
        if isinstance(value, ScanMode):
            return value
        label = value.strip().casefold()
        for mode in cls:
            if label in (mode.value, mode.name.casefold()):
                return mode
        if label in _LEGACY_LABELS:
            return _LEGACY_LABELS[label]
        raise UnknownScanModeError(value)


_LEGACY_LABELS = {
    "empfang": ScanMode.RECEIVE,
    "ausgabe": ScanMode.ISSUE,
}


class ResultKind(str, Enum):
    """Outcome of a scan, undo or maintenance operation."""

    SUCCESS = "success"
    SILENT_NO_OP = "silent_no_op"  # Issue with blank recipient: success, unchanged
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    ALREADY_IN_WAREHOUSE = "already_in_warehouse"
    NOT_IN_WAREHOUSE = "not_in_warehouse"
    NO_HISTORY = "no_history"
    UNSUPPORTED_UNDO = "unsupported_undo"

    @property
    def is_success(self) -> bool:
        return self in (ResultKind.SUCCESS, ResultKind.SILENT_NO_OP, ResultKind.DELETED)


def _quoted(material: Material | None) -> str:
    designation = material.designation if material is not None else None
    return f'"{designation or UNKNOWN_DESIGNATION}"'


@dataclass(frozen=True)
class OperationResult:
    """Result of a core operation.

    ``material`` holds the post-state on success and the untouched current
    state on warnings.  It is None for NOT_FOUND.
    """

    kind: ResultKind
    subject: str
    material: Material | None = None
    message: str = ""

    @property
    def success(self) -> bool:
        return self.kind.is_success

    @property
    def display_name(self) -> str | None:
        """Designation on success ("" when unnamed), None on failure."""
        if not self.success:
            return None
        return (self.material.designation if self.material else None) or ""

    @classmethod
    def ok(
        cls, subject: str, material: Material, message: str = ""
    ) -> OperationResult:
        return cls(ResultKind.SUCCESS, subject, material, message)

    @classmethod
    def silent_no_op(cls, subject: str, material: Material) -> OperationResult:
        return cls(ResultKind.SILENT_NO_OP, subject, material)

    @classmethod
    def deleted(cls, material: Material) -> OperationResult:
        return cls(
            ResultKind.DELETED,
            material.serial_number or str(material.id),
            material,
            f"{_quoted(material)} was deleted.",
        )

    @classmethod
    def not_found(cls, subject: str) -> OperationResult:
        return cls(
            ResultKind.NOT_FOUND,
            subject,
            None,
            f"Material with serial number {subject} not found.",
        )

    @classmethod
    def already_in_warehouse(
        cls, subject: str, material: Material
    ) -> OperationResult:
        return cls(
            ResultKind.ALREADY_IN_WAREHOUSE,
            subject,
            material,
            f"{_quoted(material)} is already in the warehouse.",
        )

    @classmethod
    def not_in_warehouse(cls, subject: str, material: Material) -> OperationResult:
        return cls(
            ResultKind.NOT_IN_WAREHOUSE,
            subject,
            material,
            f"{_quoted(material)} is NOT in the warehouse.",
        )

    @classmethod
    def no_history(cls, subject: str, material: Material) -> OperationResult:
        return cls(
            ResultKind.NO_HISTORY,
            subject,
            material,
            f"No previous action found for serial number {subject}.",
        )

    @classmethod
    def unsupported_undo(cls, subject: str, material: Material) -> OperationResult:
        return cls(
            ResultKind.UNSUPPORTED_UNDO,
            subject,
            material,
            "Last action cannot be undone.",
        )
