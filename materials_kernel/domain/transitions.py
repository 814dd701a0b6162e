"""
Location transitions -- pure functions from one Material state to the next.

Each function returns a new ``Material`` with exactly one entry appended to
its log.  Validation against the current mode lives in ScanProcessor; undo
classification lives here because it only depends on the log.
"""

from __future__ import annotations

from datetime import datetime

from materials_kernel.domain.material import (
    WAREHOUSE_POSITION,
    LogAction,
    LogEntry,
    Material,
)


def receive(
    material: Material, recipient: str, actor: str, at: datetime
) -> Material:
    """Move into the warehouse, recording who handed it back."""
    entry = LogEntry.record(LogAction.RECEIVED, recipient, actor, at)
    return material.append_entry(entry, in_lager=True, position=WAREHOUSE_POSITION)


def issue(material: Material, recipient: str, actor: str, at: datetime) -> Material:
    """Move out of the warehouse to ``recipient``."""
    entry = LogEntry.record(LogAction.ISSUED, recipient, actor, at)
    return material.append_entry(entry, in_lager=False, position=recipient)


def reversal_of(entry: LogEntry) -> tuple[LogAction, str | None] | None:
    """The compensating action for ``entry``, or None if it is not reversible."""
    action, recipient = entry.resolved()
    if action is None or not action.is_reversible:
        return None
    if action is LogAction.ISSUED:
        return LogAction.ISSUE_UNDONE, None
    return LogAction.RECEIPT_UNDONE, recipient or ""


def undo_last(material: Material, actor: str, at: datetime) -> Material | None:
    """Reverse the most recent log entry.

    Returns None when the log is empty or its last entry is not a receipt
    or an issue (undo entries included).
    """
    last = material.last_entry
    if last is None:
        return None
    reversal = reversal_of(last)
    if reversal is None:
        return None
    action, recipient = reversal
    entry = LogEntry.record(action, recipient, actor, at)
    if action is LogAction.ISSUE_UNDONE:
        return material.append_entry(entry, in_lager=True, position=WAREHOUSE_POSITION)
    return material.append_entry(entry, in_lager=False, position=recipient)
