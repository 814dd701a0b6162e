"""
Material and LogEntry -- the tracked item and its audit trail.

Responsibility:
    Immutable value types for a material, its location state, and the
    append-only log of what happened to it.  State changes produce a new
    ``Material`` via ``dataclasses.replace``; nothing here performs I/O.

Architecture position:
    Kernel > Domain -- pure core.  Imported by transitions, services, the
    ORM mapping layer and tests.

Invariants enforced:
    - ``append_entry`` only ever grows ``log``; no method removes or edits
      an existing entry.
    - ``LogEntry.action`` / ``LogEntry.recipient`` are the source of truth
      for undo.  ``event_text`` is a rendering of them.

Legacy history:
    Entries imported without an ``action`` tag are classified from their
    text by marker substrings (English renderings and the German labels of
    older exports).  The issue marker is checked before the receipt marker.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

WAREHOUSE_POSITION = "Warehouse"
SYSTEM_ACTOR = "System"


class LogAction(str, Enum):
    """Kind of movement recorded by a log entry."""

    RECEIVED = "received"
    ISSUED = "issued"
    RECEIPT_UNDONE = "receipt_undone"
    ISSUE_UNDONE = "issue_undone"

    @property
    def is_reversible(self) -> bool:
        return self in (LogAction.RECEIVED, LogAction.ISSUED)


# Marker substrings for untagged (legacy) entries, in match order.  Matching
# is case-sensitive: the English markers are the rendered texts below, the
# German ones come from older exports.
_LEGACY_MARKERS = (
    (LogAction.ISSUED, ("Issued via scan to", "ausgegeben an")),
    (LogAction.RECEIVED, ("Received via scan from", "empfangen von")),
)


def render_event_text(action: LogAction, recipient: str | None) -> str:
    """Human-readable description of a log action."""
    name = recipient or ""
    if action is LogAction.RECEIVED:
        return f"Received via scan from {name}"
    if action is LogAction.ISSUED:
        return f"Issued via scan to {name}"
    if action is LogAction.ISSUE_UNDONE:
        return "Issue reversed - returned to warehouse"
    return f"Receipt reversed - returned to {name}"


def classify_event_text(text: str) -> tuple[LogAction | None, str | None]:
    """Recover (action, recipient) from an untagged entry's text.

    Returns ``(None, None)`` when the text carries no known marker, which
    includes every undo rendering.
    """
    for action, markers in _LEGACY_MARKERS:
        for marker in markers:
            index = text.find(marker)
            if index >= 0:
                return action, text[index + len(marker):].strip()
    return None, None


@dataclass(frozen=True)
class LogEntry:
    """One audit log line attached to a material."""

    timestamp: datetime
    actor: str
    event_text: str
    action: LogAction | None = None
    recipient: str | None = None

    @classmethod
    def record(
        cls,
        action: LogAction,
        recipient: str | None,
        actor: str,
        timestamp: datetime,
    ) -> LogEntry:
        """Build a tagged entry with its rendered text."""
        return cls(
            timestamp=timestamp,
            actor=actor,
            event_text=render_event_text(action, recipient),
            action=action,
            recipient=recipient,
        )

    def resolved(self) -> tuple[LogAction | None, str | None]:
        """(action, recipient), falling back to text markers when untagged."""
        if self.action is not None:
            return self.action, self.recipient
        return classify_event_text(self.event_text)


@dataclass(frozen=True)
class Material:
    """A tracked physical item."""

    id: UUID
    designation: str | None = None
    serial_number: str | None = None
    position: str | None = None
    in_lager: bool = False
    log: tuple[LogEntry, ...] = field(default=())

    @classmethod
    def create(
        cls,
        designation: str | None,
        serial_number: str | None,
        *,
        in_lager: bool = True,
        position: str | None = None,
    ) -> Material:
        """New material with a fresh id and an empty log."""
        return cls(
            id=uuid4(),
            designation=designation,
            serial_number=serial_number,
            position=WAREHOUSE_POSITION if in_lager else position,
            in_lager=in_lager,
        )

    @property
    def last_entry(self) -> LogEntry | None:
        return self.log[-1] if self.log else None

    def matches_serial_prefix(self, code: str) -> bool:
        """True if the trimmed serial starts with the trimmed code."""
        if self.serial_number is None:
            return False
        return self.serial_number.strip().startswith(code.strip())

    def matches_text(self, text: str) -> bool:
        """Case-insensitive substring match on designation, serial or position."""
        needle = text.casefold()
        return any(
            value is not None and needle in value.casefold()
            for value in (self.designation, self.serial_number, self.position)
        )

    def append_entry(self, entry: LogEntry, **changes) -> Material:
        """Copy with ``entry`` appended to the log and ``changes`` applied."""
        return replace(self, log=self.log + (entry,), **changes)
