"""
Module: materials_kernel.models.material
Responsibility: ORM persistence for materials and their audit log entries.
Architecture position: Kernel > Models.  May import from db/base.py and the
    pure domain types it converts to and from.

Invariants enforced:
    - (material_id, seq) is unique: each log position is stored once.
    - Log rows are deleted only together with their material (cascade).
      Rewrites of stored rows are refused by SqlMaterialGateway.

Audit relevance:
    MaterialLogRecord rows ARE the persisted audit trail of a material.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from materials_kernel.db.base import Base, UUIDString
from materials_kernel.domain.material import LogAction, LogEntry, Material


class MaterialRecord(Base):
    """One tracked material.

    ``ordinal`` preserves insertion order, which is the store order the
    kernel relies on for first-match serial lookup.
    """

    __tablename__ = "materials"

    __table_args__ = (
        Index("idx_material_serial", "serial_number"),
        Index("idx_material_ordinal", "ordinal"),
    )

    ordinal: Mapped[int] = mapped_column(nullable=False)

    designation: Mapped[str | None] = mapped_column(String(255), nullable=True)

    serial_number: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # "Warehouse" or the holder's name
    position: Mapped[str | None] = mapped_column(String(255), nullable=True)

    in_lager: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    log_entries: Mapped[list[MaterialLogRecord]] = relationship(
        back_populates="material",
        order_by="MaterialLogRecord.seq",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<MaterialRecord {self.serial_number} at {self.position}>"

    def apply_state(self, material: Material) -> None:
        """Copy the mutable fields of ``material`` onto this row."""
        self.designation = material.designation
        self.serial_number = material.serial_number
        self.position = material.position
        self.in_lager = material.in_lager

    def to_domain(self) -> Material:
        return Material(
            id=self.id,
            designation=self.designation,
            serial_number=self.serial_number,
            position=self.position,
            in_lager=self.in_lager,
            log=tuple(entry.to_domain() for entry in self.log_entries),
        )


class MaterialLogRecord(Base):
    """One audit log entry of a material, at position ``seq``."""

    __tablename__ = "material_log_entries"

    __table_args__ = (
        UniqueConstraint("material_id", "seq", name="uq_material_log_seq"),
    )

    material_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("materials.id", ondelete="CASCADE"),
        nullable=False,
    )

    # 0-based position in the material's log
    seq: Mapped[int] = mapped_column(nullable=False)

    occurred_at: Mapped[datetime] = mapped_column(nullable=False)

    actor: Mapped[str] = mapped_column(String(100), nullable=False)

    # Null for imported entries that only carry text
    action: Mapped[str | None] = mapped_column(String(30), nullable=True)

    recipient: Mapped[str | None] = mapped_column(String(255), nullable=True)

    event_text: Mapped[str] = mapped_column(Text, nullable=False)

    material: Mapped[MaterialRecord] = relationship(back_populates="log_entries")

    @classmethod
    def from_domain(cls, material_id: UUID, seq: int, entry: LogEntry) -> MaterialLogRecord:
        return cls(
            material_id=material_id,
            seq=seq,
            occurred_at=entry.timestamp,
            actor=entry.actor,
            action=entry.action.value if entry.action is not None else None,
            recipient=entry.recipient,
            event_text=entry.event_text,
        )

    def to_domain(self) -> LogEntry:
        return LogEntry(
            timestamp=self.occurred_at,
            actor=self.actor,
            event_text=self.event_text,
            action=LogAction(self.action) if self.action is not None else None,
            recipient=self.recipient,
        )

    def matches(self, entry: LogEntry) -> bool:
        """True if this stored row records the same facts as ``entry``.

        Naive timestamps (imported history) are stored as-is and read back
        tagged UTC, so both sides are compared as UTC.
        """
        stored = self.to_domain()
        return replace(stored, timestamp=_as_utc(stored.timestamp)) == replace(
            entry, timestamp=_as_utc(entry.timestamp)
        )


def _as_utc(moment: datetime) -> datetime:
    return moment.replace(tzinfo=timezone.utc) if moment.tzinfo is None else moment
