"""
SqlMaterialGateway -- PersistenceGateway backed by SQLAlchemy.

Responsibility:
    Stores materials and their log entries.  Every call runs in its own
    transaction and is committed before returning, so the backing store is
    authoritative as soon as the kernel's call completes.

Architecture position:
    Kernel > Services -- persistence adapter implementing
    ``domain.ports.PersistenceGateway``.

Invariants enforced:
    - Log rows are append-only: ``update`` inserts entries beyond the stored
      length and refuses a log that is shorter than, or differs from, what
      is stored (AuditLogImmutabilityError).
    - ``get_all`` returns materials in insertion order.

Failure modes:
    - MaterialNotFoundError: ``update`` or ``delete`` of an id never stored.
    - AuditLogImmutabilityError: stored history would be lost or rewritten.
    - PersistenceError: any SQLAlchemy error; the transaction is rolled back
      and the driver error is chained.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, sessionmaker

from materials_kernel.db.engine import session_scope
from materials_kernel.domain.material import Material
from materials_kernel.exceptions import (
    AuditLogImmutabilityError,
    MaterialNotFoundError,
    PersistenceError,
)
from materials_kernel.logging_config import get_logger
from materials_kernel.models.material import MaterialLogRecord, MaterialRecord

logger = get_logger("services.material_gateway")


class SqlMaterialGateway:
    """Synchronous SQL persistence for materials."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get_all(self) -> list[Material]:
        with self._transaction("get_all", None) as session:
            records = session.scalars(
                select(MaterialRecord)
                .options(selectinload(MaterialRecord.log_entries))
                .order_by(MaterialRecord.ordinal)
            ).all()
            return [record.to_domain() for record in records]

    def add(self, material: Material) -> None:
        with self._transaction("add", material) as session:
            next_ordinal = (
                session.scalar(select(func.max(MaterialRecord.ordinal))) or 0
            ) + 1
            record = MaterialRecord(id=material.id, ordinal=next_ordinal)
            record.apply_state(material)
            record.log_entries = [
                MaterialLogRecord.from_domain(material.id, seq, entry)
                for seq, entry in enumerate(material.log)
            ]
            session.add(record)
        logger.debug("material_stored", extra={"material_id": str(material.id)})

    def update(self, material: Material) -> None:
        with self._transaction("update", material) as session:
            record = self._load(session, material)
            stored = list(record.log_entries)

            if len(material.log) < len(stored):
                raise AuditLogImmutabilityError(
                    str(material.id), len(material.log), "log entries would be removed"
                )
            for seq, row in enumerate(stored):
                if not row.matches(material.log[seq]):
                    raise AuditLogImmutabilityError(
                        str(material.id), seq, "stored entry differs"
                    )

            record.apply_state(material)
            for seq in range(len(stored), len(material.log)):
                record.log_entries.append(
                    MaterialLogRecord.from_domain(material.id, seq, material.log[seq])
                )
        logger.debug(
            "material_updated",
            extra={
                "material_id": str(material.id),
                "appended_entries": len(material.log) - len(stored),
            },
        )

    def delete(self, material: Material) -> None:
        with self._transaction("delete", material) as session:
            session.delete(self._load(session, material))
        logger.debug("material_deleted", extra={"material_id": str(material.id)})

    # =========================================================================
    # Internal
    # =========================================================================

    @staticmethod
    def _load(session: Session, material: Material) -> MaterialRecord:
        record = session.get(
            MaterialRecord,
            material.id,
            options=[selectinload(MaterialRecord.log_entries)],
        )
        if record is None:
            raise MaterialNotFoundError(str(material.id))
        return record

    @contextmanager
    def _transaction(
        self, operation: str, material: Material | None
    ) -> Generator[Session, None, None]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            raise PersistenceError(
                operation,
                str(material.id) if material is not None else None,
                str(exc),
            ) from exc
