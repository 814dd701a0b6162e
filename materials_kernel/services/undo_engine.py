"""
UndoEngine -- single-step reversal driven by the last log entry.

Responsibility:
    Finds a material by serial prefix, classifies its most recent log entry
    and applies the compensating transition: an issue goes back to the
    warehouse, a receipt goes back to the holder named in that entry.

Architecture position:
    Kernel > Services -- imperative shell around ``transitions.undo_last``.

Invariants enforced:
    - History is never truncated; the reversal is a new log entry.
    - Only the last entry is considered.  Undo entries are not reversible,
      so undoing an undo fails with UNSUPPORTED_UNDO.

Failure modes:
    - Gateway exceptions propagate from ``InventoryStore.update``.
"""

from __future__ import annotations

from materials_kernel.domain import transitions
from materials_kernel.domain.clock import Clock, SystemClock
from materials_kernel.domain.material import SYSTEM_ACTOR
from materials_kernel.domain.notification import Notification
from materials_kernel.domain.results import OperationResult
from materials_kernel.logging_config import LogContext, get_logger
from materials_kernel.services.inventory_store import InventoryStore
from materials_kernel.services.notifier import BackgroundNotifier

logger = get_logger("services.undo_engine")


class UndoEngine:
    """Reverses the most recent receipt or issue of a material."""

    def __init__(
        self,
        store: InventoryStore,
        clock: Clock | None = None,
        notifier: BackgroundNotifier | None = None,
        system_actor: str = SYSTEM_ACTOR,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._notifier = notifier
        self._system_actor = system_actor

    def undo_by_serial(
        self, serial: str, *, actor: str | None = None
    ) -> OperationResult:
        """Undo the last movement of the material matching ``serial``.

        Returns:
            OperationResult: SUCCESS with the reverted material, or
            NOT_FOUND / NO_HISTORY / UNSUPPORTED_UNDO with nothing changed.
        """
        serial = serial.strip()
        actor = actor or self._system_actor

        with LogContext.scan(serial, actor=actor):
            result = self._undo(serial, actor)

        if self._notifier is not None:
            self._notifier.publish(Notification.for_result(result))
        return result

    def _undo(self, serial: str, actor: str) -> OperationResult:
        material = self._store.find_by_serial_prefix(serial)
        if material is None:
            logger.info("undo_rejected", extra={"reason": "not_found"})
            return OperationResult.not_found(serial)

        last = material.last_entry
        if last is None:
            logger.info(
                "undo_rejected",
                extra={"reason": "no_history", "material_id": str(material.id)},
            )
            return OperationResult.no_history(serial, material)

        if transitions.reversal_of(last) is None:
            logger.info(
                "undo_rejected",
                extra={
                    "reason": "unsupported",
                    "material_id": str(material.id),
                    "last_event": last.event_text,
                },
            )
            return OperationResult.unsupported_undo(serial, material)

        reverted = transitions.undo_last(material, actor, self._clock.now())
        self._store.update(reverted)
        logger.info(
            "undo_applied",
            extra={
                "material_id": str(reverted.id),
                "reversed_action": last.resolved()[0],
                "position": reverted.position,
                "log_length": len(reverted.log),
            },
        )
        return OperationResult.ok(serial, reverted, reverted.log[-1].event_text)
