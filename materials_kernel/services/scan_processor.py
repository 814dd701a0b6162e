"""
ScanProcessor -- turns a scanned code into a receive or issue.

Responsibility:
    Matches the scanned code to a material by serial prefix, validates the
    requested mode against the material's location, applies the transition
    with one appended log entry, and persists it through the store.

Architecture position:
    Kernel > Services -- imperative shell around ``domain.transitions``.

Invariants enforced:
    - A rejected scan (not found / wrong location) never mutates anything.
    - A successful receive or issue appends exactly one log entry.
    - After a receive, ``in_lager`` is True and ``position`` is "Warehouse";
      after an issue, ``in_lager`` is False and ``position`` is the recipient.

Behavioural quirk kept on purpose:
    An issue with a blank recipient changes nothing but still reports
    success (``SILENT_NO_OP``).  The unchanged material is still passed
    through ``InventoryStore.update``.

Failure modes:
    - Gateway exceptions propagate from ``InventoryStore.update``.
"""

from __future__ import annotations

from materials_kernel.domain import transitions
from materials_kernel.domain.clock import Clock, SystemClock
from materials_kernel.domain.material import SYSTEM_ACTOR
from materials_kernel.domain.notification import Notification
from materials_kernel.domain.results import OperationResult, ScanMode
from materials_kernel.logging_config import LogContext, get_logger
from materials_kernel.services.inventory_store import InventoryStore
from materials_kernel.services.notifier import BackgroundNotifier

logger = get_logger("services.scan_processor")


class ScanProcessor:
    """Scan-to-mutation state machine for the receive and issue modes."""

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

    def process_scan(
        self,
        code: str,
        mode: ScanMode | str,
        recipient_name: str = "",
        *,
        actor: str | None = None,
    ) -> OperationResult:
        """Apply one scan.

        Args:
            code: Raw scanner input; surrounding whitespace is ignored.
            mode: RECEIVE or ISSUE (labels accepted, see ScanMode.parse).
            recipient_name: For ISSUE, who takes the item; for RECEIVE, who
                hands it back (recorded in the log only).
            actor: Identity recorded on the log entry.  Defaults to the
                system actor.

        Returns:
            OperationResult whose ``display_name`` is the designation on
            success and None otherwise.

        Raises:
            UnknownScanModeError: If ``mode`` is an unrecognised label.
        """
        mode = ScanMode.parse(mode)
        code = code.strip()
        actor = actor or self._system_actor

        with LogContext.scan(code, mode, actor):
            result = self._apply(code, mode, recipient_name, actor)

        if self._notifier is not None:
            self._notifier.publish(Notification.for_result(result))
        return result

    def _apply(
        self, code: str, mode: ScanMode, recipient_name: str, actor: str
    ) -> OperationResult:
        found = self._store.find_by_serial_prefix(code)
        if found is None:
            logger.info("scan_rejected", extra={"reason": "not_found"})
            return OperationResult.not_found(code)

        if mode is ScanMode.RECEIVE and found.in_lager:
            logger.info(
                "scan_rejected",
                extra={"reason": "already_in_warehouse", "material_id": str(found.id)},
            )
            return OperationResult.already_in_warehouse(code, found)

        if mode is ScanMode.ISSUE and not found.in_lager:
            logger.info(
                "scan_rejected",
                extra={"reason": "not_in_warehouse", "material_id": str(found.id)},
            )
            return OperationResult.not_in_warehouse(code, found)

        recipient = recipient_name.strip()
        if mode is ScanMode.RECEIVE:
            updated = transitions.receive(found, recipient, actor, self._clock.now())
        elif recipient:
            updated = transitions.issue(found, recipient, actor, self._clock.now())
        else:
            self._store.update(found)
            logger.warning(
                "scan_issue_without_recipient", extra={"material_id": str(found.id)}
            )
            return OperationResult.silent_no_op(code, found)

        self._store.update(updated)
        logger.info(
            "scan_applied",
            extra={
                "material_id": str(updated.id),
                "position": updated.position,
                "log_length": len(updated.log),
            },
        )
        return OperationResult.ok(code, updated, updated.log[-1].event_text)
