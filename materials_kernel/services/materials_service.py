"""
MaterialsService -- the in-process API of the materials kernel.

Responsibility:
    Composes InventoryStore, ScanProcessor, UndoEngine and an optional
    BackgroundNotifier, and exposes the station operations: scan, undo,
    add / update / delete, manual position change, name lookup and the
    filtered list view.

Architecture position:
    Kernel > Services -- outermost kernel service.  The console driver and
    any UI talk to this class only.

Invariants enforced:
    - Scan and undo go through ScanProcessor / UndoEngine and always append
      exactly one log entry when they change state.
    - ``update_position`` changes the position only and appends NO log
      entry; ``in_lager`` is left as it is.
    - Notification delivery never affects a returned result.

Failure modes:
    - Gateway exceptions propagate unchanged.
    - UnknownScanModeError from ``process_scan`` for an unrecognised mode.
"""

from __future__ import annotations

from dataclasses import replace

from materials_kernel.domain.clock import Clock, SystemClock
from materials_kernel.domain.material import SYSTEM_ACTOR, Material
from materials_kernel.domain.notification import Notification
from materials_kernel.domain.ports import PersistenceGateway
from materials_kernel.domain.results import OperationResult, ScanMode
from materials_kernel.logging_config import get_logger
from materials_kernel.services.inventory_store import InventoryStore
from materials_kernel.services.notifier import BackgroundNotifier
from materials_kernel.services.scan_processor import ScanProcessor
from materials_kernel.services.undo_engine import UndoEngine

logger = get_logger("services.materials")

UNKNOWN_MATERIAL_LABEL = "Unknown material"


class MaterialsService:
    """Facade over the scan state machine and the material cache."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        clock: Clock | None = None,
        notifier: BackgroundNotifier | None = None,
        system_actor: str = SYSTEM_ACTOR,
        unknown_material_label: str = UNKNOWN_MATERIAL_LABEL,
    ):
        clock = clock or SystemClock()
        self._notifier = notifier
        self._unknown_material_label = unknown_material_label
        self.store = InventoryStore(gateway)
        self.scans = ScanProcessor(self.store, clock, notifier, system_actor)
        self.undo = UndoEngine(self.store, clock, notifier, system_actor)

    @property
    def materials(self) -> tuple[Material, ...]:
        return self.store.materials

    # =========================================================================
    # Scan state machine
    # =========================================================================

    def process_scan(
        self,
        code: str,
        mode: ScanMode | str,
        recipient_name: str = "",
        *,
        actor: str | None = None,
    ) -> OperationResult:
        return self.scans.process_scan(code, mode, recipient_name, actor=actor)

    def undo_by_serial(self, serial: str, *, actor: str | None = None) -> OperationResult:
        return self.undo.undo_by_serial(serial, actor=actor)

    # =========================================================================
    # Maintenance
    # =========================================================================

    def add_material(self, material: Material) -> None:
        self.store.add(material)

    def update_material(self, material: Material) -> bool:
        """Replace by id; returns False (no-op) when the id is not cached."""
        return self.store.update(material)

    def delete_material(self, material: Material) -> OperationResult:
        self.store.remove(material)
        result = OperationResult.deleted(material)
        self._publish(result)
        return result

    def update_position(self, serial: str, new_position: str) -> OperationResult:
        """Set the position directly, bypassing the audit log."""
        material = self.store.find_by_serial_prefix(serial)
        if material is None:
            result = OperationResult.not_found(serial.strip())
            self._publish(result)
            return result

        updated = replace(material, position=new_position)
        self.store.update(updated)
        logger.info(
            "position_updated",
            extra={"material_id": str(updated.id), "position": new_position},
        )
        return OperationResult.ok(serial.strip(), updated)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_material_name_by_serial(self, serial: str) -> str:
        material = self.store.find_by_serial_prefix(serial)
        if material is None or material.designation is None:
            return self._unknown_material_label
        return material.designation

    def filtered_view(self, text: str, active: bool) -> tuple[Material, ...]:
        return self.store.filtered_view(text, active)

    def _publish(self, result: OperationResult) -> None:
        if self._notifier is not None:
            self._notifier.publish(Notification.for_result(result))
