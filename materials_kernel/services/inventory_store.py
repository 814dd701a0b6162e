"""
InventoryStore -- in-memory cache of materials backed by a gateway.

Responsibility:
    Holds every material in store order, applies add/update/remove to the
    cache first and then forwards the same call to the persistence gateway.
    Provides lookup by id, serial-prefix lookup for scans, and the filtered
    view used by list screens.

Architecture position:
    Kernel > Services -- imperative shell.  Consumed by ScanProcessor,
    UndoEngine and MaterialsService.

Failure modes:
    - Gateway exceptions propagate unchanged.  The cache already holds the
      mutation when the gateway is called.

Non-goals:
    - Does NOT check for duplicate ids on add.
    - Does NOT enforce serial-number uniqueness.  Prefix lookup returns the
      first match in store order and logs a warning when it is ambiguous.
    - Does NOT lock; concurrent callers can interleave.
"""

from __future__ import annotations

from typing import Iterator
from uuid import UUID

from materials_kernel.domain.material import Material
from materials_kernel.domain.ports import PersistenceGateway
from materials_kernel.logging_config import get_logger

logger = get_logger("services.inventory_store")


class InventoryStore:
    """Ordered material cache kept in step with a PersistenceGateway."""

    def __init__(self, gateway: PersistenceGateway):
        self._gateway = gateway
        self._materials: list[Material] = []
        self.load()

    def load(self) -> None:
        """Replace the cache with the gateway's current contents."""
        self._materials = list(self._gateway.get_all())
        logger.info("inventory_loaded", extra={"material_count": len(self._materials)})

    @property
    def materials(self) -> tuple[Material, ...]:
        return tuple(self._materials)

    def __len__(self) -> int:
        return len(self._materials)

    def __iter__(self) -> Iterator[Material]:
        return iter(tuple(self._materials))

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(self, material: Material) -> None:
        self._materials.append(material)
        self._gateway.add(material)
        logger.info(
            "material_added",
            extra={"material_id": str(material.id), "serial": material.serial_number},
        )

    def update(self, material: Material) -> bool:
        """Replace the cached item with the same id.

        Returns False, without touching the gateway, when no cached item
        has that id.
        """
        index = self._index_of(material.id)
        if index is None:
            logger.debug(
                "material_update_skipped", extra={"material_id": str(material.id)}
            )
            return False
        self._materials[index] = material
        self._gateway.update(material)
        return True

    def remove(self, material: Material) -> None:
        self._materials = [m for m in self._materials if m.id != material.id]
        self._gateway.delete(material)
        logger.info("material_removed", extra={"material_id": str(material.id)})

    # =========================================================================
    # Queries
    # =========================================================================

    def find_by_id(self, material_id: UUID) -> Material | None:
        index = self._index_of(material_id)
        return None if index is None else self._materials[index]

    def find_by_serial_prefix(self, code: str) -> Material | None:
        """First material whose trimmed serial starts with the trimmed code.

        A blank code is a prefix of every serial, so it resolves to the first
        material that has one.
        """
        code = code.strip()
        matches = [m for m in self._materials if m.matches_serial_prefix(code)]
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                "ambiguous_serial_prefix",
                extra={
                    "code": code,
                    "match_count": len(matches),
                    "chosen_material_id": str(matches[0].id),
                },
            )
        return matches[0]

    def filtered_view(self, text: str, active: bool) -> tuple[Material, ...]:
        """Materials whose designation, serial or position contains ``text``.

        Returns the whole collection, in store order, when the filter is
        inactive or the text is blank.
        """
        if not active or not text.strip():
            return tuple(self._materials)
        return tuple(m for m in self._materials if m.matches_text(text))

    def _index_of(self, material_id: UUID) -> int | None:
        for index, material in enumerate(self._materials):
            if material.id == material_id:
                return index
        return None
