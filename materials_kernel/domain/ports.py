"""
Ports to the kernel's external collaborators.

The kernel calls the persistence gateway synchronously after every
in-memory mutation and treats it as authoritative.  Notification channels
receive cosmetic feedback only and are always driven from outside the
core call path (see ``BackgroundNotifier``).
"""

from __future__ import annotations

from typing import Protocol, Sequence

from materials_kernel.domain.material import Material
from materials_kernel.domain.notification import Notification


class PersistenceGateway(Protocol):
    """
    Durable backing store for materials.

    Implementors return materials in a stable order from ``get_all`` and
    persist each call before returning.  No batching, retries or conflict
    detection are expected by the kernel.
    """

    def get_all(self) -> Sequence[Material]: ...

    def add(self, material: Material) -> None: ...

    def update(self, material: Material) -> None: ...

    def delete(self, material: Material) -> None: ...


class NotificationChannel(Protocol):
    """Receives feedback notifications (tones, popups). May raise freely."""

    def deliver(self, notification: Notification) -> None: ...
