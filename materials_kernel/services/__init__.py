"""Services for the materials kernel (write side and adapters)."""

from materials_kernel.services.inventory_store import InventoryStore
from materials_kernel.services.material_gateway import SqlMaterialGateway
from materials_kernel.services.materials_service import MaterialsService
from materials_kernel.services.notifier import (
    BackgroundNotifier,
    LoggingChannel,
    ToneChannel,
)
from materials_kernel.services.scan_processor import ScanProcessor
from materials_kernel.services.undo_engine import UndoEngine

__all__ = [
    "BackgroundNotifier",
    "InventoryStore",
    "LoggingChannel",
    "MaterialsService",
    "ScanProcessor",
    "SqlMaterialGateway",
    "ToneChannel",
    "UndoEngine",
]
