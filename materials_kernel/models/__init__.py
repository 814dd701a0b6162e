"""ORM models for the materials kernel."""

from materials_kernel.models.material import MaterialLogRecord, MaterialRecord

__all__ = [
    "MaterialLogRecord",
    "MaterialRecord",
]
