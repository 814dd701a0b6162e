"""
MaterialsSettings schema.

Typed, frozen view of the YAML settings file.  The loader parses YAML into
these types; services receive them already validated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class NotificationSettings:
    """Feedback delivery (tones / popups)."""

    enabled: bool = True
    tone_resource_dir: Path | None = None
    success_tone: str = "ok.mp3"
    error_tone: str = "error.mp3"


@dataclass(frozen=True)
class MaterialsSettings:
    """Runtime settings for a scanner station."""

    database_url: str
    system_actor: str = "System"
    unknown_material_label: str = "Unknown material"
    log_level: str = "INFO"
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    checksum: str = ""
