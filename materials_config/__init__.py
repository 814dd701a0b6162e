"""
materials_config -- single public entrypoint for station settings.

Responsibility:
    ``get_active_config()`` returns the validated ``MaterialsSettings`` for
    this station.  YAML parsing lives in ``loader`` and is not called
    directly by services.

Failure modes:
    - ``ConfigurationError`` -- file missing, malformed, or invalid.

Audit relevance:
    Every successful ``get_active_config()`` call logs a
    ``materials_config_loaded`` entry with the source path and checksum.
"""

from __future__ import annotations

from pathlib import Path

from materials_config.loader import load_settings
from materials_config.schema import MaterialsSettings, NotificationSettings
from materials_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default settings file shipped with the package
DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | None = None) -> MaterialsSettings:
    """Load the station settings.

    Args:
        config_path: Settings file; defaults to ``sets/default.yaml``.

    Raises:
        ConfigurationError: If the file is missing or invalid.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    settings = load_settings(path)
    _logger.info(
        "materials_config_loaded",
        extra={"source": str(path), "checksum": settings.checksum},
    )
    return settings


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "MaterialsSettings",
    "NotificationSettings",
    "get_active_config",
]
