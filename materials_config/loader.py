"""
Settings loader (``materials_config.loader``).

Responsibility
--------------
Loads the YAML settings file and parses it into the frozen
``MaterialsSettings`` dataclass.  Callers should go through
``materials_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``ConfigurationError``.
* Malformed YAML  -> ``ConfigurationError`` (the ``yaml.YAMLError`` is chained).
* Missing required keys or wrong value types  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from materials_config.schema import MaterialsSettings, NotificationSettings
from materials_kernel.exceptions import ConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigurationError: if the file is missing, unreadable YAML, or not
            a mapping at the top level.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as exc:
        raise ConfigurationError(str(path), "file not found") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(str(path), f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def _typed(source: str, data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = data.get(key, default)
    if not isinstance(value, kind):
        raise ConfigurationError(
            source, f"'{key}' must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def parse_notifications(
    source: str, data: dict[str, Any], base_dir: Path
) -> NotificationSettings:
    """Parse the ``notifications`` section.

    A relative ``tone_resource_dir`` is resolved against the settings file's
    directory.
    """
    tone_dir = data.get("tone_resource_dir")
    if tone_dir is not None:
        tone_dir = Path(_typed(source, data, "tone_resource_dir", str, ""))
        if not tone_dir.is_absolute():
            tone_dir = base_dir / tone_dir
    return NotificationSettings(
        enabled=_typed(source, data, "enabled", bool, True),
        tone_resource_dir=tone_dir,
        success_tone=_typed(source, data, "success_tone", str, "ok.mp3"),
        error_tone=_typed(source, data, "error_tone", str, "error.mp3"),
    )


def parse_settings(data: dict[str, Any], source: str, base_dir: Path) -> MaterialsSettings:
    """
    Parse ``MaterialsSettings`` from a dict.

    Raises:
        ConfigurationError: if ``database_url`` is missing or a value has the
            wrong type.
    """
    if "database_url" not in data:
        raise ConfigurationError(source, "missing required key 'database_url'")
    return MaterialsSettings(
        database_url=_typed(source, data, "database_url", str, ""),
        system_actor=_typed(source, data, "system_actor", str, "System"),
        unknown_material_label=_typed(
            source, data, "unknown_material_label", str, "Unknown material"
        ),
        log_level=_typed(source, data, "log_level", str, "INFO").upper(),
        notifications=parse_notifications(
            source, _typed(source, data, "notifications", dict, {}), base_dir
        ),
        checksum=compute_checksum(data),
    )


def load_settings(path: Path) -> MaterialsSettings:
    """Load and parse a settings file."""
    return parse_settings(load_yaml_file(path), str(path), path.parent)


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
