"""
Config → Kernel Bridges.

Functions that turn ``MaterialsSettings`` into wired kernel objects.  These
live in materials_config (the producer) because the kernel must NEVER
import materials_config.

Usage:
    from materials_config import get_active_config
    from materials_config.bridges import build_materials_service

    settings = get_active_config()
    service = build_materials_service(settings, player=my_audio_backend)
"""

from __future__ import annotations

from typing import Callable

from materials_config.schema import MaterialsSettings
from materials_kernel.db.engine import create_tables, get_session_factory, init_engine_from_url
from materials_kernel.domain.clock import Clock
from materials_kernel.domain.ports import NotificationChannel, PersistenceGateway
from materials_kernel.logging_config import configure_logging
from materials_kernel.services.material_gateway import SqlMaterialGateway
from materials_kernel.services.materials_service import MaterialsService
from materials_kernel.services.notifier import BackgroundNotifier, LoggingChannel, ToneChannel


def build_notification_channel(
    settings: MaterialsSettings,
    player: Callable[[bytes], None] | None = None,
) -> NotificationChannel:
    """ToneChannel when a player and a tone directory are available, else LoggingChannel."""
    tone_dir = settings.notifications.tone_resource_dir
    if player is None or tone_dir is None:
        return LoggingChannel()
    return ToneChannel(
        tone_dir,
        player,
        success_tone=settings.notifications.success_tone,
        error_tone=settings.notifications.error_tone,
    )


def build_sql_gateway(settings: MaterialsSettings) -> SqlMaterialGateway:
    """Initialize the engine from ``database_url`` and ensure the tables exist."""
    init_engine_from_url(settings.database_url)
    create_tables()
    return SqlMaterialGateway(get_session_factory())


def build_materials_service(
    settings: MaterialsSettings,
    *,
    gateway: PersistenceGateway | None = None,
    player: Callable[[bytes], None] | None = None,
    clock: Clock | None = None,
) -> MaterialsService:
    """Wire a MaterialsService from settings.

    Args:
        settings: Loaded station settings.
        gateway: Overrides the SQL gateway built from ``database_url``.
        player: Audio backend for tones; without it notifications are logged.
        clock: Time source; defaults to the system clock.
    """
    configure_logging(level=settings.log_level)
    notifier = None
    if settings.notifications.enabled:
        notifier = BackgroundNotifier(build_notification_channel(settings, player))
    return MaterialsService(
        gateway if gateway is not None else build_sql_gateway(settings),
        clock=clock,
        notifier=notifier,
        system_actor=settings.system_actor,
        unknown_material_label=settings.unknown_material_label,
    )
