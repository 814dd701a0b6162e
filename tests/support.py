"""Test doubles and factories shared across the suite."""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone

from materials_kernel.domain.material import LogAction, LogEntry, Material
from materials_kernel.domain.notification import Notification

FIXED_TIME = datetime(2024, 3, 1, 8, 30, 0, tzinfo=timezone.utc)


@dataclass
class RecordingGateway:
    """In-memory PersistenceGateway that records every call."""

    rows: list = field(default_factory=list)
    calls: list = field(default_factory=list)

    def get_all(self):
        self.calls.append(("get_all", None))
        return list(self.rows)

    def add(self, material):
        self.calls.append(("add", material))
        self.rows.append(material)

    def update(self, material):
        self.calls.append(("update", material))
        self.rows = [material if m.id == material.id else m for m in self.rows]

    def delete(self, material):
        self.calls.append(("delete", material))
        self.rows = [m for m in self.rows if m.id != material.id]

    def calls_named(self, name):
        return [material for op, material in self.calls if op == name]


class RecordingChannel:
    """NotificationChannel that stores deliveries and can be told to fail."""

    def __init__(self, error: Exception | None = None):
        self.delivered: list[Notification] = []
        self.threads: list[str] = []
        self._error = error

    def deliver(self, notification: Notification) -> None:
        self.threads.append(threading.current_thread().name)
        if self._error is not None:
            raise self._error
        self.delivered.append(notification)


def make_material(
    serial: str | None = "SN123",
    designation: str | None = "Drill",
    *,
    in_lager: bool = True,
    position: str | None = None,
    log: tuple = (),
) -> Material:
    material = Material.create(designation, serial, in_lager=in_lager, position=position)
    return Material(
        id=material.id,
        designation=material.designation,
        serial_number=material.serial_number,
        position=material.position,
        in_lager=material.in_lager,
        log=tuple(log),
    )


def make_entry(
    action: LogAction | None,
    recipient: str | None = None,
    *,
    text: str | None = None,
    at: datetime = FIXED_TIME,
) -> LogEntry:
    """Tagged entry (rendered text) or, with ``text``, a raw/legacy entry."""
    if text is None:
        return LogEntry.record(action, recipient, "System", at)
    return LogEntry(
        timestamp=at, actor="System", event_text=text, action=action, recipient=recipient
    )


def issued_material(serial: str = "SN123", holder: str = "Meier", **kwargs) -> Material:
    """Material currently held by ``holder`` after an issue."""
    return make_material(
        serial,
        in_lager=False,
        position=holder,
        log=(make_entry(LogAction.ISSUED, holder),),
        **kwargs,
    )
