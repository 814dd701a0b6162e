"""
BackgroundNotifier and notification channels.

Responsibility:
    Delivers cosmetic feedback (tones, popups) for operation results on a
    worker thread so that delivery can never block, delay or change the
    outcome of a scan or undo.

Architecture position:
    Kernel > Services -- side channel.  ScanProcessor, UndoEngine and
    MaterialsService publish; channels implement ``NotificationChannel``.

Failure modes:
    - Channel exceptions are logged (``notification_delivery_failed``) on
      the worker thread and discarded.
    - Publishing after ``close()`` is logged and dropped.
    - ToneChannel logs ``tone_resource_missing`` and returns when a tone
      file does not exist.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from threading import Lock
from typing import Callable

from materials_kernel.domain.notification import Notification, Signal
from materials_kernel.domain.ports import NotificationChannel
from materials_kernel.logging_config import get_logger

logger = get_logger("services.notifier")


class BackgroundNotifier:
    """Fire-and-forget publisher backed by a single worker thread."""

    def __init__(self, channel: NotificationChannel):
        self._channel = channel
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="materials-notifier"
        )
        self._pending: set[Future] = set()
        self._lock = Lock()

    def publish(self, notification: Notification) -> None:
        """Queue delivery and return immediately. Never raises."""
        try:
            future = self._executor.submit(self._deliver, notification)
        except RuntimeError:
            logger.warning(
                "notification_dropped",
                extra={"signal": notification.signal, "kind": notification.kind},
            )
            return
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)

    def flush(self, timeout: float | None = None) -> None:
        """Wait for queued deliveries to finish."""
        with self._lock:
            pending = set(self._pending)
        wait(pending, timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _deliver(self, notification: Notification) -> None:
        try:
            self._channel.deliver(notification)
        except Exception:
            logger.warning(
                "notification_delivery_failed",
                extra={"signal": notification.signal, "kind": notification.kind},
                exc_info=True,
            )

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)


class LoggingChannel:
    """Writes each notification to the structured log."""

    def deliver(self, notification: Notification) -> None:
        logger.info(
            "notification",
            extra={
                "signal": notification.signal,
                "kind": notification.kind,
                "text": notification.message,
            },
        )


class ToneChannel:
    """Resolves the tone file for a signal and hands its bytes to a player.

    ``player`` is the audio backend (anything that accepts raw file bytes);
    its exceptions propagate to the notifier, which swallows them.
    """

    def __init__(
        self,
        resource_dir: Path,
        player: Callable[[bytes], None],
        success_tone: str = "ok.mp3",
        error_tone: str = "error.mp3",
    ):
        self._resource_dir = Path(resource_dir)
        self._player = player
        self._tones = {
            Signal.SUCCESS: success_tone,
            Signal.WARNING: error_tone,
            Signal.ERROR: error_tone,
        }

    def deliver(self, notification: Notification) -> None:
        path = self._resource_dir / self._tones[notification.signal]
        if not path.is_file():
            logger.warning("tone_resource_missing", extra={"path": str(path)})
            return
        self._player(path.read_bytes())
