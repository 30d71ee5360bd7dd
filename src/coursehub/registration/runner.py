"""Background runner that sweeps the registration queue on an interval."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from coursehub.registration.queue import RegistrationQueue

logger = logging.getLogger(__name__)


class QueueRunner:
    """Runs RegistrationQueue.tick() on a daemon thread."""

    def __init__(self, queue: RegistrationQueue, interval_seconds: float = 60.0) -> None:
        """Initialize the runner.

        Args:
            queue: Queue to sweep.
            interval_seconds: Delay between sweeps.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.queue = queue
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start sweeping. No-op if already running."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="coursehub-queue-runner",
            daemon=True,
        )
        self._thread.start()
        logger.info("Started queue runner (every %.1fs)", self.interval_seconds)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Signal the thread to stop and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
            logger.info("Stopped queue runner")

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.queue.tick()
            except Exception as e:
                logger.exception("Queue sweep failed: %s", e)
            self._stop.wait(self.interval_seconds)
