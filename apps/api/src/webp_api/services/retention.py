"""
Background retention sweep for the artifact store.
"""
from __future__ import annotations

import logging
import threading
import time

from ..store import ArtifactStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 3600.0


class RetentionSweeper:
    """
    Deletes artifacts older than retention_hours.

    Disabled when retention_hours is 0: start() does nothing. Otherwise
    start() launches a daemon thread that sweeps once right away and then
    every interval seconds until stop().
    """

    def __init__(
        self,
        store: ArtifactStore,
        retention_hours: int,
        interval: float = DEFAULT_INTERVAL,
    ):
        if retention_hours < 0:
            raise ValueError(f"retention_hours must be >= 0, got {retention_hours}")
        self._store = store
        self.retention_hours = retention_hours
        self.interval = interval

        self._shutdown_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def enabled(self) -> bool:
        return self.retention_hours > 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        if not self.enabled:
            logger.info("File cleanup disabled (retention is 0 hours)")
            return False
        if self.running:
            return True

        self._shutdown_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="retention-sweep",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Starting file cleanup task: %d hours retention, every %.0fs",
            self.retention_hours, self.interval,
        )
        return True

    def stop(self, timeout: float | None = 5.0) -> None:
        self._shutdown_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def sweep_once(self, now: float | None = None) -> int:
        """Run one scan and return the number of deleted files."""
        now = time.time() if now is None else now
        logger.info(
            "Cleaning up files in %s that are older than %d hours",
            self._store.root, self.retention_hours,
        )
        deleted = self._store.purge_older_than_hours(self.retention_hours, now=now)
        logger.info("Cleanup completed: %d files deleted from %s", deleted, self._store.root)
        return deleted

    def _run(self) -> None:
        while not self._shutdown_event.is_set():
            try:
                self.sweep_once()
            except Exception:
                logger.exception("Unexpected error during cleanup sweep")
            self._shutdown_event.wait(timeout=self.interval)
        logger.info("File cleanup task stopped")
