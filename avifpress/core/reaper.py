"""
Periodic removal of expired upload and output files.

The reaper owns one asyncio task for the lifetime of the application. It
sweeps once when started and then every ``interval_seconds``, deleting
regular files whose modification time is older than ``retention_seconds``.
"""
import time
import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

# Set up logging
logger = logging.getLogger(__name__)

DEFAULT_RETENTION_SECONDS = 60 * 60
DEFAULT_INTERVAL_SECONDS = 60 * 60
STOP_TIMEOUT_SECONDS = 10.0


class Reaper:
    """
    Deletes stale files from a fixed set of directories.

    Args:
        directories: Directories to sweep (missing ones are skipped)
        retention_seconds: Minimum age before a file may be deleted
        interval_seconds: Delay between sweeps
    """

    def __init__(
        self,
        directories: Iterable[Union[str, Path]],
        retention_seconds: float = DEFAULT_RETENTION_SECONDS,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    ):
        self.directories: List[Path] = [Path(d) for d in directories]
        self.retention_seconds = retention_seconds
        self.interval_seconds = interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    def sweep(self, now: Optional[float] = None) -> int:
        """
        Delete every file older than the retention window.

        Errors on individual files are logged and skipped; this method
        never raises.

        Args:
            now: Reference time as a Unix timestamp (defaults to the current time)

        Returns:
            Number of files deleted
        """
        cutoff = (time.time() if now is None else now) - self.retention_seconds
        deleted = 0

        for directory in self.directories:
            if not directory.is_dir():
                continue

            try:
                entries = list(directory.iterdir())
            except OSError as e:
                logger.error(f"Error listing {directory}: {e}")
                continue

            for path in entries:
                try:
                    if not path.is_file():
                        continue
                    if path.stat().st_mtime < cutoff:
                        path.unlink()
                        deleted += 1
                        logger.debug(f"Deleted expired file: {path}")
                except OSError as e:
                    logger.error(f"Error deleting {path}: {e}")

        return deleted

    async def start(self) -> None:
        """Start the background sweep loop."""
        if self._running:
            logger.warning("Reaper is already running")
            return

        self._running = True
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())
        logger.info(
            f"Reaper started: sweeping {len(self.directories)} directories every "
            f"{self.interval_seconds}s (retention {self.retention_seconds}s)"
        )

    async def stop(self) -> None:
        """Signal the sweep loop to finish and wait for it."""
        if not self._running:
            logger.warning("Reaper is not running")
            return

        self._running = False
        self._stop_event.set()

        if self._task:
            try:
                await asyncio.wait_for(self._task, timeout=STOP_TIMEOUT_SECONDS)
            except asyncio.TimeoutError:
                logger.warning("Reaper did not stop in time, cancelling")
                self._task.cancel()
                try:
                    await self._task
                except asyncio.CancelledError:
                    pass
            finally:
                self._task = None

        logger.info("Reaper stopped")

    async def _run(self) -> None:
        while self._running:
            try:
                deleted = await asyncio.to_thread(self.sweep)
                if deleted:
                    logger.info(f"Reaper removed {deleted} expired files")
            except Exception as e:
                logger.exception(f"Unexpected error during sweep: {e}")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
                break
            except asyncio.TimeoutError:
                continue
