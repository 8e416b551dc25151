"""Working-directory removal and deferred deletion of finished outputs."""

import shutil
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional
import logging

from .exceptions import ResourceCleanupFailure

logger = logging.getLogger(__name__)


def _remove_path(path: Path) -> None:
    try:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)
    except OSError as e:
        raise ResourceCleanupFailure(f"Could not remove {path}: {e}") from e


def cleanup_directory(path: Path) -> None:
    """Remove a directory tree. Best effort: failures are logged, never raised."""
    if not path or not Path(path).exists():
        return
    try:
        _remove_path(Path(path))
        logger.debug(f"Removed {path}")
    except ResourceCleanupFailure as e:
        logger.debug(str(e))


class ScheduledCleanup:
    """Handle for one pending deletion."""

    def __init__(self, path: Path, due_at: float):
        self.path = Path(path)
        self.due_at = due_at
        self._cancelled = False
        self._done = False
        self._timer: Optional[threading.Timer] = None
        self._state_lock = threading.Lock()

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._done)

    def cancel(self) -> bool:
        """Cancel the deletion. Returns False if it already ran, is running or was cancelled."""
        with self._state_lock:
            if not self.active:
                return False
            self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        return True

    def _claim(self) -> bool:
        # Marks the handle done; a cancel() after this returns False
        with self._state_lock:
            if not self.active:
                return False
            self._done = True
            return True


class CleanupScheduler:
    """
    Deletes files after a grace period.

    Every scheduled deletion is an explicit handle that can be cancelled.
    With use_timers=True a daemon timer fires run_due() when each handle
    becomes due; with use_timers=False nothing runs until run_due() is
    called, so tests can drive time through the injected clock.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, use_timers: bool = True):
        self._clock = clock
        self._use_timers = use_timers
        self._lock = threading.Lock()
        self._pending: List[ScheduledCleanup] = []

    def schedule(self, path: Path, delay_seconds: float) -> ScheduledCleanup:
        """Schedule path for deletion delay_seconds from now."""
        handle = ScheduledCleanup(path, self._clock() + delay_seconds)
        with self._lock:
            self._pending.append(handle)

        if self._use_timers:
            handle._timer = threading.Timer(delay_seconds, self.run_due)
            handle._timer.daemon = True
            handle._timer.start()

        logger.debug(f"Scheduled deletion of {path} in {delay_seconds}s")
        return handle

    def run_due(self) -> List[Path]:
        """Delete every active handle that is due. Returns the paths handled."""
        now = self._clock()
        with self._lock:
            due = [h for h in self._pending if h.active and h.due_at <= now]
            self._pending = [h for h in self._pending if h.active and h.due_at > now]

        removed = []
        for handle in due:
            if not handle._claim():
                continue
            try:
                _remove_path(handle.path)
                logger.info(f"Deleted expired output {handle.path}")
            except ResourceCleanupFailure as e:
                logger.debug(str(e))
            removed.append(handle.path)
        return removed

    def pending(self) -> List[ScheduledCleanup]:
        with self._lock:
            return [h for h in self._pending if h.active]

    def shutdown(self) -> None:
        """Cancel every pending deletion."""
        with self._lock:
            handles, self._pending = self._pending, []
        for handle in handles:
            handle.cancel()
