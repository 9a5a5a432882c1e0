"""Single-slot debounce timer."""

import threading
from collections.abc import Callable

from ..utils.logging import get_logger

logger = get_logger(__name__)


class DebouncedCall:
    """
    Runs a callback once after a quiet period.

    Each call to ``schedule()`` cancels the pending timer (if any) and starts
    a new one, so a burst of schedules produces a single run ``delay``
    seconds after the last one. At most one timer is outstanding.
    """

    def __init__(self, callback: Callable[[], None], delay: float = 2.0):
        """
        Initialize the debounced call.

        Args:
            callback: Function to run when the quiet period elapses
            delay: Quiet period in seconds
        """
        self.callback = callback
        self.delay = delay
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        """Check whether a run is scheduled."""
        with self._lock:
            return self._timer is not None

    def schedule(self):
        """Schedule the callback, restarting the quiet period."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()

            timer = threading.Timer(self.delay, self._fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> bool:
        """
        Cancel the pending run.

        Returns:
            True if a run was pending, False otherwise
        """
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            return True

    def _fire(self):
        with self._lock:
            # A timer replaced or cancelled after it started waiting must not run
            if self._timer is not threading.current_thread():
                return
            self._timer = None

        try:
            self.callback()
        except Exception as e:
            logger.error(f"Debounced callback failed: {e}")
