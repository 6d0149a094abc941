"""
Cancellation and background polling primitives.

A CancellationToken is shared by every worker of one scoring pass; a
PollScheduler drives periodic work on its own thread until stopped.
"""

import threading
from typing import Callable, Optional

from nexus_match.core.exceptions import MatchCancelledError
from nexus_match.utils.logger import get_logger

logger = get_logger(__name__)


class CancellationToken:
    """Cooperative cancellation flag checked between units of work."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise MatchCancelledError(self._reason or "cancelled")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or timeout; True if cancelled."""
        return self._event.wait(timeout)


class PollScheduler:
    """
    Calls a function every interval seconds on a daemon thread.

    The scheduler can be stopped and started again; each start spawns a
    fresh thread. Errors raised by the callback are logged and the
    schedule continues.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "poll-scheduler"):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._callback = callback
        self._name = name
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set():
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,), name=self._name, daemon=True
            )
            self._thread.start()
        logger.debug(f"{self._name} started (interval={self.interval}s)")

    def stop(self, timeout: Optional[float] = None, wait: bool = True) -> None:
        """Stop the schedule; joins the thread unless called from it or wait is False."""
        with self._lock:
            thread = self._thread
            self._stop_event.set()
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug(f"{self._name} stopped")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                self._callback()
            except Exception:
                logger.exception(f"{self._name} callback failed")
