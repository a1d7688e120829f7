"""Periodic session tick with a cancellation handle."""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from PySide6.QtCore import QTimer

log = logging.getLogger("typeninja.session_timer")

TICK_INTERVAL_MS = 1000


class SessionTimer(ABC):
    """Calls a callback once per interval until stopped.

    At most one callback is scheduled at a time; starting an active timer
    replaces the previous schedule.
    """

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self._callback: Optional[Callable[[], None]] = None

    @property
    def active(self) -> bool:
        """Whether ticks are currently scheduled."""
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        """Start ticking, calling callback once per interval."""
        if self.active:
            self.stop()
        self._callback = callback
        self._schedule()

    def stop(self) -> None:
        """Stop ticking. Takes effect immediately."""
        if not self.active:
            return
        self._callback = None
        self._cancel()

    def _fire(self) -> None:
        callback = self._callback
        if callback is not None:
            callback()

    @abstractmethod
    def _schedule(self) -> None:
        """Arrange for _fire to run once per interval."""

    @abstractmethod
    def _cancel(self) -> None:
        """Cancel the arrangement made by _schedule."""


class QtSessionTimer(SessionTimer):
    """Ticks from the Qt event loop using a QTimer."""

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS):
        super().__init__(interval_ms)
        self._timer: Optional[QTimer] = None

    def _schedule(self) -> None:
        self._timer = QTimer()
        self._timer.setInterval(self.interval_ms)
        self._timer.timeout.connect(self._fire)
        self._timer.start()
        log.debug(f"Qt session timer started ({self.interval_ms}ms)")

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.timeout.disconnect(self._fire)
            self._timer = None


class ManualSessionTimer(SessionTimer):
    """Ticks only when told to, for headless drivers and tests."""

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS):
        super().__init__(interval_ms)
        self.fired = 0

    def _schedule(self) -> None:
        pass

    def _cancel(self) -> None:
        pass

    def fire(self, count: int = 1) -> int:
        """Deliver up to count ticks, stopping early if the timer is stopped.

        Returns:
            Number of ticks delivered
        """
        delivered = 0
        for _ in range(count):
            if not self.active:
                break
            self._fire()
            delivered += 1
        self.fired += delivered
        return delivered
