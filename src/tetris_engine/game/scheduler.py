from __future__ import annotations

from typing import Callable


class PeriodicTimer:
    """Cancellable periodic task advanced by its owner.

    The timer has no thread of its own: the owner calls :meth:`advance` with
    the elapsed wall-clock time and the callback runs synchronously, once per
    full interval, on the caller's thread. Restarting (``restart`` or
    ``set_interval``) discards the partially elapsed interval. Once
    :meth:`cancel` has been called the timer never fires again.
    """

    def __init__(self, interval_ms: float, callback: Callable[[], None]) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.interval_ms = float(interval_ms)
        self._callback = callback
        self._elapsed_ms = 0.0
        self._running = False
        self._cancelled = False

    @property
    def running(self) -> bool:
        return self._running and not self._cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        if self._cancelled:
            return
        if not self._running:
            self._elapsed_ms = 0.0
        self._running = True

    def stop(self) -> None:
        self._running = False
        self._elapsed_ms = 0.0

    def restart(self) -> None:
        self.stop()
        self.start()

    def set_interval(self, interval_ms: float) -> None:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        was_running = self._running
        self.stop()
        self.interval_ms = float(interval_ms)
        if was_running:
            self.start()

    def cancel(self) -> None:
        self.stop()
        self._cancelled = True

    def advance(self, dt_ms: float) -> int:
        """Advance the clock by ``dt_ms`` and return how many times the callback fired."""
        if not self.running or dt_ms <= 0:
            return 0
        self._elapsed_ms += dt_ms
        fired = 0
        while self.running and self._elapsed_ms >= self.interval_ms:
            self._elapsed_ms -= self.interval_ms
            fired += 1
            self._callback()
        return fired
