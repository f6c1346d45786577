from __future__ import annotations

import asyncio
from collections.abc import Callable


class Timer:
    """Cancellable timer running a callback on the event loop after `interval` seconds.

    A repeating timer schedules its next run before calling the callback, so the callback
    can cancel it.
    """

    def __init__(self, interval: float, callback: Callable[[], None], repeat: bool = False) -> None:
        self.interval = interval
        self.callback = callback
        self.repeat = repeat
        self.fire_count = 0
        self._handle: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def active(self) -> bool:
        """Check if the timer is scheduled to fire."""
        return self._handle is not None

    def start(self) -> Timer:
        """Schedule the timer on the running event loop. Restarts it if already scheduled."""
        self.cancel()
        self._loop = asyncio.get_running_loop()
        self._schedule()
        return self

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        assert self._loop is not None
        self._handle = self._loop.call_later(self.interval, self._fire)

    def _fire(self) -> None:
        self._handle = None
        self.fire_count += 1
        if self.repeat:
            self._schedule()
        self.callback()
