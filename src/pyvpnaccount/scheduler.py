"""Single-slot deferred callback on the running asyncio loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

_logger = logging.getLogger(__name__)


class Timer(Protocol):
    @property
    def is_running(self) -> bool: ...

    def schedule(self, callback: Callable[[], None], delay: float) -> None: ...

    def cancel(self) -> None: ...


class Scheduler:
    """Holds at most one pending callback.

    Scheduling replaces (and cancels) whatever was pending before, so a
    superseded callback can never fire. Cancelling is idempotent.
    """

    def __init__(self, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def is_running(self) -> bool:
        """Whether a callback is armed and has not fired yet."""
        return self._handle is not None

    def schedule(self, callback: Callable[[], None], delay: float) -> None:
        """Arm *callback* to run after *delay* seconds, replacing any pending one."""
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        handle: asyncio.TimerHandle | None = None

        def _fire() -> None:
            # Only clear the slot while it still belongs to this handle.
            if self._handle is handle:
                self._handle = None
            callback()

        handle = loop.call_later(max(0.0, delay), _fire)
        self._handle = handle
        _logger.debug("Scheduled callback in %.1fs", delay)

    def cancel(self) -> None:
        """Cancel the pending callback, if any."""
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.cancel()
