"""
Trailing-edge debounce on the asyncio event loop.

Each pushed value reschedules delivery after the quiet period; only the
most recent value is ever delivered, and at most once per quiet window.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, Optional, TypeVar

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer(Generic[T]):
    """
    Holds the latest value and a cancellable timer handle.

    Must be used from code running on an event loop (e.g. inside a Textual
    app or an async test).
    """

    def __init__(self, delay_ms: int, on_deliver: Callable[[T], None]):
        if delay_ms < 0:
            raise ConfigurationError("delay_ms must not be negative", setting="debounce_ms", value=delay_ms)
        self.delay_ms = delay_ms
        self.on_deliver = on_deliver
        self._handle: Optional[asyncio.TimerHandle] = None
        self._latest: Optional[T] = None
        self._disposed = False

    @property
    def pending(self) -> bool:
        """Whether a delivery is scheduled."""
        return self._handle is not None

    @property
    def latest(self) -> Optional[T]:
        """The most recently pushed value."""
        return self._latest

    def push(self, value: T) -> None:
        """Schedule delivery of `value`, superseding any pending delivery."""
        if self._disposed:
            logger.debug("Ignoring push on disposed debouncer")
            return

        self.cancel()
        self._latest = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay_ms / 1000, self._deliver, value)

    def cancel(self) -> None:
        """Drop the pending delivery, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _deliver(self, value: T) -> None:
        self._handle = None
        self.on_deliver(value)

    def dispose(self) -> None:
        """Cancel pending work and refuse further pushes."""
        self.cancel()
        self._disposed = True
