"""Cancellation handle returned by every effect start function."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class HandleState(str, Enum):
    """Lifecycle state of one effect invocation."""

    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    INERT = "inert"


class EffectHandle:
    """Opaque cancellation token for one effect instance.

    Cancelling a running handle runs the effect's rollback exactly once.
    Cancelling after natural completion, after a previous cancel, or on an
    inert handle does nothing. Calling the handle is the same as ``cancel()``.

    Example:
        >>> handle = EffectHandle.inert("shake")
        >>> handle.cancel()
        >>> handle.state
        <HandleState.INERT: 'inert'>
    """

    def __init__(self, name: str, on_cancel: Callable[[], None] | None = None) -> None:
        self.name = name
        self._state = HandleState.RUNNING
        self._on_cancel = on_cancel
        self._done_callbacks: list[Callable[[EffectHandle], None]] = []

    @classmethod
    def inert(cls, name: str) -> EffectHandle:
        """Handle for an effect that degraded to a no-op."""
        handle = cls(name)
        handle._state = HandleState.INERT
        logger.debug("Effect '%s' has no target; returning inert handle", name)
        return handle

    def __repr__(self) -> str:
        return f"EffectHandle(name={self.name!r}, state={self._state.value})"

    def __call__(self) -> None:
        self.cancel()

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is HandleState.RUNNING

    @property
    def is_inert(self) -> bool:
        return self._state is HandleState.INERT

    def bind_cancel(self, on_cancel: Callable[[], None]) -> None:
        """Attach the rollback once the effect has set up its state."""
        self._on_cancel = on_cancel

    def add_done_callback(self, callback: Callable[[EffectHandle], None]) -> None:
        """Call ``callback(handle)`` when the handle leaves the running state.

        Runs immediately if that already happened.
        """
        if self.running:
            self._done_callbacks.append(callback)
        else:
            callback(self)

    def cancel(self) -> None:
        if not self.running:
            return
        self._state = HandleState.CANCELLED
        on_cancel, self._on_cancel = self._on_cancel, None
        if on_cancel is not None:
            on_cancel()
        logger.debug("Effect '%s' cancelled", self.name)
        self._finish()

    def complete(self) -> None:
        """Mark natural completion. Later cancels become no-ops."""
        if not self.running:
            return
        self._state = HandleState.COMPLETED
        self._on_cancel = None
        logger.debug("Effect '%s' completed", self.name)
        self._finish()

    def _finish(self) -> None:
        callbacks, self._done_callbacks = self._done_callbacks, []
        for callback in callbacks:
            callback(self)
