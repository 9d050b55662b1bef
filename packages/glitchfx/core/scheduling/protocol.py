"""Scheduling protocol shared by every effect.

Effects never sleep. All waiting is expressed as a deadline timer or a
per-frame callback registered through a ``Scheduler``; each callback
registers the next one, so ticks of one effect instance never overlap.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

TimerCallback = Callable[[], None]
FrameCallback = Callable[[float], None]


class CancelToken:
    """Handle for one scheduled callback.

    Cancelling is idempotent and has no effect once the callback has fired.
    """

    __slots__ = ("_cancelled", "_fired", "_release")

    def __init__(self, release: Callable[[], None] | None = None) -> None:
        self._cancelled = False
        self._fired = False
        self._release = release

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        """True while the callback may still run."""
        return not (self._cancelled or self._fired)

    def mark_fired(self) -> None:
        self._fired = True
        self._release = None

    def cancel(self) -> None:
        if not self.pending:
            return
        self._cancelled = True
        release, self._release = self._release, None
        if release is not None:
            release()


@runtime_checkable
class Scheduler(Protocol):
    """Single-threaded cooperative scheduler.

    Implementations must never run a cancelled callback. A callback that is
    already executing when its token is cancelled completes normally.
    """

    def schedule_after(self, delay_ms: float, callback: TimerCallback) -> CancelToken:
        """Run ``callback`` once after ``delay_ms`` milliseconds."""
        ...

    def schedule_next_frame(self, callback: FrameCallback) -> CancelToken:
        """Run ``callback(timestamp_ms)`` on the next display frame."""
        ...

    def cancel(self, token: CancelToken) -> None:
        """Prevent a scheduled callback from running."""
        ...
