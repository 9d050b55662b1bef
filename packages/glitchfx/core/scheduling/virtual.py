"""Deterministic simulated clock.

``VirtualScheduler`` drives effects without a display or event loop. Time
only moves when ``advance``/``advance_to`` is called; timers and frames due
within the advanced window run in timestamp order (ties in registration
order).
"""

from __future__ import annotations

import heapq
import logging
import math
from dataclasses import dataclass, field

from glitchfx.core.scheduling.protocol import CancelToken, FrameCallback, TimerCallback

logger = logging.getLogger(__name__)

DEFAULT_FPS = 60.0


@dataclass(order=True)
class _Entry:
    due_ms: float
    seq: int
    token: CancelToken = field(compare=False)
    timer: TimerCallback | None = field(default=None, compare=False)
    frame: FrameCallback | None = field(default=None, compare=False)


class VirtualScheduler:
    """Simulated clock implementing the ``Scheduler`` protocol.

    Frames land on a fixed grid of ``1000 / fps`` ms; a frame requested at
    time ``t`` fires at the first grid point strictly after ``t``.

    Example:
        >>> clock = VirtualScheduler()
        >>> hits = []
        >>> _ = clock.schedule_after(10, lambda: hits.append(clock.now_ms))
        >>> clock.advance(25)
        >>> hits
        [10.0]
    """

    def __init__(self, fps: float = DEFAULT_FPS, start_ms: float = 0.0) -> None:
        if fps <= 0:
            raise ValueError("fps must be > 0")
        self._frame_interval_ms = 1000.0 / fps
        self._now_ms = float(start_ms)
        self._queue: list[_Entry] = []
        self._seq = 0

    @property
    def now_ms(self) -> float:
        return self._now_ms

    @property
    def frame_interval_ms(self) -> float:
        return self._frame_interval_ms

    @property
    def pending(self) -> int:
        """Number of callbacks that may still run."""
        return sum(1 for entry in self._queue if entry.token.pending)

    def _push(
        self,
        due_ms: float,
        *,
        timer: TimerCallback | None = None,
        frame: FrameCallback | None = None,
    ) -> CancelToken:
        token = CancelToken()
        self._seq += 1
        entry = _Entry(due_ms=due_ms, seq=self._seq, token=token, timer=timer, frame=frame)
        heapq.heappush(self._queue, entry)
        return token

    def schedule_after(self, delay_ms: float, callback: TimerCallback) -> CancelToken:
        due = self._now_ms + max(0.0, float(delay_ms))
        return self._push(due, timer=callback)

    def schedule_next_frame(self, callback: FrameCallback) -> CancelToken:
        interval = self._frame_interval_ms
        index = math.floor(self._now_ms / interval) + 1
        due = index * interval
        if due <= self._now_ms:
            # Float division landed just below a grid point
            due = (index + 1) * interval
        return self._push(due, frame=callback)

    def cancel(self, token: CancelToken) -> None:
        token.cancel()

    def advance_to(self, target_ms: float) -> None:
        """Run everything due at or before ``target_ms``, then settle there."""
        if target_ms < self._now_ms:
            raise ValueError(f"cannot move clock backwards ({target_ms} < {self._now_ms})")

        while self._queue and self._queue[0].due_ms <= target_ms:
            entry = heapq.heappop(self._queue)
            if not entry.token.pending:
                continue
            self._now_ms = entry.due_ms
            entry.token.mark_fired()
            if entry.frame is not None:
                entry.frame(entry.due_ms)
            elif entry.timer is not None:
                entry.timer()

        self._now_ms = float(target_ms)

    def advance(self, delta_ms: float) -> None:
        """Move the clock forward by ``delta_ms``."""
        self.advance_to(self._now_ms + delta_ms)

    def run_until_idle(self, limit_ms: float = 60_000.0) -> None:
        """Advance until nothing is pending or ``limit_ms`` has elapsed.

        Frame loops never go idle on their own; the limit bounds them.
        """
        deadline = self._now_ms + limit_ms
        while self._queue and self._now_ms < deadline:
            head = self._queue[0]
            if not head.token.pending:
                heapq.heappop(self._queue)
                continue
            self.advance_to(min(head.due_ms, deadline))
        if self.pending:
            logger.debug(
                "run_until_idle stopped at %.1f ms with %d pending", self._now_ms, self.pending
            )
