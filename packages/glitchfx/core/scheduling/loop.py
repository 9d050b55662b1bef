"""asyncio-backed scheduler for hosts that run an event loop."""

from __future__ import annotations

import asyncio
import logging

from glitchfx.core.scheduling.protocol import CancelToken, FrameCallback, TimerCallback

logger = logging.getLogger(__name__)


class AsyncioScheduler:
    """``Scheduler`` on top of ``loop.call_later``.

    There is no display refresh signal under asyncio, so frames are emulated
    with a timer of ``1 / fps`` seconds carrying ``loop.time()`` in ms.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None, fps: float = 60.0) -> None:
        if fps <= 0:
            raise ValueError("fps must be > 0")
        self._loop = loop
        self._frame_delay_s = 1.0 / fps

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _call_later(self, delay_s: float, fire) -> CancelToken:
        timer: asyncio.TimerHandle | None = None

        def release() -> None:
            if timer is not None:
                timer.cancel()

        token = CancelToken(release)

        def run() -> None:
            if not token.pending:
                return
            token.mark_fired()
            fire()

        timer = self.loop.call_later(delay_s, run)
        return token

    def schedule_after(self, delay_ms: float, callback: TimerCallback) -> CancelToken:
        return self._call_later(max(0.0, float(delay_ms)) / 1000.0, callback)

    def schedule_next_frame(self, callback: FrameCallback) -> CancelToken:
        return self._call_later(self._frame_delay_s, lambda: callback(self.loop.time() * 1000.0))

    def cancel(self, token: CancelToken) -> None:
        token.cancel()
