"""Cooperative scheduling primitives."""

from glitchfx.core.scheduling.loop import AsyncioScheduler
from glitchfx.core.scheduling.protocol import (
    CancelToken,
    FrameCallback,
    Scheduler,
    TimerCallback,
)
from glitchfx.core.scheduling.virtual import VirtualScheduler

__all__ = [
    "AsyncioScheduler",
    "CancelToken",
    "FrameCallback",
    "Scheduler",
    "TimerCallback",
    "VirtualScheduler",
]
