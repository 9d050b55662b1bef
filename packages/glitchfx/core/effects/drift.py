"""Paired random drift.

Two surfaces nudge apart in opposite directions at irregular intervals,
sometimes resting at their origin, like lines on an unstable display.
"""

from __future__ import annotations

import logging

from glitchfx.core.config.models import DriftConfig
from glitchfx.core.effects.handle import EffectHandle
from glitchfx.core.scheduling.protocol import CancelToken, Scheduler
from glitchfx.core.surface.protocol import Surface
from glitchfx.core.utils.math import lerp
from glitchfx.core.utils.random import RandomSource, default_source

logger = logging.getLogger(__name__)


def compute_drift(config: DriftConfig, rand: RandomSource = default_source) -> float:
    """Signed displacement for one tick; 0.0 means rest.

    Surface A moves by ``-dx`` and surface B by ``+dx``.
    """
    if rand() < config.still_chance:
        return 0.0
    sign = -1.0 if rand() < 0.5 else 1.0
    lo, hi = config.displacement
    return sign * lerp(lo, hi, rand())


def next_interval(config: DriftConfig, rand: RandomSource = default_source) -> float:
    lo, hi = config.interval
    return lerp(lo, hi, rand())


def start_drift(
    surface_a: Surface | None,
    surface_b: Surface | None,
    config: DriftConfig | None = None,
    *,
    scheduler: Scheduler,
    rand: RandomSource = default_source,
) -> EffectHandle:
    """Drift two surfaces apart until cancelled.

    Cancelling puts both surfaces back at the transforms they had when the
    drift started.
    """
    if surface_a is None or surface_b is None:
        return EffectHandle.inert("drift")

    config = config or DriftConfig()
    origin_a = surface_a.get_transform()
    origin_b = surface_b.get_transform()
    handle = EffectHandle("drift")
    pending: CancelToken | None = None

    def tick() -> None:
        nonlocal pending
        dx = compute_drift(config, rand)
        surface_a.set_transform(origin_a.dx - dx, origin_a.dy, origin_a.scale)
        surface_b.set_transform(origin_b.dx + dx, origin_b.dy, origin_b.scale)
        pending = scheduler.schedule_after(next_interval(config, rand), tick)

    def rollback() -> None:
        if pending is not None:
            scheduler.cancel(pending)
        surface_a.set_transform(origin_a.dx, origin_a.dy, origin_a.scale)
        surface_b.set_transform(origin_b.dx, origin_b.dy, origin_b.scale)

    handle.bind_cancel(rollback)
    pending = scheduler.schedule_after(config.start_delay_ms, tick)
    logger.debug(
        "Drift started: displacement=%s px, interval=%s ms", config.displacement, config.interval
    )
    return handle
