"""Strip decomposer (glitch overlay).

Slices a surface into randomly sized horizontal bands that tile it exactly,
then gives every band its own copy of the surface snapshot plus
uncorrelated displacement, hue and timing parameters. Each band jitters on
its own schedule, so the surface appears to tear apart.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Callable

from glitchfx.core.config.models import GlitchConfig
from glitchfx.core.effects.handle import EffectHandle
from glitchfx.core.models import Band
from glitchfx.core.scheduling.protocol import CancelToken, Scheduler
from glitchfx.core.surface.overlay import GlitchOverlay, StripNode
from glitchfx.core.surface.protocol import Surface
from glitchfx.core.utils.math import clamp, symmetric
from glitchfx.core.utils.random import RandomSource, default_source

logger = logging.getLogger(__name__)

ANIMATIONS = ("glitch-1", "glitch-2", "glitch-3")

# Mean band height is roughly surface_height / STRIP_DIVISOR
STRIP_DIVISOR = 12
MIN_BAND_HEIGHT = 3

SHIFT_PX = 15.0
HUE_DEG = 25.0
DURATION_MS = (400.0, 700.0)
MAX_DELAY_MS = 150.0


def _pick_animation(rand: RandomSource) -> str:
    return ANIMATIONS[clamp(int(rand() * len(ANIMATIONS)), 0, len(ANIMATIONS) - 1)]


def partition_heights(surface_height: float, rand: RandomSource = default_source) -> list[int]:
    """Split ``surface_height`` into random band heights that sum to it exactly.

    Each draw is ``floor(rand() * 2 * H / 12)``, raised to at least 3 px and
    cut down to whatever height remains.

    Example:
        >>> sum(partition_heights(240))
        240
    """
    total = int(surface_height)
    span = total / STRIP_DIVISOR * 2
    heights: list[int] = []
    y = 0
    while y < total:
        drawn = max(MIN_BAND_HEIGHT, math.floor(rand() * span))
        h = min(drawn, total - y)
        heights.append(h)
        y += h
    return heights


def build_bands(
    surface_height: float,
    intensity: float = 1.0,
    rand: RandomSource = default_source,
) -> list[Band]:
    """Decompose a surface of ``surface_height`` into parameterized bands.

    Args:
        surface_height: Height of the surface in px (floored to an int).
        intensity: Scales displacement (±15 px) and hue rotation (±25 deg).
        rand: Uniform [0, 1) source.

    Returns:
        Bands ordered top to bottom; consecutive bands share an edge and the
        last one ends exactly at the surface height.
    """
    shift = SHIFT_PX * intensity
    hue = HUE_DEG * intensity
    lo_ms, hi_ms = DURATION_MS

    bands: list[Band] = []
    y = 0
    for height in partition_heights(surface_height, rand):
        bands.append(
            Band(
                y_start=y,
                height=height,
                shift_x1=round(symmetric(rand(), shift)),
                shift_x2=round(symmetric(rand(), shift)),
                hue_1=round(symmetric(rand(), hue)),
                hue_2=round(symmetric(rand(), hue)),
                animation=_pick_animation(rand),
                duration_ms=round(lo_ms + rand() * (hi_ms - lo_ms)),
                delay_ms=round(rand() * MAX_DELAY_MS),
            )
        )
        y += height
    return bands


def build_overlay(
    surface: Surface | None,
    intensity: float = 1.0,
    rand: RandomSource = default_source,
) -> GlitchOverlay:
    """Build a detached glitch overlay for ``surface``.

    The surface is snapshotted once; every strip then gets an independent
    deep copy, shifted up by the strip's ``y_start`` so the matching slice
    of the original shows through. Band edges are whole pixels, so the
    overlay height is the surface height truncated to an int. A missing
    surface yields an empty 0x0 overlay.
    """
    if surface is None:
        logger.debug("build_overlay: no surface; returning empty overlay")
        return GlitchOverlay(width=0, height=0)

    width, raw_height = surface.get_size()
    height = int(raw_height)
    snapshot = surface.snapshot()

    overlay = GlitchOverlay(width=width, height=height)
    for band in build_bands(height, intensity, rand):
        overlay.strips.append(
            StripNode(band=band, content=copy.deepcopy(snapshot), content_offset_y=-band.y_start)
        )

    logger.debug(
        "Built glitch overlay: %d strips over %sx%s, intensity=%.2f",
        len(overlay.strips),
        width,
        height,
        intensity,
    )
    return overlay


def fire_glitch(
    surface: Surface | None,
    config: GlitchConfig | None = None,
    *,
    scheduler: Scheduler,
    rand: RandomSource = default_source,
    on_complete: Callable[[], None] | None = None,
) -> EffectHandle:
    """Show a glitch overlay for ``config.duration_ms``, then remove it.

    ``on_complete`` runs once after the overlay is detached. Cancelling
    before then detaches the overlay immediately and skips ``on_complete``.
    Overlapping fires on one surface each get their own overlay.
    """
    if surface is None:
        return EffectHandle.inert("glitch")

    config = config or GlitchConfig()
    overlay = build_overlay(surface, config.intensity, rand)
    handle = EffectHandle("glitch")
    surface.attach_overlay(overlay)

    def finish() -> None:
        surface.detach_overlay(overlay)
        handle.complete()
        if on_complete is not None:
            on_complete()

    token: CancelToken = scheduler.schedule_after(config.duration_ms, finish)

    def rollback() -> None:
        scheduler.cancel(token)
        surface.detach_overlay(overlay)

    handle.bind_cancel(rollback)
    return handle
