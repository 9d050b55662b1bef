"""Oscillator layer synthesizer (handheld camera shake).

Sums a few sine layers per axis into an organic 2D offset. Low layers give
large slow sway, high layers small fast tremor. The surface is scaled up by
``OVERSCAN_SCALE`` first so the bounded offset never exposes an edge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from glitchfx.core.config.models import OscillatorConfig
from glitchfx.core.effects.handle import EffectHandle
from glitchfx.core.models import FrameTransform, Layer, Transform
from glitchfx.core.scheduling.protocol import CancelToken, Scheduler
from glitchfx.core.surface.protocol import Surface
from glitchfx.core.utils.math import TAU
from glitchfx.core.utils.random import RandomSource, default_source

logger = logging.getLogger(__name__)

OVERSCAN_SCALE = 1.05


def _layer_amplitude(amplitude: float, i: int) -> float:
    return amplitude / (1 + i * 0.6)


def build_layers(config: OscillatorConfig, rand: RandomSource = default_source) -> list[Layer]:
    """Derive the sine layers for one shake invocation.

    Layer ``i`` has base frequency ``0.25 + i*0.18`` jittered by ±20% per
    axis, amplitude ``amplitude / (1 + i*0.6)`` and uniform random phases.

    Args:
        config: Shake configuration.
        rand: Uniform [0, 1) source.

    Returns:
        ``config.layer_count`` layers, slowest and largest first.
    """
    layers: list[Layer] = []
    for i in range(config.layer_count):
        base = 0.25 + i * 0.18
        amp = _layer_amplitude(config.amplitude, i)
        layers.append(
            Layer(
                freq_x=base * (0.8 + rand() * 0.4) * config.speed,
                freq_y=base * (0.8 + rand() * 0.4) * config.speed,
                amp_x=amp,
                amp_y=amp,
                phase_x=rand() * TAU,
                phase_y=rand() * TAU,
            )
        )
    return layers


def amplitude_bound(config: OscillatorConfig) -> float:
    """Largest offset magnitude either axis can reach."""
    return sum(_layer_amplitude(config.amplitude, i) for i in range(config.layer_count))


@dataclass(frozen=True)
class OscillatorState:
    """Layer parameters packed into arrays for per-tick evaluation."""

    freq: np.ndarray  # shape (n, 2)
    amp: np.ndarray  # shape (n, 2)
    phase: np.ndarray  # shape (n, 2)
    scale: float = OVERSCAN_SCALE

    @classmethod
    def from_layers(cls, layers: list[Layer], scale: float = OVERSCAN_SCALE) -> OscillatorState:
        def pack(x_attr: str, y_attr: str) -> np.ndarray:
            rows = [[getattr(layer, x_attr), getattr(layer, y_attr)] for layer in layers]
            return np.array(rows, dtype=float).reshape(-1, 2)

        return cls(
            freq=pack("freq_x", "freq_y"),
            amp=pack("amp_x", "amp_y"),
            phase=pack("phase_x", "phase_y"),
            scale=scale,
        )


def compute_offset(state: OscillatorState, t_seconds: float) -> tuple[float, float]:
    """Sum ``sin(t*freq + phase) * amp`` over all layers, per axis."""
    offset = (np.sin(t_seconds * state.freq + state.phase) * state.amp).sum(axis=0)
    return float(offset[0]), float(offset[1])


def compute_frame(state: OscillatorState, timestamp_ms: float) -> FrameTransform:
    """Transform to apply for the frame at ``timestamp_ms``."""
    x, y = compute_offset(state, timestamp_ms / 1000.0)
    return FrameTransform(
        dx=round(x, 2),
        dy=round(y, 2),
        scale=state.scale,
        timestamp_ms=timestamp_ms,
    )


def start_shake(
    surface: Surface | None,
    config: OscillatorConfig | None = None,
    *,
    scheduler: Scheduler,
    rand: RandomSource = default_source,
) -> EffectHandle:
    """Start a continuous shake on ``surface``.

    Runs once per frame until the returned handle is cancelled; cancelling
    restores the transform the surface had before the shake started.
    """
    if surface is None:
        return EffectHandle.inert("shake")

    config = config or OscillatorConfig()
    original: Transform = surface.get_transform()
    state = OscillatorState.from_layers(
        build_layers(config, rand), scale=original.scale * OVERSCAN_SCALE
    )
    handle = EffectHandle("shake")
    pending: CancelToken | None = None

    surface.set_transform(original.dx, original.dy, state.scale)

    def tick(timestamp_ms: float) -> None:
        nonlocal pending
        frame = compute_frame(state, timestamp_ms)
        surface.set_transform(original.dx + frame.dx, original.dy + frame.dy, frame.scale)
        pending = scheduler.schedule_next_frame(tick)

    def rollback() -> None:
        if pending is not None:
            scheduler.cancel(pending)
        surface.set_transform(original.dx, original.dy, original.scale)

    handle.bind_cancel(rollback)
    pending = scheduler.schedule_next_frame(tick)
    logger.debug(
        "Shake started: %d layers, amplitude=%.2f, bound=%.2f px",
        config.layer_count,
        config.amplitude,
        amplitude_bound(config),
    )
    return handle
