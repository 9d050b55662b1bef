"""Procedural effects: shake, glitch strips, typewriter and drift."""

from glitchfx.core.effects.drift import compute_drift, start_drift
from glitchfx.core.effects.handle import EffectHandle, HandleState
from glitchfx.core.effects.oscillator import (
    OVERSCAN_SCALE,
    OscillatorState,
    amplitude_bound,
    build_layers,
    compute_frame,
    compute_offset,
    start_shake,
)
from glitchfx.core.effects.strips import (
    ANIMATIONS,
    build_bands,
    build_overlay,
    fire_glitch,
    partition_heights,
)
from glitchfx.core.effects.typewriter import (
    SequenceHandle,
    resolve_delay,
    reveal_text,
    start_sequence,
)

__all__ = [
    "ANIMATIONS",
    "OVERSCAN_SCALE",
    "EffectHandle",
    "HandleState",
    "OscillatorState",
    "SequenceHandle",
    "amplitude_bound",
    "build_bands",
    "build_layers",
    "build_overlay",
    "compute_drift",
    "compute_frame",
    "compute_offset",
    "fire_glitch",
    "partition_heights",
    "resolve_delay",
    "reveal_text",
    "start_drift",
    "start_sequence",
    "start_shake",
]
