"""Configuration models for glitchfx effects.

Each effect receives one of these immutable records at start time. Defaults
reproduce the landing page the effects were first tuned for.
"""

from __future__ import annotations

import logging
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class OscillatorConfig(BaseModel):
    """Handheld camera shake configuration.

    Example:
        >>> OscillatorConfig(amplitude=6.0).layer_count
        4
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    amplitude: float = Field(default=4.0, ge=0.0, description="Max translate in px")
    speed: float = Field(default=1.0, ge=0.0, description="Frequency multiplier (1 = default)")
    layer_count: int = Field(
        default=4, ge=1, le=16, description="Number of layered sine waves for organic feel"
    )


class GlitchConfig(BaseModel):
    """Single-fire glitch overlay configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    duration_ms: float = Field(default=800.0, ge=0.0, description="How long the overlay stays up")
    intensity: float = Field(
        default=1.0, ge=0.0, description="Scales strip displacement and hue rotation"
    )


class SlowdownRule(BaseModel):
    """Delay override applied once few enough steps remain."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    remaining: int = Field(ge=0, description="Applies when steps remaining <= this threshold")
    base_ms: float = Field(ge=0.0, description="Base delay in ms")
    jitter_ms: float = Field(default=0.0, ge=0.0, description="Random jitter added to base_ms")


def _default_slowdown() -> list[SlowdownRule]:
    return [
        SlowdownRule(remaining=1, base_ms=400.0, jitter_ms=200.0),
        SlowdownRule(remaining=2, base_ms=250.0, jitter_ms=100.0),
    ]


class TypewriterConfig(BaseModel):
    """Timed step sequencer configuration.

    Slowdown rules are scanned in the given order and the first rule whose
    threshold covers the remaining step count wins. Keep thresholds ascending;
    a larger threshold listed first shadows every rule after it.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    start_delay_ms: float = Field(default=400.0, ge=0.0, description="Delay before step 0")
    base_delay_ms: float = Field(default=90.0, ge=0.0, description="Base delay between steps")
    jitter_ms: float = Field(default=60.0, ge=0.0, description="Random jitter added to base delay")
    slowdown: list[SlowdownRule] = Field(
        default_factory=_default_slowdown,
        description="Per-remaining-count delay overrides, first match wins",
    )
    linger_ms: float = Field(
        default=200.0, ge=0.0, description="Delay between the final step and completion"
    )

    @model_validator(mode="after")
    def _warn_unsorted_slowdown(self) -> Self:
        thresholds = [rule.remaining for rule in self.slowdown]
        if thresholds != sorted(thresholds):
            logger.warning(
                "Slowdown thresholds %s are not ascending; later rules may never match",
                thresholds,
            )
        return self


class DriftConfig(BaseModel):
    """Paired opposite-direction drift configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    still_chance: float = Field(
        default=0.35, ge=0.0, le=1.0, description="Probability of resting on a given tick"
    )
    displacement: tuple[float, float] = Field(
        default=(4.0, 6.0), description="Min/max displacement in px"
    )
    interval: tuple[float, float] = Field(
        default=(2000.0, 5000.0), description="Min/max interval between ticks in ms"
    )
    start_delay_ms: float = Field(default=2000.0, ge=0.0, description="Delay before first tick")

    @model_validator(mode="after")
    def _check_ranges(self) -> Self:
        for name in ("displacement", "interval"):
            lo, hi = getattr(self, name)
            if lo < 0 or hi < lo:
                raise ValueError(f"{name} must satisfy 0 <= min <= max, got ({lo}, {hi})")
        return self


class SegfaultConfig(BaseModel):
    """Timings for the glitch / crash panel / glitch sequence."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    first_glitch: GlitchConfig = Field(default_factory=lambda: GlitchConfig(duration_ms=800.0))
    panel_linger_ms: float = Field(
        default=1200.0, ge=0.0, description="How long the crash panel shows before recovering"
    )
    second_glitch: GlitchConfig = Field(default_factory=lambda: GlitchConfig(duration_ms=250.0))


class EffectPresets(BaseModel):
    """All effect configurations for one page."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    shake: OscillatorConfig = Field(default_factory=OscillatorConfig)
    glitch: GlitchConfig = Field(default_factory=GlitchConfig)
    typewriter: TypewriterConfig = Field(default_factory=TypewriterConfig)
    drift: DriftConfig = Field(default_factory=DriftConfig)
    segfault: SegfaultConfig = Field(default_factory=SegfaultConfig)
