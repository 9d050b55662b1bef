"""Immutable per-invocation effect records.

Everything here is derived once at effect start (or per tick, for frame
transforms) and discarded when the effect ends.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Transform(BaseModel):
    """Surface translation (px) and uniform scale."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    dx: float = 0.0
    dy: float = 0.0
    scale: float = 1.0


class FrameTransform(BaseModel):
    """Output of one oscillator tick, ready to apply to a surface."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    dx: float
    dy: float
    scale: float
    timestamp_ms: float


class Layer(BaseModel):
    """One sine-wave contributor to a composite offset.

    Attributes:
        freq_x: Angular frequency on x in rad/s.
        freq_y: Angular frequency on y in rad/s.
        amp_x: Peak displacement on x in px.
        amp_y: Peak displacement on y in px.
        phase_x: Phase offset on x in radians, in [0, 2π).
        phase_y: Phase offset on y in radians, in [0, 2π).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    freq_x: float
    freq_y: float
    amp_x: float = Field(ge=0.0)
    amp_y: float = Field(ge=0.0)
    phase_x: float
    phase_y: float


class Band(BaseModel):
    """One horizontal strip of a glitch decomposition.

    Attributes:
        y_start: Top edge in px from the top of the surface.
        height: Strip height in px.
        shift_x1: First horizontal displacement keyframe in px.
        shift_x2: Second horizontal displacement keyframe in px.
        hue_1: First hue rotation keyframe in degrees.
        hue_2: Second hue rotation keyframe in degrees.
        animation: Animation variant name.
        duration_ms: Length of one animation cycle.
        delay_ms: Animation start delay.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    y_start: int = Field(ge=0)
    height: int = Field(gt=0)
    shift_x1: int
    shift_x2: int
    hue_1: int
    hue_2: int
    animation: str
    duration_ms: int = Field(ge=0)
    delay_ms: int = Field(ge=0)

    @property
    def y_end(self) -> int:
        return self.y_start + self.height


class StepState(BaseModel):
    """Progress of a timed step sequence.

    ``index`` counts steps taken; the sequence is terminal at
    ``index == total``.
    """

    model_config = ConfigDict(extra="forbid")

    index: int = Field(default=0, ge=0)
    total: int = Field(ge=0)
    last_elapsed_ms: float = 0.0

    @property
    def remaining(self) -> int:
        return self.total - self.index

    @property
    def done(self) -> bool:
        return self.index >= self.total
