"""Overlay nodes produced by effects.

The host renders these on top of a surface. Geometry and animation
parameters are plain data; ``content`` is whatever the surface's
``snapshot()`` returned, duplicated per strip.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from glitchfx.core.models import Band

SKULL = """\
    ___
   /   \\
  | x x |
   \\_^_/"""


@dataclass
class StripNode:
    """One horizontal strip of a glitch overlay.

    Attributes:
        band: Geometry and animation parameters for the strip.
        content: Independent duplicate of the surface snapshot.
        content_offset_y: Vertical offset applied to ``content`` so the
            slice at ``band.y_start`` shows through the clipped strip.
    """

    band: Band
    content: Any
    content_offset_y: float

    @property
    def animation(self) -> str:
        """Animation shorthand, e.g. ``glitch-2 512ms linear infinite``."""
        return f"{self.band.animation} {self.band.duration_ms}ms linear infinite"


@dataclass
class GlitchOverlay:
    """Full-surface overlay made of stacked strips.

    Covers the surface exactly, clips its children and ignores pointer
    input; strips are ordered top to bottom.
    """

    width: float
    height: float
    strips: list[StripNode] = field(default_factory=list)
    z_index: int = 11

    @property
    def bands(self) -> list[Band]:
        return [strip.band for strip in self.strips]


@dataclass
class CrashPanel:
    """Static crash screen shown between the two segfault glitches."""

    message: str = "Segmentation fault (core dumped)"
    detail: tuple[str, ...] = (
        "[12.481032] chromium[4821]: segfault at 0",
        "ip 00007f3a rsp 00007ffd err 6 in libcontent.so",
    )
    glyph: str = SKULL
