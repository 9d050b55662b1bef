"""Surface capability and overlay nodes."""

from glitchfx.core.surface.memory import MemorySurface
from glitchfx.core.surface.overlay import CrashPanel, GlitchOverlay, StripNode
from glitchfx.core.surface.protocol import Surface

__all__ = [
    "CrashPanel",
    "GlitchOverlay",
    "MemorySurface",
    "StripNode",
    "Surface",
]
