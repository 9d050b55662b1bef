"""Shared pytest fixtures for glitchfx tests."""

from __future__ import annotations

import pytest

from glitchfx.core.composition import EffectComposer
from glitchfx.core.config import TypewriterConfig
from glitchfx.core.scheduling import VirtualScheduler
from glitchfx.core.surface import MemorySurface
from glitchfx.core.utils.random import ScriptedRandom, seeded_source

# ============================================================================
# Clock Fixtures
# ============================================================================


@pytest.fixture
def clock() -> VirtualScheduler:
    """Simulated 60 fps clock starting at t=0."""
    return VirtualScheduler()


# ============================================================================
# Randomness Fixtures
# ============================================================================


@pytest.fixture
def rand():
    """Reproducible uniform source."""
    return seeded_source(1234)


@pytest.fixture
def half_rand() -> ScriptedRandom:
    """Source that always returns 0.5."""
    return ScriptedRandom([0.5])


# ============================================================================
# Surface Fixtures
# ============================================================================


@pytest.fixture
def surface() -> MemorySurface:
    """A 480x240 card with some content."""
    return MemorySurface(
        width=480,
        height=240,
        content={"title": "hello", "lines": ["one", "two"]},
        name="card",
    )


@pytest.fixture
def chars() -> list[MemorySurface]:
    """Five hidden character surfaces."""
    glyphs = []
    for ch in "spark":
        glyph = MemorySurface(width=10, height=20, content=ch, name=ch)
        glyph.set_opacity(0.0)
        glyphs.append(glyph)
    return glyphs


@pytest.fixture
def cursor() -> MemorySurface:
    return MemorySurface(width=2, height=20, name="cursor")


# ============================================================================
# Config / Composer Fixtures
# ============================================================================


@pytest.fixture
def flat_typewriter() -> TypewriterConfig:
    """Jitter-free typewriter timing: 10 ms per step, no slowdown."""
    return TypewriterConfig(
        start_delay_ms=0.0,
        base_delay_ms=10.0,
        jitter_ms=0.0,
        slowdown=[],
        linger_ms=200.0,
    )


@pytest.fixture
def composer(clock: VirtualScheduler, rand) -> EffectComposer:
    return EffectComposer(clock, rand)
