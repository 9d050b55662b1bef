"""Tests for the strip decomposer (glitch overlay)."""

from __future__ import annotations

import pytest

from glitchfx.core.config import GlitchConfig
from glitchfx.core.effects import (
    ANIMATIONS,
    HandleState,
    build_bands,
    build_overlay,
    fire_glitch,
    partition_heights,
)
from glitchfx.core.scheduling import VirtualScheduler
from glitchfx.core.surface import GlitchOverlay, MemorySurface
from glitchfx.core.utils.random import ScriptedRandom, seeded_source

HEIGHTS = [1, 2, 3, 4, 10, 11, 12, 13, 37, 240, 719, 1000]


class TestPartitionHeights:
    """Tests for partition_heights."""

    @pytest.mark.parametrize("height", HEIGHTS)
    def test_heights_sum_exactly(self, height: int) -> None:
        """Band heights always add up to the surface height."""
        for seed in range(20):
            assert sum(partition_heights(height, seeded_source(seed))) == height

    @pytest.mark.parametrize("height", HEIGHTS)
    def test_minimum_height_except_last(self, height: int) -> None:
        """Every band but the last is at least 3 px; the last is positive."""
        for seed in range(20):
            heights = partition_heights(height, seeded_source(seed))
            assert all(h >= 3 for h in heights[:-1])
            assert heights[-1] > 0

    def test_upper_bound(self) -> None:
        """No band exceeds max(3, 2H/12)."""
        rand = seeded_source(3)
        for _ in range(20):
            assert all(h <= 40 for h in partition_heights(240, rand))

    def test_zero_draws_give_minimum_bands(self) -> None:
        """A source stuck at 0 yields 3 px bands and a clamped remainder."""
        assert partition_heights(10, ScriptedRandom([0.0])) == [3, 3, 3, 1]

    def test_large_draw(self) -> None:
        """floor(0.99 * 2 * 120 / 12) = 19."""
        assert partition_heights(120, ScriptedRandom([0.99]))[:3] == [19, 19, 19]

    @pytest.mark.parametrize("height", [0, -5])
    def test_empty_surface(self, height: int) -> None:
        """Nothing to cover, no bands."""
        assert partition_heights(height, seeded_source(0)) == []


class TestBuildBands:
    """Tests for build_bands."""

    @pytest.mark.parametrize("height", HEIGHTS)
    def test_coverage_invariant(self, height: int) -> None:
        """Bands start at 0, touch edge to edge and end exactly at H."""
        for seed in range(10):
            bands = build_bands(height, intensity=1.7, rand=seeded_source(seed))
            assert bands[0].y_start == 0
            for prev, nxt in zip(bands, bands[1:], strict=False):
                assert prev.y_start < nxt.y_start
                assert prev.y_start + prev.height == nxt.y_start
            assert bands[-1].y_end == height
            assert sum(b.height for b in bands) == height

    def test_parameter_ranges(self) -> None:
        """Magnitudes scale with intensity; timings stay in fixed ranges."""
        intensity = 2.0
        for seed in range(10):
            for band in build_bands(240, intensity, seeded_source(seed)):
                assert -30 <= band.shift_x1 <= 30
                assert -30 <= band.shift_x2 <= 30
                assert -50 <= band.hue_1 <= 50
                assert -50 <= band.hue_2 <= 50
                assert band.animation in ANIMATIONS
                assert 400 <= band.duration_ms <= 700
                assert 0 <= band.delay_ms <= 150

    def test_zero_intensity_is_still(self, rand) -> None:
        """Intensity 0 removes displacement and hue rotation."""
        for band in build_bands(240, 0.0, rand):
            assert (band.shift_x1, band.shift_x2, band.hue_1, band.hue_2) == (0, 0, 0, 0)

    def test_band_count_independent_of_intensity(self) -> None:
        """Partitioning does not depend on intensity."""
        low = build_bands(480, 0.5, seeded_source(99))
        high = build_bands(480, 4.0, seeded_source(99))
        assert [b.height for b in low] == [b.height for b in high]

    def test_midpoint_parameters(self) -> None:
        """A constant 0.5 source lands on the centre of every range."""
        band = build_bands(12, 1.0, ScriptedRandom([0.5]))[0]
        assert (band.shift_x1, band.hue_1) == (0, 0)
        assert band.animation == "glitch-2"
        assert band.duration_ms == 550
        assert band.delay_ms == 75


class TestBuildOverlay:
    """Tests for build_overlay."""

    def test_snapshot_taken_once(self, surface: MemorySurface, rand) -> None:
        """One snapshot per overlay regardless of strip count."""
        overlay = build_overlay(surface, 1.0, rand)
        assert surface.snapshot_count == 1
        assert len(overlay.strips) > 1

    def test_each_strip_has_its_own_copy(self, surface: MemorySurface, rand) -> None:
        """Strip contents are equal to the surface content but independent."""
        overlay = build_overlay(surface, 1.0, rand)
        first, second = overlay.strips[0], overlay.strips[1]
        assert first.content == surface.content
        assert first.content is not second.content
        first.content["title"] = "mutated"
        assert second.content["title"] == "hello"
        assert surface.content["title"] == "hello"

    def test_strip_offsets_show_matching_slice(self, surface: MemorySurface, rand) -> None:
        """Each copy is shifted up by its band's top edge."""
        overlay = build_overlay(surface, 1.0, rand)
        for strip in overlay.strips:
            assert strip.content_offset_y == -strip.band.y_start
        assert overlay.bands[-1].y_end == 240
        assert (overlay.width, overlay.height) == (480, 240)

    def test_animation_shorthand(self, surface: MemorySurface) -> None:
        overlay = build_overlay(surface, 1.0, ScriptedRandom([0.5]))
        assert overlay.strips[0].animation == "glitch-2 550ms linear infinite"

    def test_missing_surface_gives_empty_overlay(self) -> None:
        """No surface: an empty overlay, no exception."""
        overlay = build_overlay(None, 1.0, seeded_source(1))
        assert overlay.strips == []
        assert (overlay.width, overlay.height) == (0, 0)

    def test_fractional_height_is_covered_exactly(self) -> None:
        """The last band ends at the overlay height on fractional surfaces."""
        tall = MemorySurface(width=100, height=240.5)
        overlay = build_overlay(tall, 1.0, seeded_source(1))
        assert overlay.height == 240
        assert overlay.bands[-1].y_end == overlay.height

    def test_top_sample_picks_last_animation(self, surface: MemorySurface) -> None:
        overlay = build_overlay(surface, 1.0, ScriptedRandom([0.999]))
        assert overlay.bands[0].animation == "glitch-3"


class TestFireGlitch:
    """Tests for fire_glitch."""

    def test_attach_hold_detach_complete(
        self, surface: MemorySurface, clock: VirtualScheduler, rand
    ) -> None:
        """Overlay is up for the duration, then removed before completion runs."""
        seen: list[int] = []
        handle = fire_glitch(
            surface,
            GlitchConfig(duration_ms=800),
            scheduler=clock,
            rand=rand,
            on_complete=lambda: seen.append(len(surface.overlays)),
        )
        assert len(surface.overlays) == 1
        assert isinstance(surface.overlays[0], GlitchOverlay)

        clock.advance_to(799)
        assert len(surface.overlays) == 1
        assert seen == []

        clock.advance_to(800)
        assert surface.overlays == []
        assert seen == [0]
        assert handle.state is HandleState.COMPLETED

    def test_cancel_detaches_and_skips_completion(
        self, surface: MemorySurface, clock: VirtualScheduler, rand
    ) -> None:
        """Cancelling mid-flight rolls back the overlay."""
        done: list[bool] = []
        handle = fire_glitch(
            surface, scheduler=clock, rand=rand, on_complete=lambda: done.append(True)
        )
        clock.advance(300)
        handle.cancel()

        assert surface.overlays == []
        clock.advance(5000)
        assert done == []

    def test_cancel_after_completion_is_noop(
        self, surface: MemorySurface, clock: VirtualScheduler, rand
    ) -> None:
        """A finished glitch ignores cancel."""
        handle = fire_glitch(surface, GlitchConfig(duration_ms=100), scheduler=clock, rand=rand)
        clock.advance(200)
        other = surface.snapshot()
        surface.attach_overlay(other)

        handle.cancel()

        assert handle.state is HandleState.COMPLETED
        assert surface.overlays == [other]

    def test_concurrent_fires_are_independent(
        self, surface: MemorySurface, clock: VirtualScheduler, rand
    ) -> None:
        """Two fires build two overlays from two snapshots."""
        fire_glitch(surface, GlitchConfig(duration_ms=500), scheduler=clock, rand=rand)
        clock.advance(100)
        fire_glitch(surface, GlitchConfig(duration_ms=500), scheduler=clock, rand=rand)

        assert len(surface.overlays) == 2
        assert surface.overlays[0] is not surface.overlays[1]
        assert surface.snapshot_count == 2

        clock.advance(400)
        assert len(surface.overlays) == 1
        clock.advance(100)
        assert surface.overlays == []

    def test_missing_surface_is_inert(self, clock: VirtualScheduler) -> None:
        """No surface: no overlay, no completion."""
        done: list[bool] = []
        handle = fire_glitch(None, scheduler=clock, on_complete=lambda: done.append(True))
        clock.advance(5000)
        assert handle.state is HandleState.INERT
        assert done == []
