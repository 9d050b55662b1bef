"""Composed effect sequences built from chains.

The segfault sequence is the canonical example: a glitch, then a static
crash panel, then after a pause a short glitch that clears the panel.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from glitchfx.core.composition.chain import Continuation, EffectChain, StageFactory
from glitchfx.core.composition.composer import EffectComposer
from glitchfx.core.config.models import GlitchConfig, SegfaultConfig, TypewriterConfig
from glitchfx.core.effects.handle import EffectHandle
from glitchfx.core.effects.strips import fire_glitch
from glitchfx.core.effects.typewriter import reveal_text
from glitchfx.core.scheduling.protocol import Scheduler
from glitchfx.core.surface.overlay import CrashPanel
from glitchfx.core.surface.protocol import Surface
from glitchfx.core.utils.random import RandomSource, default_source

logger = logging.getLogger(__name__)


def glitch_stage(
    surface: Surface | None,
    config: GlitchConfig,
    *,
    scheduler: Scheduler,
    rand: RandomSource = default_source,
) -> StageFactory:
    """Stage that fires one glitch and proceeds once its overlay is gone."""

    def factory(proceed: Continuation) -> EffectHandle:
        return fire_glitch(surface, config, scheduler=scheduler, rand=rand, on_complete=proceed)

    return factory


def segfault_chain(
    surface: Surface | None,
    config: SegfaultConfig | None = None,
    *,
    scheduler: Scheduler,
    rand: RandomSource = default_source,
    panel_factory: Callable[[], object] = CrashPanel,
) -> EffectChain:
    """Glitch, show crash panel, linger, glitch again, remove the panel.

    Cancelling the chain while the panel is up removes it.
    """
    config = config or SegfaultConfig()
    panel: object | None = None

    def show_panel() -> None:
        nonlocal panel
        panel = panel_factory()
        surface.attach_overlay(panel)

    def hide_panel() -> None:
        nonlocal panel
        if panel is not None:
            surface.detach_overlay(panel)
            panel = None

    crash = glitch_stage(surface, config.first_glitch, scheduler=scheduler, rand=rand)
    recover = glitch_stage(surface, config.second_glitch, scheduler=scheduler, rand=rand)

    return (
        EffectChain("segfault")
        .then("glitch", crash)
        .call("show crash panel", show_panel)
        .wait(config.panel_linger_ms, scheduler)
        .then("recover", recover)
        .call("hide crash panel", hide_panel)
        .on_cancel(hide_panel)
    )


def typewriter_then_glitch(
    chars: Sequence[Surface],
    cursor: Surface | None,
    target: Surface | None,
    typewriter: TypewriterConfig | None = None,
    glitch: GlitchConfig | None = None,
    *,
    scheduler: Scheduler,
    rand: RandomSource = default_source,
) -> EffectChain:
    """Type out ``chars``; when the cursor retires, glitch ``target`` once."""

    def type_stage(proceed: Continuation) -> EffectHandle:
        return reveal_text(
            chars,
            cursor,
            typewriter,
            scheduler=scheduler,
            rand=rand,
            on_complete=proceed,
        )

    return (
        EffectChain("typewriter-glitch")
        .then("typewriter", type_stage)
        .then(
            "glitch",
            glitch_stage(target, glitch or GlitchConfig(), scheduler=scheduler, rand=rand),
        )
    )


def segfault_trigger(
    composer: EffectComposer,
    surface: Surface,
    config: SegfaultConfig | None = None,
) -> Callable[[], EffectHandle | None]:
    """Return a click handler that runs the segfault sequence on ``surface``.

    Clicks while a sequence is in flight are dropped.
    """
    key = ("segfault", id(surface))

    def trigger() -> EffectHandle | None:
        return composer.trigger_guarded(
            key,
            lambda: segfault_chain(
                surface,
                config,
                scheduler=composer.scheduler,
                rand=composer.rand,
            ),
        )

    return trigger
