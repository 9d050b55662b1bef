"""Effect composer and lifecycle controller.

Owns every effect handle started for a page, wires completion
continuations between effects, and latches guarded triggers so a
repeatable sequence never overlaps itself.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Sequence

from glitchfx.core.composition.chain import EffectChain, run_chain
from glitchfx.core.config.models import (
    DriftConfig,
    GlitchConfig,
    OscillatorConfig,
    TypewriterConfig,
)
from glitchfx.core.effects.drift import start_drift
from glitchfx.core.effects.handle import EffectHandle
from glitchfx.core.effects.oscillator import start_shake
from glitchfx.core.effects.strips import fire_glitch
from glitchfx.core.effects.typewriter import reveal_text
from glitchfx.core.scheduling.protocol import Scheduler
from glitchfx.core.surface.protocol import Surface
from glitchfx.core.utils.logging import get_logger
from glitchfx.core.utils.random import RandomSource, default_source

logger = logging.getLogger(__name__)


class EffectComposer:
    """Starts effects, tracks their handles and guards repeatable sequences.

    Handles leave the active set as soon as they complete or are cancelled.
    State lives only as long as the composer; ``cancel_all`` is the
    best-effort cleanup for page unload.

    Example:
        >>> composer = EffectComposer(VirtualScheduler())
        >>> handle = composer.shake(MemorySurface(width=320, height=120))
        >>> composer.active_count
        1
    """

    def __init__(self, scheduler: Scheduler, rand: RandomSource = default_source) -> None:
        self.scheduler = scheduler
        self.rand = rand
        self._active: list[EffectHandle] = []
        self._latches: dict[Hashable, bool] = {}

    @property
    def active(self) -> tuple[EffectHandle, ...]:
        return tuple(self._active)

    @property
    def active_count(self) -> int:
        return len(self._active)

    def is_latched(self, key: Hashable) -> bool:
        return self._latches.get(key, False)

    def track(self, handle: EffectHandle) -> EffectHandle:
        """Keep ``handle`` in the active set while it is running."""
        if handle.running:
            self._active.append(handle)
            handle.add_done_callback(self._forget)
            get_logger(__name__, effect=handle.name).debug(
                "Tracking effect (%d active)", len(self._active)
            )
        return handle

    def _forget(self, handle: EffectHandle) -> None:
        if handle in self._active:
            self._active.remove(handle)
        get_logger(__name__, effect=handle.name).debug(
            "Effect finished: %s", handle.state.value
        )

    def start(self, factory: Callable[[], EffectHandle]) -> EffectHandle:
        """Start an effect via ``factory`` and track its handle."""
        return self.track(factory())

    def run_chain(
        self,
        chain: EffectChain,
        *,
        on_complete: Callable[[], None] | None = None,
    ) -> EffectHandle:
        """Run ``chain`` stage by stage under one tracked handle."""
        logger.debug("Running chain '%s': %s", chain.name, chain.names)
        return self.track(run_chain(chain, on_complete))

    def trigger_guarded(
        self,
        key: Hashable,
        chain_factory: Callable[[], EffectChain],
        *,
        on_complete: Callable[[], None] | None = None,
    ) -> EffectHandle | None:
        """Run a chain unless one is already in flight for ``key``.

        The latch is held until the whole chain completes or is cancelled,
        including chains abandoned because a stage had no target.

        Returns:
            The chain handle, or None if the trigger was dropped.
        """
        if self._latches.get(key, False):
            logger.debug("Guarded trigger %r dropped; sequence already in flight", key)
            return None

        self._latches[key] = True
        try:
            handle = self.run_chain(chain_factory(), on_complete=on_complete)
        except Exception:
            self._release(key)
            raise
        handle.add_done_callback(lambda _handle: self._release(key))
        return handle

    def _release(self, key: Hashable) -> None:
        self._latches.pop(key, None)

    def cancel_all(self) -> None:
        """Cancel every running effect, newest first."""
        for handle in reversed(list(self._active)):
            handle.cancel()
        if self._active:
            logger.warning("%d effects still active after cancel_all", len(self._active))

    # Convenience starters bound to this composer's scheduler and random source

    def shake(
        self,
        surface: Surface | None,
        config: OscillatorConfig | None = None,
    ) -> EffectHandle:
        return self.track(start_shake(surface, config, scheduler=self.scheduler, rand=self.rand))

    def glitch(
        self,
        surface: Surface | None,
        config: GlitchConfig | None = None,
        *,
        on_complete: Callable[[], None] | None = None,
    ) -> EffectHandle:
        return self.track(
            fire_glitch(
                surface,
                config,
                scheduler=self.scheduler,
                rand=self.rand,
                on_complete=on_complete,
            )
        )

    def typewriter(
        self,
        chars: Sequence[Surface],
        cursor: Surface | None,
        config: TypewriterConfig | None = None,
        *,
        on_complete: Callable[[], None] | None = None,
    ) -> EffectHandle:
        return self.track(
            reveal_text(
                chars,
                cursor,
                config,
                scheduler=self.scheduler,
                rand=self.rand,
                on_complete=on_complete,
            )
        )

    def drift(
        self,
        surface_a: Surface | None,
        surface_b: Surface | None,
        config: DriftConfig | None = None,
    ) -> EffectHandle:
        return self.track(
            start_drift(surface_a, surface_b, config, scheduler=self.scheduler, rand=self.rand)
        )
