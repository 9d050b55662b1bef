"""Timed step sequencer (typewriter).

Advances an index one step at a time with human-like timing: every delay
is ``base + rand() * jitter``, and slowdown rules let the last few steps
linger. Step 0 fires after the start delay. Every later step, and the
terminal transition, waits for the delay resolved from the number of steps
still remaining. After the terminal transition and a fixed linger, the
completion continuation runs once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from glitchfx.core.config.models import TypewriterConfig
from glitchfx.core.effects.handle import EffectHandle
from glitchfx.core.models import StepState
from glitchfx.core.scheduling.protocol import CancelToken, Scheduler
from glitchfx.core.surface.protocol import Surface
from glitchfx.core.utils.random import RandomSource, default_source

logger = logging.getLogger(__name__)

TYPED_OPACITY = 1.0
CURSOR_DONE_OPACITY = 0.0


def resolve_delay(
    remaining: int,
    config: TypewriterConfig,
    rand: RandomSource = default_source,
) -> float:
    """Delay in ms before the step that leaves ``remaining`` steps to go.

    Slowdown rules are scanned in order and the first one with
    ``remaining <= rule.remaining`` supplies ``(base, jitter)``; otherwise the
    config defaults apply. Jitter is only ever added.

    Example:
        >>> cfg = TypewriterConfig(base_delay_ms=90, jitter_ms=0, slowdown=[])
        >>> resolve_delay(5, cfg)
        90.0
    """
    base, jitter = config.base_delay_ms, config.jitter_ms
    for rule in config.slowdown:
        if remaining <= rule.remaining:
            base, jitter = rule.base_ms, rule.jitter_ms
            break
    return float(base + rand() * jitter)


class SequenceHandle(EffectHandle):
    """EffectHandle that also exposes step progress."""

    def __init__(self, name: str, total: int) -> None:
        super().__init__(name)
        self.progress = StepState(total=total)


def start_sequence(
    total_steps: int,
    config: TypewriterConfig | None,
    on_step: Callable[[int], None],
    on_complete: Callable[[], None] | None = None,
    *,
    scheduler: Scheduler,
    rand: RandomSource = default_source,
) -> EffectHandle:
    """Run ``on_step(0) .. on_step(total_steps - 1)`` with jittered delays.

    Args:
        total_steps: Number of steps; zero or fewer yields an inert handle.
        config: Timing configuration (defaults when None).
        on_step: Called once per index, in increasing order.
        on_complete: Called once, ``linger_ms`` after the terminal transition.
        scheduler: Timer source.
        rand: Uniform [0, 1) source for jitter.

    Returns:
        Handle whose cancel suppresses future steps; taken steps remain.
    """
    if total_steps <= 0:
        return EffectHandle.inert("typewriter")

    config = config or TypewriterConfig()
    handle = SequenceHandle("typewriter", total_steps)
    progress = handle.progress
    pending: CancelToken | None = None

    def finish() -> None:
        handle.complete()
        if on_complete is not None:
            on_complete()

    def step() -> None:
        nonlocal pending
        if progress.index < progress.total:
            on_step(progress.index)
            progress.index += 1
            delay = resolve_delay(progress.remaining, config, rand)
            progress.last_elapsed_ms = delay
            pending = scheduler.schedule_after(delay, step)
        else:
            pending = scheduler.schedule_after(config.linger_ms, finish)

    def stop() -> None:
        if pending is not None:
            scheduler.cancel(pending)

    handle.bind_cancel(stop)
    pending = scheduler.schedule_after(config.start_delay_ms, step)
    logger.debug(
        "Typewriter started: %d steps, start_delay=%.0f ms", total_steps, config.start_delay_ms
    )
    return handle


def reveal_text(
    chars: Sequence[Surface],
    cursor: Surface | None,
    config: TypewriterConfig | None = None,
    *,
    scheduler: Scheduler,
    rand: RandomSource = default_source,
    on_complete: Callable[[], None] | None = None,
) -> EffectHandle:
    """Type out ``chars`` one by one, then retire the cursor.

    Each step makes one character fully opaque. After the linger the cursor
    is hidden and ``on_complete`` runs. Missing characters or cursor yield an
    inert handle.
    """
    if not chars or cursor is None:
        return EffectHandle.inert("typewriter")

    def type_char(index: int) -> None:
        chars[index].set_opacity(TYPED_OPACITY)

    def done() -> None:
        cursor.set_opacity(CURSOR_DONE_OPACITY)
        if on_complete is not None:
            on_complete()

    return start_sequence(
        len(chars),
        config,
        type_char,
        done,
        scheduler=scheduler,
        rand=rand,
    )
