"""Explicit effect chains.

A chain is an ordered list of stages. Each stage factory receives a
continuation and returns the ``EffectHandle`` of the effect it started;
the effect calls the continuation on natural completion, which starts the
next stage. The whole chain runs under one handle, so it can be inspected
and cancelled as a unit.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from glitchfx.core.effects.handle import EffectHandle
from glitchfx.core.scheduling.protocol import Scheduler
from glitchfx.core.utils.logging import get_logger

Continuation = Callable[[], None]
StageFactory = Callable[[Continuation], EffectHandle]


@dataclass(frozen=True)
class ChainStage:
    """One step of a chain: the previous stage's completion starts ``factory``."""

    name: str
    factory: StageFactory


def wait_stage(delay_ms: float, scheduler: Scheduler) -> StageFactory:
    """Stage that completes after ``delay_ms`` without touching any surface."""

    def factory(proceed: Continuation) -> EffectHandle:
        handle = EffectHandle("wait")

        def fire() -> None:
            handle.complete()
            proceed()

        token = scheduler.schedule_after(delay_ms, fire)
        handle.bind_cancel(lambda: scheduler.cancel(token))
        return handle

    return factory


def action_stage(action: Callable[[], None]) -> StageFactory:
    """Stage that runs ``action`` synchronously and completes at once."""

    def factory(proceed: Continuation) -> EffectHandle:
        action()
        handle = EffectHandle("action")
        handle.complete()
        proceed()
        return handle

    return factory


@dataclass
class EffectChain:
    """Ordered effect stages plus cleanup to run if the chain is cancelled.

    Example:
        >>> chain = EffectChain("intro")
        >>> chain.call("log", lambda: None).names
        ['log']
    """

    name: str
    stages: list[ChainStage] = field(default_factory=list)
    cleanups: list[Callable[[], None]] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [stage.name for stage in self.stages]

    def then(self, name: str, factory: StageFactory) -> EffectChain:
        self.stages.append(ChainStage(name=name, factory=factory))
        return self

    def wait(self, delay_ms: float, scheduler: Scheduler) -> EffectChain:
        return self.then(f"wait {delay_ms:g}ms", wait_stage(delay_ms, scheduler))

    def call(self, name: str, action: Callable[[], None]) -> EffectChain:
        return self.then(name, action_stage(action))

    def on_cancel(self, cleanup: Callable[[], None]) -> EffectChain:
        self.cleanups.append(cleanup)
        return self


class ChainRun:
    """Drives one execution of an ``EffectChain``.

    If a stage returns an inert handle, its effect will never call the
    continuation, so the run is cancelled (cleanups included) rather than
    left hanging.
    """

    def __init__(self, chain: EffectChain, on_complete: Continuation | None = None) -> None:
        self.chain = chain
        self.handle = EffectHandle(chain.name, on_cancel=self._rollback)
        self.index = -1
        self.current: EffectHandle | None = None
        self._on_complete = on_complete
        self.log = get_logger(__name__, chain=chain.name)

    @property
    def stage_name(self) -> str | None:
        if 0 <= self.index < len(self.chain.stages):
            return self.chain.stages[self.index].name
        return None

    def start(self) -> EffectHandle:
        self._enter(0)
        return self.handle

    def _enter(self, index: int) -> None:
        if not self.handle.running:
            return
        self.index = index
        self.current = None

        if index >= len(self.chain.stages):
            self.handle.complete()
            if self._on_complete is not None:
                self._on_complete()
            return

        stage = self.chain.stages[index]
        self.log.debug("Entering stage %d '%s'", index, stage.name)
        started = stage.factory(lambda: self._advance(index))

        if started.is_inert:
            self.log.debug("Stage '%s' has no target; abandoning chain", stage.name)
            self.handle.cancel()
        elif self.index == index and started.running:
            self.current = started

    def _advance(self, finished: int) -> None:
        # Each stage may advance the chain once
        if finished != self.index:
            return
        self._enter(finished + 1)

    def _rollback(self) -> None:
        current, self.current = self.current, None
        if current is not None:
            current.cancel()
        for cleanup in self.chain.cleanups:
            cleanup()


def run_chain(chain: EffectChain, on_complete: Continuation | None = None) -> EffectHandle:
    """Start ``chain`` and return the handle that owns the whole run."""
    return ChainRun(chain, on_complete).start()
