"""Effect chaining, lifecycle control and composed sequences."""

from glitchfx.core.composition.chain import (
    ChainRun,
    ChainStage,
    EffectChain,
    action_stage,
    run_chain,
    wait_stage,
)
from glitchfx.core.composition.composer import EffectComposer
from glitchfx.core.composition.sequences import (
    glitch_stage,
    segfault_chain,
    segfault_trigger,
    typewriter_then_glitch,
)

__all__ = [
    "ChainRun",
    "ChainStage",
    "EffectChain",
    "EffectComposer",
    "action_stage",
    "glitch_stage",
    "run_chain",
    "segfault_chain",
    "segfault_trigger",
    "typewriter_then_glitch",
    "wait_stage",
]
