"""Shared utilities for glitchfx."""

from glitchfx.core.utils.logging import StructuredJSONFormatter, configure_logging, get_logger
from glitchfx.core.utils.math import clamp, lerp, symmetric
from glitchfx.core.utils.random import RandomSource, ScriptedRandom, default_source, seeded_source

__all__ = [
    "RandomSource",
    "ScriptedRandom",
    "StructuredJSONFormatter",
    "clamp",
    "configure_logging",
    "default_source",
    "get_logger",
    "lerp",
    "seeded_source",
    "symmetric",
]
