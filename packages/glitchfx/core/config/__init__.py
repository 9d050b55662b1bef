"""Effect configuration models and preset loading."""

from glitchfx.core.config.loader import detect_format, load_config, load_presets
from glitchfx.core.config.models import (
    DriftConfig,
    EffectPresets,
    GlitchConfig,
    OscillatorConfig,
    SegfaultConfig,
    SlowdownRule,
    TypewriterConfig,
)

__all__ = [
    "DriftConfig",
    "EffectPresets",
    "GlitchConfig",
    "OscillatorConfig",
    "SegfaultConfig",
    "SlowdownRule",
    "TypewriterConfig",
    "detect_format",
    "load_config",
    "load_presets",
]
