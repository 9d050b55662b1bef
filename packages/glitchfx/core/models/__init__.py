"""Data records shared by effects, surfaces and overlays."""

from glitchfx.core.models.effect import Band, FrameTransform, Layer, StepState, Transform

__all__ = [
    "Band",
    "FrameTransform",
    "Layer",
    "StepState",
    "Transform",
]
