"""Surface capability consumed by every effect.

A Surface is owned by the host page. Effects only read its geometry,
snapshot its content, and mutate its transform, opacity and overlay
children.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from glitchfx.core.models import Transform


@runtime_checkable
class Surface(Protocol):
    """Abstract visual object an effect targets."""

    def get_size(self) -> tuple[float, float]:
        """Return ``(width, height)`` in px.

        Glitch bands use whole pixels; a fractional height is truncated.
        """
        ...

    def snapshot(self) -> Any:
        """Return a detached duplicate of the current visual subtree."""
        ...

    def get_transform(self) -> Transform:
        """Return the current translation and scale."""
        ...

    def set_transform(self, dx: float, dy: float, scale: float) -> None:
        """Set translation (px) and uniform scale."""
        ...

    def set_opacity(self, value: float) -> None:
        """Set opacity in [0, 1]."""
        ...

    def attach_overlay(self, node: Any) -> None:
        """Stack ``node`` on top of the surface content."""
        ...

    def detach_overlay(self, node: Any) -> None:
        """Remove a previously attached overlay node."""
        ...

    def on_viewport_resize(self, callback: Callable[[], None]) -> None:
        """Register a viewport resize listener."""
        ...
