"""In-process Surface implementation.

``MemorySurface`` keeps its visual state as plain attributes and records
every mutation, which makes it usable for headless runs and as the
reference Surface in tests.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import Any

from glitchfx.core.models import Transform

logger = logging.getLogger(__name__)


class MemorySurface:
    """Surface backed by in-memory state.

    Example:
        >>> surface = MemorySurface(width=320, height=120, content={"text": "hello"})
        >>> surface.set_transform(2.0, -1.0, 1.05)
        >>> surface.get_transform().scale
        1.05
    """

    def __init__(
        self,
        width: float,
        height: float,
        content: Any = None,
        name: str = "surface",
    ) -> None:
        self.name = name
        self.width = width
        self.height = height
        self.content = content
        self.transform = Transform()
        self.opacity = 1.0
        self.overlays: list[Any] = []
        self.transform_history: list[Transform] = []
        self.snapshot_count = 0
        self._resize_listeners: list[Callable[[], None]] = []

    def __repr__(self) -> str:
        return f"MemorySurface(name={self.name!r}, size=({self.width}, {self.height}))"

    def get_size(self) -> tuple[float, float]:
        return (self.width, self.height)

    def snapshot(self) -> Any:
        self.snapshot_count += 1
        return copy.deepcopy(self.content)

    def get_transform(self) -> Transform:
        return self.transform

    def set_transform(self, dx: float, dy: float, scale: float) -> None:
        self.transform = Transform(dx=dx, dy=dy, scale=scale)
        self.transform_history.append(self.transform)

    def set_opacity(self, value: float) -> None:
        self.opacity = value

    def attach_overlay(self, node: Any) -> None:
        self.overlays.append(node)

    def detach_overlay(self, node: Any) -> None:
        # Identity match; overlays are dataclasses and may compare equal
        for i, existing in enumerate(self.overlays):
            if existing is node:
                del self.overlays[i]
                return
        logger.debug("detach_overlay: node not attached to %s", self.name)

    def on_viewport_resize(self, callback: Callable[[], None]) -> None:
        self._resize_listeners.append(callback)

    def resize(self, width: float, height: float) -> None:
        """Change the surface size and notify resize listeners."""
        self.width = width
        self.height = height
        for callback in list(self._resize_listeners):
            callback()
