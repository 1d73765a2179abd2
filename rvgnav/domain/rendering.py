"""Render collaborator contract used by agents.

Agents announce destination markers and path visuals as one-way
notifications; nothing they plan depends on what a renderer does with them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from rvgnav.domain.geometry import Point

Handle = Any


class SceneRenderer(Protocol):
    def create_marker(self, position: Point, color: str, owner_id: int) -> Handle: ...

    def destroy_marker(self, handle: Handle) -> None: ...

    def create_path_visual(self, points: Sequence[Point], color: str) -> Handle: ...

    def destroy_path_visual(self, handle: Handle) -> None: ...


class NullRenderer:
    """Renderer that ignores every notification."""

    def create_marker(self, position: Point, color: str, owner_id: int) -> Handle:
        return None

    def destroy_marker(self, handle: Handle) -> None:
        return None

    def create_path_visual(self, points: Sequence[Point], color: str) -> Handle:
        return None

    def destroy_path_visual(self, handle: Handle) -> None:
        return None
