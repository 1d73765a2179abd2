"""Visualization layer: render collaborators and scene rendering."""

from rvgnav.viz.render import RecordingRenderer, render_scene

__all__ = [
    "RecordingRenderer",
    "render_scene",
]
