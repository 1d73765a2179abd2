"""Path construction helpers for simulation output directories."""

from __future__ import annotations

from pathlib import Path


def logs_dir(out_dir: Path) -> Path:
    """Return path to the logs subdirectory within an output directory."""
    return out_dir / "logs"


def figures_dir(out_dir: Path) -> Path:
    """Return path to the figures subdirectory within an output directory."""
    return out_dir / "figures"


def graph_path(out_dir: Path) -> Path:
    """Return path to the canonical graph JSON file."""
    return out_dir / "graph.json"


def trajectory_log_path(out_dir: Path) -> Path:
    """Return path to the per-tick trajectory Parquet file."""
    return logs_dir(out_dir) / "trajectory.parquet"


def event_log_path(out_dir: Path) -> Path:
    """Return path to the agent event Parquet file."""
    return logs_dir(out_dir) / "events.parquet"


def scene_figure_path(out_dir: Path) -> Path:
    """Return path to the end-of-run scene PNG."""
    return figures_dir(out_dir) / "scene.png"
