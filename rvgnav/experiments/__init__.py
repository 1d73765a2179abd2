"""Experiments layer: command-line entrypoints."""

from rvgnav.experiments.simulate import main

__all__ = ["main"]
