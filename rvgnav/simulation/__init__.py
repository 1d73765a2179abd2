"""Simulation engine: tick loop, run driver, and Parquet persistence."""

from rvgnav.simulation.engine import Simulation, SimulationSummary, run_simulation
from rvgnav.simulation.persistence import SimulationRecorder, flush_columns

__all__ = [
    "Simulation",
    "SimulationRecorder",
    "SimulationSummary",
    "flush_columns",
    "run_simulation",
]
