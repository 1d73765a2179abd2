"""Parquet schema definitions for simulation artifacts.

Every Arrow schema used for persisting trajectories and agent events lives
here so that writers and readers work against the same column contracts.
"""

from __future__ import annotations

import pyarrow as pa

# ---------------------------------------------------------------------------
# Schema version constants
# ---------------------------------------------------------------------------

GRAPH_PAYLOAD_SCHEMA_VERSION = 1

# ---------------------------------------------------------------------------
# Simulation log schemas
# ---------------------------------------------------------------------------

TRAJECTORY_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("step", pa.int64()),
        ("time", pa.float64()),
        ("agent_id", pa.int64()),
        ("x", pa.float64()),
        ("z", pa.float64()),
        ("state", pa.string()),
        ("path_index", pa.int64()),
        ("replan_count", pa.int64()),
    ]
)

EVENT_SCHEMA = pa.schema(
    [
        ("run_id", pa.string()),
        ("step", pa.int64()),
        ("time", pa.float64()),
        ("agent_id", pa.int64()),
        ("event", pa.string()),
        ("x", pa.float64()),
        ("z", pa.float64()),
    ]
)
