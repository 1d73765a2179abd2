"""Parquet persistence helpers for trajectory and event streams."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from rvgnav.config.constants import FLUSH_THRESHOLD
from rvgnav.domain.agent import Agent, AgentEventRecord
from rvgnav.io.schemas import EVENT_SCHEMA, TRAJECTORY_SCHEMA

Columns = dict[str, list[int | float | str]]


def empty_columns(schema: pa.Schema) -> Columns:
    return {name: [] for name in schema.names}


def flush_columns(
    columns: Columns,
    schema: pa.Schema,
    path: Path,
    writer: pq.ParquetWriter | None,
) -> pq.ParquetWriter | None:
    """Write accumulated rows to Parquet and clear in-memory buffers."""
    if not columns["run_id"]:
        return writer
    table = pa.Table.from_pydict(columns, schema=schema)
    if writer is None:
        writer = pq.ParquetWriter(path, schema)
    writer.write_table(table)
    for values in columns.values():
        values.clear()
    return writer


class SimulationRecorder:
    """Buffers per-tick agent rows and events, flushing them in batches.

    Use as a context manager so both writers are closed even when the run
    fails part way. A stream that never received a row leaves an empty file
    with the right schema behind.
    """

    def __init__(
        self,
        run_id: str,
        trajectory_path: Path,
        event_path: Path,
        flush_threshold: int = FLUSH_THRESHOLD,
    ) -> None:
        if flush_threshold < 1:
            raise ValueError("flush_threshold must be >= 1")
        self.run_id = run_id
        self.trajectory_path = trajectory_path
        self.event_path = event_path
        self.flush_threshold = flush_threshold
        self.trajectory_rows = 0
        self.event_rows = 0
        self._trajectory = empty_columns(TRAJECTORY_SCHEMA)
        self._events = empty_columns(EVENT_SCHEMA)
        self._trajectory_writer: pq.ParquetWriter | None = None
        self._event_writer: pq.ParquetWriter | None = None
        self._closed = False

    def __enter__(self) -> SimulationRecorder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def record_agents(self, step: int, time: float, agents: Iterable[Agent]) -> None:
        columns = self._trajectory
        for agent in agents:
            columns["run_id"].append(self.run_id)
            columns["step"].append(step)
            columns["time"].append(time)
            columns["agent_id"].append(agent.agent_id)
            columns["x"].append(agent.position.x)
            columns["z"].append(agent.position.z)
            columns["state"].append(agent.state.value)
            columns["path_index"].append(agent.path_index)
            columns["replan_count"].append(agent.replan_count)
            self.trajectory_rows += 1
        if len(columns["run_id"]) >= self.flush_threshold:
            self._trajectory_writer = flush_columns(
                columns, TRAJECTORY_SCHEMA, self.trajectory_path, self._trajectory_writer
            )

    def record_events(self, step: int, events: Iterable[AgentEventRecord]) -> None:
        columns = self._events
        for record in events:
            columns["run_id"].append(self.run_id)
            columns["step"].append(step)
            columns["time"].append(record.time)
            columns["agent_id"].append(record.agent_id)
            columns["event"].append(record.event.value)
            columns["x"].append(record.position.x)
            columns["z"].append(record.position.z)
            self.event_rows += 1
        if len(columns["run_id"]) >= self.flush_threshold:
            self._event_writer = flush_columns(
                columns, EVENT_SCHEMA, self.event_path, self._event_writer
            )

    def close(self) -> None:
        """Flush what is buffered and close both files."""
        if self._closed:
            return
        self._closed = True
        self._trajectory_writer = flush_columns(
            self._trajectory, TRAJECTORY_SCHEMA, self.trajectory_path, self._trajectory_writer
        )
        self._event_writer = flush_columns(
            self._events, EVENT_SCHEMA, self.event_path, self._event_writer
        )
        for writer, path, schema in (
            (self._trajectory_writer, self.trajectory_path, TRAJECTORY_SCHEMA),
            (self._event_writer, self.event_path, EVENT_SCHEMA),
        ):
            if writer is None:
                pq.write_table(schema.empty_table(), path)
            else:
                writer.close()
