"""Agent navigation state machine.

Each agent repeatedly picks a random destination, plans a shortest path on
its private working graph and follows it. Conflicts with other agents are
resolved locally: a move that would bring the agent too close to another
agent is refused, the agent waits a random short time and then steps its
path index back by one vertex (or forward when already at the first). After
``max_replannings`` consecutive replannings the destination is abandoned.

Waits are not callbacks: the deadline is stored on the agent and compared
with the simulation clock on every tick, so the whole state is inspectable.
Once a wait is scheduled it always fires with its fixed transition.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from random import Random

from rvgnav.config.types import NavigationConfig
from rvgnav.domain.astar import astar
from rvgnav.domain.errors import NoAvailablePositionError
from rvgnav.domain.geometry import Point, distance, step_towards
from rvgnav.domain.rendering import Handle, NullRenderer, SceneRenderer
from rvgnav.domain.visibility import WorkingGraph

logger = logging.getLogger(__name__)


class AgentState(str, Enum):
    """Navigation states; there is no terminal state."""

    CHOOSE_DESTINATION = "choose_destination"
    MOVING_TO_DESTINATION = "moving_to_destination"
    REPLAN_PATH = "replan_path"
    WAITING_TO_CHOOSE_DESTINATION = "waiting_to_choose_destination"
    WAITING_TO_REPLAN = "waiting_to_replan"


class AgentEvent(str, Enum):
    """Notable transitions, recorded for logs and tests."""

    DESTINATION_CHOSEN = "destination_chosen"
    PATH_NOT_FOUND = "path_not_found"
    MOVE_REFUSED = "move_refused"
    REPLANNED = "replanned"
    DESTINATION_REACHED = "destination_reached"
    DESTINATION_ABANDONED = "destination_abandoned"


_WAIT_EXITS = {
    AgentState.WAITING_TO_CHOOSE_DESTINATION: AgentState.CHOOSE_DESTINATION,
    AgentState.WAITING_TO_REPLAN: AgentState.REPLAN_PATH,
}


@dataclass(frozen=True)
class AgentEventRecord:
    time: float
    agent_id: int
    event: AgentEvent
    position: Point


class Agent:
    """One independent mover with its own working graph and destination pool.

    Raises:
        NoAvailablePositionError: if the pool holds fewer than two distinct
            positions, so no destination other than the start can be drawn.
    """

    def __init__(
        self,
        agent_id: int,
        color: str,
        position: Point,
        graph: WorkingGraph,
        destination_pool: Sequence[Point],
        *,
        config: NavigationConfig | None = None,
        rng: Random | None = None,
        renderer: SceneRenderer | None = None,
    ) -> None:
        distinct = set(map(tuple, destination_pool))
        if len(distinct) < 2:
            raise NoAvailablePositionError(1, len(distinct))
        self.agent_id = agent_id
        self.color = color
        self.position = Point(*position)
        self.destination = self.position
        self.graph = graph
        self.config = config or NavigationConfig()
        self.renderer: SceneRenderer = renderer or NullRenderer()
        self.state = AgentState.CHOOSE_DESTINATION
        self.path: list[int] = []
        self.path_index = 0
        self.replan_count = 0
        self.wake_at: float | None = None
        self._rng = rng or Random()
        self._pool: list[Point] = [Point(*p) for p in destination_pool]
        self.last_failed_destination: Point | None = None
        self._marker: Handle = None
        self._path_visual: Handle = None
        self._events: list[AgentEventRecord] = []

    def __repr__(self) -> str:
        return (
            f"Agent(id={self.agent_id}, state={self.state.value}, "
            f"position=({self.position.x:.2f}, {self.position.z:.2f}))"
        )

    def path_points(self) -> list[Point]:
        return [self.graph.vertex(i) for i in self.path]

    def drain_events(self) -> list[AgentEventRecord]:
        """Return and forget the events emitted since the last call."""
        events, self._events = self._events, []
        return events

    def _emit(self, now: float, event: AgentEvent) -> None:
        self._events.append(AgentEventRecord(now, self.agent_id, event, self.position))

    def _wait(self, now: float, state: AgentState, duration: float) -> None:
        self.state = state
        self.wake_at = now + duration

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, now: float, dt: float, others: Sequence[Point]) -> None:
        """Advance one step at clock time *now*.

        *others* are the positions the collision check must keep clear of.
        """
        if self.wake_at is not None:
            if now < self.wake_at:
                return
            self.wake_at = None
            self.state = _WAIT_EXITS[self.state]

        if self.state is AgentState.CHOOSE_DESTINATION:
            self._choose_destination(now)
        elif self.state is AgentState.REPLAN_PATH:
            self._replan(now)
        elif self.state is AgentState.MOVING_TO_DESTINATION:
            self._move(now, dt, others)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _draw_destination(self, start: Point) -> Point:
        """Uniform draw from the pool, never the start or the last failed pick.

        The start is moved to the back of the pool so it is available again
        for the next draw.
        """
        if start in self._pool:
            self._pool.remove(start)
            self._pool.append(start)
        candidates = [p for p in self._pool if p != start and p != self.last_failed_destination]
        if not candidates:
            candidates = [p for p in self._pool if p != start]
        return candidates[self._rng.randrange(len(candidates))]

    def _choose_destination(self, now: float) -> None:
        start = self.destination
        self.position = start
        if self._path_visual is not None:
            self.renderer.destroy_path_visual(self._path_visual)
            self._path_visual = None

        destination = self._draw_destination(start)
        s, d = self.graph.attach(start, destination)
        path = astar(self.graph.vertices, self.graph.edges, s, d, adjacency=self.graph.adjacency())
        if path is None:
            self.last_failed_destination = destination
            logger.debug(
                "agent %d: no path from %s to %s, retrying", self.agent_id, start, destination
            )
            self._emit(now, AgentEvent.PATH_NOT_FOUND)
            return

        self.last_failed_destination = None
        self.destination = destination
        self.path = path
        self.path_index = 1
        if self._marker is not None:
            self.renderer.destroy_marker(self._marker)
        self._marker = self.renderer.create_marker(destination, self.color, self.agent_id)
        self._path_visual = self.renderer.create_path_visual(self.path_points(), self.color)
        self.state = AgentState.MOVING_TO_DESTINATION
        self._emit(now, AgentEvent.DESTINATION_CHOSEN)

    def _would_collide(self, candidate: Point, others: Sequence[Point]) -> bool:
        clearance = self.config.min_agent_clearance
        return any(distance(candidate, other) < clearance for other in others)

    def _move(self, now: float, dt: float, others: Sequence[Point]) -> None:
        target = self.graph.vertex(self.path[self.path_index])
        if self.position != target:
            reach = self.config.distance_unit * dt / self.config.tick_interval
            candidate = step_towards(self.position, target, reach)
            if self._would_collide(candidate, others):
                low, high = self.config.replan_wait_min, self.config.replan_wait_max
                wait = low + (high - low) * self._rng.random()
                self._wait(now, AgentState.WAITING_TO_REPLAN, wait)
                self._emit(now, AgentEvent.MOVE_REFUSED)
                return
            self.position = candidate

        if self.position == target:
            if self.path_index == len(self.path) - 1:
                self.replan_count = 0
                self._wait(
                    now, AgentState.WAITING_TO_CHOOSE_DESTINATION, self.config.destination_wait
                )
                self._emit(now, AgentEvent.DESTINATION_REACHED)
            else:
                self.path_index += 1

    def _replan(self, now: float) -> None:
        if self.replan_count >= self.config.max_replannings:
            self.replan_count = 0
            self.destination = self.position
            self._wait(now, AgentState.WAITING_TO_CHOOSE_DESTINATION, self.config.destination_wait)
            logger.debug("agent %d: abandoning destination at %s", self.agent_id, self.position)
            self._emit(now, AgentEvent.DESTINATION_ABANDONED)
            return

        self.replan_count += 1
        if self.path_index > 0:
            self.path_index -= 1
        else:
            self.path_index += 1
        self.state = AgentState.MOVING_TO_DESTINATION
        self._emit(now, AgentEvent.REPLANNED)
