"""Error taxonomy for setup-time failures.

Path-not-found and imminent collisions are routine outcomes handled inside
the navigation loop and are therefore not exceptions.
"""

from __future__ import annotations


class RvgNavError(Exception):
    """Base class for errors raised by the planning core."""


class NoAvailablePositionError(RvgNavError):
    """The spawn/destination pool cannot satisfy the requested agents."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            f"cannot place {requested} agent(s): only {available} available position(s); "
            "reduce the agent count or enlarge the floor"
        )
        self.requested = requested
        self.available = available


class LayoutError(RvgNavError):
    """The floor description is inconsistent (e.g. disconnected floor cells)."""
