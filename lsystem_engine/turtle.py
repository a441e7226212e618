"""Grid turtle modules for parametric grammars.

The turtle lives on an integer grid and only turns in right angles:
heading 0 walks towards +y, 90 towards +x, 180 towards -y, 270 towards -x.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .errors import _require
from .module import Module, QueryModule
from .state import TraversalState

_GRID_DIRECTIONS: dict[int, tuple[int, int]] = {
    0: (0, 1),
    90: (1, 0),
    180: (0, -1),
    270: (-1, 0),
}


@dataclass
class TurtleState(TraversalState):
    x: int = 0
    y: int = 0
    heading: int = 0

    def deep_copy(self) -> TurtleState:
        return replace(self)


class MoveForward(Module):
    symbol = "F"

    def __init__(self, steps: int = 1) -> None:
        _require(
            isinstance(steps, int) and not isinstance(steps, bool),
            "MoveForward steps must be an integer",
        )
        super().__init__(steps)

    def change_state(self, state: TurtleState) -> None:
        dx, dy = _GRID_DIRECTIONS[state.heading % 360]
        state.x += dx * self.data
        state.y += dy * self.data


class Rotate(Module):
    symbol = "-"

    def __init__(self, degrees: int = 90) -> None:
        _require(
            isinstance(degrees, int) and degrees % 90 == 0,
            f"Rotate degrees must be a multiple of 90; got {degrees!r}",
        )
        super().__init__(degrees)

    def change_state(self, state: TurtleState) -> None:
        state.heading = (state.heading + self.data) % 360

    def label(self) -> str:
        return self.symbol


class EndPoint(Module):
    """Growing tip; does not move the turtle."""

    symbol = "A"

    def change_state(self, state: TurtleState) -> None:
        pass


class QueryPoint(QueryModule):
    """Records the turtle position it was last evaluated at."""

    symbol = "?P"

    def change_state(self, state: TurtleState) -> None:
        pass

    def query_state(self, state: TurtleState) -> None:
        self.data = (state.x, state.y)

    @property
    def position(self) -> tuple[int, int] | None:
        return self.data

    def label(self) -> str:
        if self.data is None:
            return self.symbol
        x, y = self.data
        return f"{self.symbol}({x}, {y})"
