"""Cell grid geometry used by the authoritative game server."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Direction(str, Enum):
    """One of the four cardinal headings a snake can travel in.

    Rows grow downwards, matching screen coordinates on the client, so
    ``UP`` decreases the row index.
    """

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> Tuple[int, int]:
        """Return the ``(dcol, drow)`` offset of a single step."""

        return _DELTAS[self]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, value: object) -> "Direction":
        """Return the direction named by ``value``.

        Raises ``ValueError`` for anything but the four direction names.
        """

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid direction: {value!r}")
        try:
            return cls(value.upper())
        except ValueError as exc:
            raise ValueError(f"Invalid direction: {value!r}") from exc


_DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


@dataclass(frozen=True)
class Cell:
    """A grid cell addressed by column and row.

    Instances are hashable so they can be used directly as occupancy keys.
    Coordinates outside the board are valid values; they only show up as
    candidate heads that are about to hit a wall.
    """

    col: int
    row: int

    def to_pixels(self, cell_size: int) -> dict[str, int]:
        """Return the top-left pixel corner of the cell for the wire format."""

        return {"x": self.col * cell_size, "y": self.row * cell_size}


def step(cell: Cell, direction: Direction) -> Cell:
    """Translate ``cell`` by one cell towards ``direction`` without clamping."""

    dcol, drow = direction.delta
    return Cell(cell.col + dcol, cell.row + drow)


def is_opposite(first: Direction, second: Direction) -> bool:
    """Return ``True`` if the two headings point in opposite directions."""

    return first.opposite is second


def in_bounds(cell: Cell, cols: int, rows: int) -> bool:
    """Return ``True`` if ``cell`` lies on a ``cols`` x ``rows`` board."""

    return 0 <= cell.col < cols and 0 <= cell.row < rows
