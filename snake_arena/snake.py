"""Snake entity implementation."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from .grid import Cell, Direction, is_opposite


@dataclass
class Snake:
    """Authoritative representation of a snake controlled by one connection.

    ``body`` runs from the head at index 0 to the tail. ``pending_heading``
    holds the last direction the player asked for; it only becomes the
    ``heading`` when the next tick commits it.
    """

    id: str
    color: str
    slot: int
    spawn: Cell
    heading: Direction = Direction.RIGHT
    name: str = ""
    score: int = 0
    extra_growth: int = 0
    milestone: int = 0
    pending_heading: Optional[Direction] = None
    body: Deque[Cell] = field(default_factory=deque)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.id
        if self.pending_heading is None:
            self.pending_heading = self.heading
        if not self.body:
            self.body = deque([self.spawn])

    @property
    def head(self) -> Cell:
        return self.body[0]

    @property
    def length(self) -> int:
        return len(self.body)

    def queue_heading(self, direction: Direction) -> None:
        """Remember ``direction`` until the next tick commits it."""

        self.pending_heading = direction

    def commit_heading(self) -> None:
        """Adopt the pending heading unless it would reverse the snake."""

        if not is_opposite(self.heading, self.pending_heading):
            self.heading = self.pending_heading

    def advance(self, head: Cell) -> None:
        """Prepend ``head``; the caller decides whether the tail goes."""

        self.body.appendleft(head)

    def trim_tail(self) -> None:
        """Drop the tail unless growth is still owed from golden food."""

        if self.extra_growth > 0:
            self.extra_growth -= 1
        else:
            self.body.pop()

    def shrink(self, amount: int) -> None:
        """Remove up to ``amount`` tail segments, always keeping the head."""

        for _ in range(amount):
            if len(self.body) <= 1:
                break
            self.body.pop()

    def add_score(self, delta: int) -> None:
        self.score = max(0, self.score + delta)

    def reach_milestone(self, threshold: int) -> bool:
        """Record a newly reached milestone and report whether one fired.

        A milestone is ``score // threshold``; each value is rewarded at most
        once until the snake is reset.
        """

        current = self.score // threshold
        if self.score > 0 and current > self.milestone:
            self.milestone = current
            return True
        return False

    def reset(self, cell: Cell, heading: Direction) -> None:
        """Put the snake back in its initial state at ``cell``."""

        self.body = deque([cell])
        self.heading = heading
        self.pending_heading = heading
        self.score = 0
        self.extra_growth = 0
        self.milestone = 0

    def to_snapshot(self, cell_size: int) -> dict:
        """Return a snapshot representation for clients."""

        return {
            "id": self.id,
            "color": self.color,
            "body": [segment.to_pixels(cell_size) for segment in self.body],
            "score": self.score,
            "name": self.name,
        }
