"""Food entity definition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import FoodType
from .grid import Cell


@dataclass(frozen=True)
class Food:
    """The single food item on the board.

    Food is never mutated; eating or expiry replaces it with a new instance.
    """

    cell: Cell
    type: FoodType
    expires_at: Optional[int] = None

    @property
    def score(self) -> int:
        return self.type.score

    def is_expired(self, now_ms: int) -> bool:
        """Return ``True`` once a timed food has outlived its expiry stamp."""

        return self.expires_at is not None and now_ms > self.expires_at

    def to_dict(self, cell_size: int) -> dict[str, object]:
        """Serialise the food to a JSON friendly dictionary."""

        payload: dict[str, object] = {
            **self.cell.to_pixels(cell_size),
            "type": self.type.name,
            "color": self.type.color,
            "score": self.type.score,
        }
        if self.expires_at is not None:
            payload["expiresAt"] = self.expires_at
        return payload
