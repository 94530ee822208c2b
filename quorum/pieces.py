"""Basic value types shared across the game: board coordinates and player colours."""

from __future__ import annotations

import enum
from typing import NamedTuple


class Coord(NamedTuple):
    """A square on the board, zero-based, as (file, rank)."""

    x: int
    y: int


class Color(enum.IntEnum):
    """A player's colour. Black orders before White."""

    BLACK = 0
    WHITE = 1

    def opponent(self) -> Color:
        """Return the other player's colour."""
        return Color.BLACK if self is Color.WHITE else Color.WHITE