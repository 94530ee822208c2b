"""Parser for the game record notation.

Squares are written as a file digit 1-9 followed by a rank numeral 一-九.
A movement is the active square then the destination, optionally followed
by ``*`` and the squares converted. A placement is ``->`` and a square.
A record line is ``N. <white move> <black move>``.

Every parser takes text and returns ``(value, remaining_text)``.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional, TypeVar

from quorum.board import Move, Movement, Placement
from quorum.pieces import Color, Coord

T = TypeVar("T")

_I32_MAX = 2**31 - 1
_MULTISPACE = " \t\r\n"
_FILES = "123456789"
_RANKS = "一二三四五六七八九"
_MOVE_NUMBER = re.compile(r"[1-9][0-9]*")


class NotationError(ValueError):
    """Raised when text cannot be read as game notation."""


class _Backtrack(NotationError):
    """A recoverable parse failure: the input did not match here."""


class MoveType(enum.Enum):
    """Kind of move being built."""

    PLACEMENT = "placement"
    MOVEMENT = "movement"


@dataclass
class MoveBuilder:
    """A move parsed without its colour."""

    move_type: MoveType
    color: Optional[Color] = None
    placement_at: Optional[Coord] = None
    movement_active: Optional[Coord] = None
    movement_pivot: Optional[Coord] = None
    movement_conversions: Optional[tuple[Coord, ...]] = None

    def finish(self) -> Move:
        """Build the move; raise NotationError if a needed part is missing."""
        if self.move_type is MoveType.PLACEMENT:
            if self.color is None or self.placement_at is None:
                raise NotationError("Error while parsing placement")
            return Placement(self.color, self.placement_at)
        if (
            self.color is None
            or self.movement_active is None
            or self.movement_pivot is None
            or self.movement_conversions is None
        ):
            raise NotationError("Error while parsing movement")
        return Movement(
            self.color, self.movement_active, self.movement_pivot, self.movement_conversions
        )


def _multispace0(text: str) -> str:
    return text.lstrip(_MULTISPACE)


def _tag(text: str, prefix: str) -> str:
    if not text.startswith(prefix):
        raise _Backtrack(f"expected {prefix!r} at {text[:10]!r}")
    return text[len(prefix):]


def _many0(parser: Callable[[str], tuple[T, str]], text: str) -> tuple[list[T], str]:
    items: list[T] = []
    while True:
        try:
            value, rest = parser(text)
        except _Backtrack:
            return items, text
        if len(rest) == len(text):
            raise NotationError("parser made no progress in repetition")
        items.append(value)
        text = rest


def _alt(text: str, *parsers: Callable[[str], tuple[T, str]]) -> tuple[T, str]:
    for parser in parsers:
        try:
            return parser(text)
        except _Backtrack:
            continue
    raise _Backtrack(f"no alternative matched at {text[:10]!r}")


def parse_lines(text: str) -> tuple[list[tuple[int, Move, Move]], str]:
    """Parse as many record lines as possible."""
    return _many0(parse_line, text)


def parse_line(text: str) -> tuple[tuple[int, Move, Move], str]:
    """Parse ``N. <white move> <black move>``."""
    number, rest = parse_full_move_number(_multispace0(text))
    rest = _multispace0(_tag(rest, "."))
    white, rest = parse_white_move(rest)
    black, rest = parse_black_move(_multispace0(rest))
    return (number, white, black), rest


def parse_full_move_number(text: str) -> tuple[int, str]:
    """Parse a move number: a positive integer without leading zeros."""
    match = _MOVE_NUMBER.match(text)
    if match is None:
        raise _Backtrack(f"expected move number at {text[:10]!r}")
    value = int(match.group())
    if value > _I32_MAX:
        raise _Backtrack(f"move number too large: {match.group()}")
    return value, text[match.end():]


def parse_white_move(text: str) -> tuple[Move, str]:
    """Parse a move and give it to White."""
    builder, rest = parse_move_uncolored(text)
    builder.color = Color.WHITE
    return builder.finish(), rest


def parse_black_move(text: str) -> tuple[Move, str]:
    """Parse a move and give it to Black."""
    builder, rest = parse_move_uncolored(text)
    builder.color = Color.BLACK
    return builder.finish(), rest


def parse_move_uncolored(text: str) -> tuple[MoveBuilder, str]:
    """Parse a movement or a placement."""
    return _alt(text, parse_movement, parse_placement)


def _calculate_pivot(active: Coord, dest: Coord) -> Optional[Coord]:
    dx = dest.x - active.x
    dy = dest.y - active.y
    if dx % 2 == 0 and dy % 2 == 0:
        return Coord(active.x + dx // 2, active.y + dy // 2)
    return None


def parse_movement(text: str) -> tuple[MoveBuilder, str]:
    """Parse active square, destination, optional ``*`` and conversions.

    A destination whose pivot would fall between squares raises NotationError.
    """
    active, rest = parse_active(text)
    dest, rest = parse_dest(rest)
    if rest.startswith("*"):
        rest = rest[1:]
    conversions, rest = parse_conversions(rest)
    pivot = _calculate_pivot(active, dest)
    if pivot is None:
        raise NotationError(
            f"{active} cannot move to {dest} because the pivot would not align to the grid"
        )
    builder = MoveBuilder(
        MoveType.MOVEMENT,
        movement_active=active,
        movement_pivot=pivot,
        movement_conversions=tuple(conversions),
    )
    return builder, rest


def parse_placement(text: str) -> tuple[MoveBuilder, str]:
    """Parse ``->`` followed by a square."""
    at, rest = parse_coord(_tag(text, "->"))
    return MoveBuilder(MoveType.PLACEMENT, placement_at=at), rest


def parse_active(text: str) -> tuple[Coord, str]:
    """Parse the square of the moving piece."""
    return parse_coord(text)


def parse_dest(text: str) -> tuple[Coord, str]:
    """Parse the destination square."""
    return parse_coord(text)


def parse_conversions(text: str) -> tuple[list[Coord], str]:
    """Parse zero or more squares."""
    return _many0(parse_coord, text)


def parse_coord(text: str) -> tuple[Coord, str]:
    """Parse a file then a rank."""
    file, rest = parse_file(text)
    rank, rest = parse_rank(rest)
    return Coord(file, rank), rest


def parse_file(text: str) -> tuple[int, str]:
    """Parse a file digit 1-9 as a zero-based column."""
    if not text or text[0] not in _FILES:
        raise _Backtrack(f"expected file digit at {text[:10]!r}")
    return int(text[0]) - 1, text[1:]


def parse_rank(text: str) -> tuple[int, str]:
    """Parse a rank numeral 一-九 as a zero-based row."""
    if not text or text[0] not in _RANKS:
        raise _Backtrack(f"expected rank numeral at {text[:10]!r}")
    return _RANKS.index(text[0]), text[1:]


def game_result(text: str) -> tuple[str, str]:
    """Parse a result, ``1-0`` or ``0-1``."""
    return _alt(
        text,
        lambda t: ("1-0", _tag(t, "1-0")),
        lambda t: ("0-1", _tag(t, "0-1")),
    )