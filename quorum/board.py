"""Board state, move legality, move generation and move application."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from itertools import combinations
from typing import Optional, Union

from quorum.hashes import piece_hash, reserve_hash, turn_hash
from quorum.pieces import Color, Coord


def _coords(items: Iterable[Iterable[int]]) -> frozenset[Coord]:
    return frozenset(Coord(*item) for item in items)


@dataclass(frozen=True)
class Movement:
    """Jump ``active`` over ``pivot``, converting the listed opponent pieces."""

    color: Color
    active: Coord
    pivot: Coord
    conversions: tuple[Coord, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "active", Coord(*self.active))
        object.__setattr__(self, "pivot", Coord(*self.pivot))
        object.__setattr__(
            self, "conversions", tuple(Coord(*c) for c in self.conversions)
        )

    def dest(self) -> Coord:
        """The square the active piece lands on, mirrored across the pivot."""
        dx = self.pivot.x - self.active.x
        dy = self.pivot.y - self.active.y
        return Coord(self.pivot.x + dx, self.pivot.y + dy)

    def gap(self) -> int:
        """Number of empty squares between the active piece and the pivot."""
        if self.active == self.pivot:
            raise ValueError("active and pivot must differ")
        return max(
            abs(self.active.x - self.pivot.x) - 1,
            abs(self.active.y - self.pivot.y) - 1,
        )

    @staticmethod
    def simple(color: Color, active: Coord, pivot: Coord) -> Movement:
        """A movement without conversions."""
        return Movement(color, active, pivot, ())


@dataclass(frozen=True)
class Placement:
    """Place a piece from the reserve at ``at``."""

    color: Color
    at: Coord

    def __post_init__(self) -> None:
        object.__setattr__(self, "at", Coord(*self.at))

    def dest(self) -> Coord:
        """The square the piece is placed on."""
        return self.at

    def gap(self) -> int:
        """Placements have no gap."""
        return 0


Move = Union[Movement, Placement]


class IllegalMoveReason(enum.Enum):
    """Why a move is not allowed."""

    ACTIVE_NOT_OWNED = "active piece not owned"
    PIVOT_NOT_OWNED = "pivot piece not owned"
    DEST_NOT_EMPTY = "destination not empty"
    DEST_NOT_IN_BOUNDS = "destination not in bounds"
    GAP_TOO_BIG = "gap too big"
    EMPTY_RESERVE = "empty reserve"
    TRIED_CONVERT_CAPTURE = "tried to convert a captured piece"


class IllegalMoveError(ValueError):
    """Raised when applying a move the board does not allow."""

    def __init__(self, reason: IllegalMoveReason, move: Move) -> None:
        super().__init__(f"illegal move {move!r}: {reason.value}")
        self.reason = reason
        self.move = move


@dataclass
class MoveDelta:
    """Pieces added and removed for each colour, and reserve changes."""

    white_minus: list[Coord] = field(default_factory=list)
    white_plus: list[Coord] = field(default_factory=list)
    black_minus: list[Coord] = field(default_factory=list)
    black_plus: list[Coord] = field(default_factory=list)
    white_reserve: int = 0
    black_reserve: int = 0

    def _plus(self, color: Color) -> list[Coord]:
        return self.white_plus if color is Color.WHITE else self.black_plus

    def _minus(self, color: Color) -> list[Coord]:
        return self.white_minus if color is Color.WHITE else self.black_minus

    def _add_reserve(self, color: Color, amount: int) -> None:
        if color is Color.WHITE:
            self.white_reserve += amount
        else:
            self.black_reserve += amount


@dataclass(frozen=True, eq=False)
class Board:
    """An immutable game position.

    Equality compares size, gap limit, pieces and reserves; whose turn it is
    and the hash are ignored.
    """

    board_size: int
    whose_move: Color
    white: frozenset[Coord] = frozenset()
    black: frozenset[Coord] = frozenset()
    white_reserve: int = 0
    black_reserve: int = 0
    max_gap: int = 2
    zobrist_hash: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "white", _coords(self.white))
        object.__setattr__(self, "black", _coords(self.black))

    def _key(self) -> tuple:
        return (
            self.board_size,
            self.max_gap,
            self.white,
            self.black,
            self.white_reserve,
            self.black_reserve,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    @classmethod
    def from_position(
        cls,
        board_size: int,
        whose_move: Color,
        white: Iterable[Coord],
        black: Iterable[Coord],
    ) -> Board:
        """Build a board from piece sets, rejecting pieces outside the board."""
        white_set = _coords(white)
        black_set = _coords(black)

        def outside(c: Coord) -> bool:
            return c.x < 0 or c.y < 0 or c.x >= board_size or c.y >= board_size

        if any(outside(c) for c in white_set):
            raise ValueError(
                f"White pieces out of bounds for {board_size}x{board_size} board: "
                f"{sorted(white_set)}"
            )
        if any(outside(c) for c in black_set):
            raise ValueError(
                f"Black pieces out of bounds for {board_size}x{board_size} board: "
                f"{sorted(black_set)}"
            )
        return cls(board_size=board_size, whose_move=whose_move, white=white_set, black=black_set)

    @classmethod
    def start_position(cls, board_size: int) -> Board:
        """The opening position: a triangle of pieces in each corner."""
        if board_size < 8:
            raise ValueError("board size must be at least 8")
        white: set[Coord] = set()
        black: set[Coord] = set()
        for x in range(board_size):
            for y in range(board_size):
                if x + y < 4 or x + y > 2 * board_size - 6:
                    white.add(Coord(x, y))
                elif board_size - x + y < 5 or board_size - x + y > 2 * board_size - 5:
                    black.add(Coord(x, y))
        return cls.from_position(board_size, Color.WHITE, white, black)

    def all_pieces(self) -> frozenset[Coord]:
        """Every occupied square."""
        return self.white | self.black

    def all_coords(self) -> Iterator[Coord]:
        """Every square on the board, column by column."""
        for x in range(self.board_size):
            for y in range(self.board_size):
                yield Coord(x, y)

    def in_bounds(self, coord: Coord) -> bool:
        """Whether ``coord`` lies on the board."""
        x, y = coord
        return 0 <= x < self.board_size and 0 <= y < self.board_size

    def render(self) -> str:
        """A text picture of the board, top rank first."""
        half = self.board_size / 2.0
        rows = []
        for y in reversed(range(self.board_size)):
            cells = []
            for x in range(self.board_size):
                c = Coord(x, y)
                if c in self.white and c in self.black:
                    cells.append("☯")
                elif c in self.white:
                    cells.append("●")
                elif c in self.black:
                    cells.append("○")
                elif abs(x + 0.5 - half) < 1.0 and abs(y + 0.5 - half) < 1.0:
                    cells.append("+")
                else:
                    cells.append("·")
            rows.append("".join(f"{cell} " for cell in cells) + "\n")
        return "".join(rows)

    def show_board(self) -> None:
        """Print the board."""
        print(self.render(), end="")

    def valid_move(self, mov: Move) -> Optional[IllegalMoveReason]:
        """Return why ``mov`` is illegal, or None if it is allowed."""
        if isinstance(mov, Movement):
            pieces = self.pieces_of(mov.color)
            if mov.active not in pieces:
                return IllegalMoveReason.ACTIVE_NOT_OWNED
            if mov.pivot not in pieces:
                return IllegalMoveReason.PIVOT_NOT_OWNED
            dest = mov.dest()
            if dest in self.all_pieces():
                return IllegalMoveReason.DEST_NOT_EMPTY
            if not self.in_bounds(dest):
                return IllegalMoveReason.DEST_NOT_IN_BOUNDS
            if mov.gap() > self.max_gap:
                return IllegalMoveReason.GAP_TOO_BIG
            if mov.conversions:
                captured = set(self.capturable_around(mov.color, mov.active, dest))
                if any(c in captured for c in mov.conversions):
                    return IllegalMoveReason.TRIED_CONVERT_CAPTURE
            return None
        if mov.at in self.all_pieces():
            return IllegalMoveReason.DEST_NOT_EMPTY
        if self.reserve_of(mov.color) <= 0:
            return IllegalMoveReason.EMPTY_RESERVE
        return None

    def pieces_of(self, color: Color) -> frozenset[Coord]:
        """The pieces of ``color``."""
        return self.white if color is Color.WHITE else self.black

    def reserve_of(self, color: Color) -> int:
        """How many pieces ``color`` holds in reserve."""
        return self.white_reserve if color is Color.WHITE else self.black_reserve

    def neighborhood(self, coord: Coord) -> list[Coord]:
        """The up to eight in-bounds squares around ``coord``."""
        x, y = coord
        return [
            Coord(x + dx, y + dy)
            for dx in (-1, 0, 1)
            for dy in (-1, 0, 1)
            if (dx, dy) != (0, 0) and self.in_bounds(Coord(x + dx, y + dy))
        ]

    def orthogonal_neighborhood(self, coord: Coord) -> list[Coord]:
        """The four orthogonal neighbours of ``coord``, bounds unchecked."""
        x, y = coord
        return [Coord(x + 1, y), Coord(x - 1, y), Coord(x, y + 1), Coord(x, y - 1)]

    def flood_fill(self, color: Color, source: Coord) -> frozenset[Coord]:
        """The orthogonally connected group of ``color`` reached from ``source``."""
        pieces = self.pieces_of(color)
        visited = {Coord(*source)}
        queued = set(self.orthogonal_neighborhood(source))
        while queued:
            next_queued: set[Coord] = set()
            for neighbor in queued:
                if neighbor in pieces and neighbor not in visited:
                    visited.add(neighbor)
                    next_queued.update(self.orthogonal_neighborhood(neighbor))
            queued = next_queued
        return frozenset(visited)

    def color_connected(self, color: Color) -> bool:
        """Whether all pieces of ``color`` form a single group."""
        pieces = self.pieces_of(color)
        if not pieces:
            raise ValueError(f"{color.name} has no pieces on the board")
        source = next(iter(pieces))
        return len(self.flood_fill(color, source)) == len(pieces)

    def winner(self) -> Optional[Color]:
        """The colour whose pieces are all connected, Black checked first."""
        if self.color_connected(Color.BLACK):
            return Color.BLACK
        if self.color_connected(Color.WHITE):
            return Color.WHITE
        return None

    def capturable_around(self, color: Color, active: Coord, dest: Coord) -> list[Coord]:
        """Opponent pieces next to ``dest`` that would be surrounded after the move."""
        opponents = self.pieces_of(color.opponent())
        occupied = self.all_pieces()
        dest_neighbors = self.neighborhood(dest)
        active_adjacent = active in dest_neighbors
        return [
            candidate
            for candidate in dest_neighbors
            if candidate in opponents
            and all(
                (liberty in occupied or liberty == dest) and not active_adjacent
                for liberty in self.neighborhood(candidate)
            )
        ]

    def convertible_around(self, color: Color, active: Coord, dest: Coord) -> list[Coord]:
        """Opponent pieces next to ``dest`` flanked by a piece of ``color`` beyond them."""
        own = self.pieces_of(color)
        opponents = self.pieces_of(color.opponent())
        active_captured = active in self.capturable_around(color, active, dest)
        result = []
        for neighbor in self.neighborhood(dest):
            flanker = Coord(
                (neighbor.x - dest.x) * 2 + dest.x,
                (neighbor.y - dest.y) * 2 + dest.y,
            )
            if (
                flanker != active
                and neighbor in opponents
                and flanker in own
                and not active_captured
            ):
                result.append(neighbor)
        return result

    def moves_of(self, color: Color) -> Iterator[Move]:
        """Every legal move for ``color``: movements first, then placements."""
        pieces = self.pieces_of(color)
        reserve = self.reserve_of(color)
        movements: list[Movement] = []
        for active in pieces:
            for pivot in pieces:
                base = Movement.simple(color, active, pivot)
                if self.valid_move(base) is not None:
                    continue
                if reserve < 0:
                    raise ValueError(
                        f"Negative reserve for {color.name}: {len(pieces)} on board "
                        f"with {reserve} in reserve"
                    )
                conversions = self.convertible_around(color, active, base.dest())
                if len(conversions) <= reserve:
                    movements.append(Movement(color, active, pivot, tuple(conversions)))
                else:
                    movements.extend(
                        Movement(color, active, pivot, combo)
                        for combo in combinations(conversions, reserve)
                    )
        yield from (m for m in movements if self.valid_move(m) is None)
        if reserve > 0:
            occupied = self.all_pieces()
            yield from (
                Placement(color, coord)
                for coord in self.all_coords()
                if coord not in occupied
            )

    def moves(self) -> Iterator[Move]:
        """Every legal move for the side to move."""
        return self.moves_of(self.whose_move)

    def move_delta(self, mov: Move) -> MoveDelta:
        """The changes ``mov`` makes to pieces and reserves."""
        delta = MoveDelta()
        color = mov.color
        if isinstance(mov, Movement):
            dest = mov.dest()
            opponent = color.opponent()
            delta._plus(color).append(dest)
            delta._minus(color).append(mov.active)
            convertibles = self.convertible_around(color, mov.active, dest)
            for coord in self.capturable_around(color, mov.active, dest):
                if coord not in convertibles:
                    delta._minus(opponent).append(coord)
                    delta._add_reserve(opponent, 1)
            for coord in convertibles:
                delta._minus(opponent).append(coord)
                delta._add_reserve(opponent, 1)
                if coord in mov.conversions:
                    delta._plus(color).append(coord)
                    delta._add_reserve(color, -1)
        else:
            delta._plus(color).append(mov.at)
            delta._add_reserve(color, -1)
        return delta

    def apply_to_zobrist_hash(self, delta: MoveDelta) -> int:
        """The position hash after applying ``delta`` and passing the turn."""
        new_hash = self.zobrist_hash
        for coord in (*delta.white_plus, *delta.white_minus):
            new_hash ^= piece_hash(Color.WHITE, coord)
        for coord in (*delta.black_plus, *delta.black_minus):
            new_hash ^= piece_hash(Color.BLACK, coord)
        new_hash ^= reserve_hash(Color.WHITE, self.white_reserve)
        new_hash ^= reserve_hash(Color.WHITE, self.white_reserve + delta.white_reserve)
        new_hash ^= reserve_hash(Color.BLACK, self.black_reserve)
        new_hash ^= reserve_hash(Color.BLACK, self.black_reserve + delta.black_reserve)
        new_hash ^= turn_hash(self.whose_move) ^ turn_hash(self.whose_move.opponent())
        return new_hash

    def apply(self, mov: Move) -> Board:
        """Return the board after ``mov``; raise IllegalMoveError if it is not allowed."""
        reason = self.valid_move(mov)
        if reason is not None:
            raise IllegalMoveError(reason, mov)
        delta = self.move_delta(mov)
        return replace(
            self,
            white=(self.white - set(delta.white_minus)) | set(delta.white_plus),
            black=(self.black - set(delta.black_minus)) | set(delta.black_plus),
            white_reserve=self.white_reserve + delta.white_reserve,
            black_reserve=self.black_reserve + delta.black_reserve,
            whose_move=self.whose_move.opponent(),
            zobrist_hash=self.apply_to_zobrist_hash(delta),
        )