"""Position heuristics and alpha-beta search over game positions."""

from __future__ import annotations

import abc
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from quorum.board import Board, Move
from quorum.pieces import Color

VALUATION_MAX = 2**31 - 1
VALUATION_MIN = -(2**31)


def _to_valuation(value: float) -> int:
    """Truncate toward zero and saturate to the valuation range."""
    if math.isnan(value):
        return 0
    if value >= VALUATION_MAX:
        return VALUATION_MAX
    if value <= VALUATION_MIN:
        return VALUATION_MIN
    return int(value)


def _string_sizes(board: Board, color: Color) -> list[int]:
    """Sizes of the orthogonally connected groups of ``color``."""
    remaining = set(board.pieces_of(color))
    sizes = []
    while remaining:
        source = next(iter(remaining))
        group = board.flood_fill(color, source)
        sizes.append(len(group))
        remaining -= group
    return sizes


class Heuristic(abc.ABC):
    """Scores a position: positive favours White, negative favours Black."""

    @abc.abstractmethod
    def evaluate(self, board: Board) -> int:
        """Return the score of ``board``."""


@dataclass(frozen=True)
class PieceCountHeuristic(Heuristic):
    """White's piece count minus Black's."""

    def evaluate(self, board: Board) -> int:
        return len(board.white) - len(board.black)


@dataclass(frozen=True)
class LegalMovesHeuristic(Heuristic):
    """White's number of legal moves minus Black's."""

    def evaluate(self, board: Board) -> int:
        white_moves = sum(1 for _ in board.moves_of(Color.WHITE))
        black_moves = sum(1 for _ in board.moves_of(Color.BLACK))
        return white_moves - black_moves


@dataclass(frozen=True)
class CentroidDistanceHeuristic(Heuristic):
    """Rewards keeping pieces close to their own centroid.

    Each piece contributes its Manhattan distance to its colour's centroid
    raised to ``power``; the score is Black's total minus White's, times 1000.
    """

    power: float

    @staticmethod
    def _centroid(pieces) -> tuple[float, float]:
        n = len(pieces)
        if n == 0:
            return 0.0, 0.0
        return sum(c.x / n for c in pieces), sum(c.y / n for c in pieces)

    def _spread(self, pieces) -> float:
        cx, cy = self._centroid(pieces)
        return sum((abs(c.x - cx) + abs(c.y - cy)) ** self.power for c in pieces)

    def evaluate(self, board: Board) -> int:
        white = self._spread(board.white)
        black = self._spread(board.black)
        return _to_valuation((black - white) * 1000.0)


@dataclass(frozen=True)
class ConnectedComponentsHeuristic(Heuristic):
    """Black's number of groups minus White's."""

    def evaluate(self, board: Board) -> int:
        return len(_string_sizes(board, Color.BLACK)) - len(_string_sizes(board, Color.WHITE))


@dataclass(frozen=True)
class NthSmallestStringHeuristic(Heuristic):
    """Compares the ``n``-th group when groups are ranked largest first.

    A colour with fewer than ``n`` groups counts as 0. The score is Black's
    value minus White's.
    """

    n: int

    def _nth(self, board: Board, color: Color) -> int:
        sizes = sorted(_string_sizes(board, color), reverse=True)
        skip = max(self.n - 1, 0)
        return sizes[skip] if skip < len(sizes) else 0

    def evaluate(self, board: Board) -> int:
        return self._nth(board, Color.BLACK) - self._nth(board, Color.WHITE)


@dataclass(frozen=True)
class LinearCombinationHeuristic(Heuristic):
    """A weighted sum of other heuristics."""

    terms: Sequence[tuple[int, Heuristic]] = field(default_factory=tuple)

    def evaluate(self, board: Board) -> int:
        return sum(weight * sub.evaluate(board) for weight, sub in self.terms)


def minimax_eval(
    board: Board,
    depth: int,
    heuristic: Heuristic,
    alpha: int = VALUATION_MIN,
    beta: int = VALUATION_MAX,
) -> int:
    """Alpha-beta minimax value of ``board`` searched ``depth`` plies deep."""
    if depth == 0:
        return heuristic.evaluate(board)
    winner = board.winner()
    if winner is Color.WHITE:
        return VALUATION_MAX
    if winner is Color.BLACK:
        return VALUATION_MIN

    if board.whose_move is Color.WHITE:
        value = VALUATION_MIN
        for mov in board.moves():
            value = max(value, minimax_eval(board.apply(mov), depth - 1, heuristic, alpha, beta))
            if value >= beta:
                break
            alpha = max(alpha, value)
        return value

    value = VALUATION_MAX
    for mov in board.moves():
        value = min(value, minimax_eval(board.apply(mov), depth - 1, heuristic, alpha, beta))
        if value <= alpha:
            break
        beta = min(beta, value)
    return value


def best_move(board: Board, depth: int, heuristic: Heuristic) -> Optional[Move]:
    """The move with the best minimax value for the side to move, or None."""
    if depth < 1:
        raise ValueError("search depth must be at least 1")
    maximizing = board.whose_move is Color.WHITE
    best: Optional[Move] = None
    best_value = 0
    for mov in board.moves():
        value = minimax_eval(board.apply(mov), depth - 1, heuristic)
        if best is None:
            better = True
        elif maximizing:
            better = value >= best_value
        else:
            better = value < best_value
        if better:
            best, best_value = mov, value
    return best


def playout(heuristic: Heuristic, root: Board) -> Optional[Color]:
    """Play greedily by ``heuristic`` from ``root`` until someone wins.

    Each ply is printed. Play stops after 1000 plies at most.
    """
    board = root
    ply = 0
    while board.winner() is None:
        goal = 1 if board.whose_move is Color.WHITE else -1
        moves = sorted(
            board.moves(),
            key=lambda mov: goal * -heuristic.evaluate(board.apply(mov)),
        )
        if not moves:
            print(
                f"Board with no winner and no moves, on {board.whose_move.name}'s "
                f"turn with max gap {board.max_gap}"
            )
            board.show_board()
            raise RuntimeError("position has no winner and no legal moves")
        board = board.apply(moves[0])

        ply += 1
        print(f"Turn {ply} Heuristic {heuristic.evaluate(board)}")
        board.show_board()
        if ply > 1000:
            break
    print(ply)
    board.show_board()
    return board.winner()