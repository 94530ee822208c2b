from dataclasses import replace

import pytest

from quorum.ai import (
    VALUATION_MAX,
    VALUATION_MIN,
    CentroidDistanceHeuristic,
    ConnectedComponentsHeuristic,
    LegalMovesHeuristic,
    LinearCombinationHeuristic,
    NthSmallestStringHeuristic,
    PieceCountHeuristic,
    best_move,
    minimax_eval,
    playout,
)
from quorum.board import Board
from quorum.pieces import Color, Coord


def _board(white, black, whose_move=Color.WHITE):
    return Board.from_position(9, whose_move, [Coord(*c) for c in white], [Coord(*c) for c in black])


def _mirror(coords):
    return [(8 - x, 8 - y) for x, y in coords]


def test_piece_count_is_difference_of_counts():
    board = _board([(0, 0), (2, 2), (4, 4)], [(8, 8), (6, 6)])
    assert PieceCountHeuristic().evaluate(board) == len(board.white) - len(board.black)


def test_legal_moves_balanced_at_start():
    assert LegalMovesHeuristic().evaluate(Board.start_position(9)) == 0


def test_centroid_distance_symmetric_positions_score_zero():
    white = [(0, 0), (0, 2), (1, 1)]
    board = _board(white, _mirror(white))
    assert CentroidDistanceHeuristic(power=2.0).evaluate(board) == 0


def test_centroid_distance_favours_compact_side():
    compact = [(0, 0), (0, 1)]
    spread = [(8, 8), (2, 8)]
    h = CentroidDistanceHeuristic(power=1.0)
    white_compact = h.evaluate(_board(compact, spread))
    black_compact = h.evaluate(_board(_mirror(spread), _mirror(compact)))
    assert white_compact > 0
    assert black_compact == -white_compact


def test_connected_components_counts_groups():
    board = _board([(0, 0), (0, 1), (5, 5)], [(8, 8), (8, 7)])
    assert ConnectedComponentsHeuristic().evaluate(board) == -1


def test_connected_components_zero_when_both_connected():
    board = _board([(0, 0), (0, 1)], [(8, 8), (8, 7), (7, 7)])
    assert ConnectedComponentsHeuristic().evaluate(board) == 0


def test_nth_string_first_is_size_difference_when_connected():
    board = _board([(0, 0), (0, 1)], [(8, 8), (8, 7), (7, 7)])
    assert NthSmallestStringHeuristic(n=1).evaluate(board) == len(board.black) - len(board.white)


def test_nth_string_beyond_group_count_is_zero():
    board = _board([(0, 0), (0, 1), (5, 5)], [(8, 8), (6, 6)])
    assert NthSmallestStringHeuristic(n=3).evaluate(board) == 0


def test_nth_string_zero_behaves_like_one():
    board = _board([(0, 0), (0, 1), (5, 5)], [(8, 8), (6, 6), (6, 5), (6, 4)])
    assert NthSmallestStringHeuristic(n=0).evaluate(board) == NthSmallestStringHeuristic(n=1).evaluate(board)


def test_linear_combination_weights_terms():
    board = _board([(0, 0), (0, 1), (5, 5)], [(8, 8), (6, 6)])
    pieces = PieceCountHeuristic()
    groups = ConnectedComponentsHeuristic()
    combo = LinearCombinationHeuristic(terms=[(2, pieces), (3, groups)])
    assert combo.evaluate(board) == 2 * pieces.evaluate(board) + 3 * groups.evaluate(board)


def test_linear_combination_empty_is_zero():
    assert LinearCombinationHeuristic().evaluate(Board.start_position(9)) == 0


def test_minimax_depth_zero_is_heuristic():
    board = Board.start_position(9)
    h = LegalMovesHeuristic()
    assert minimax_eval(board, 0, h) == h.evaluate(board)


def test_minimax_white_win_is_max():
    board = _board([(0, 0), (0, 1)], [(8, 8), (6, 6)])
    assert minimax_eval(board, 1, PieceCountHeuristic()) == VALUATION_MAX


def test_minimax_black_win_is_min():
    board = _board([(0, 0), (5, 5)], [(8, 8), (8, 7)])
    assert minimax_eval(board, 2, PieceCountHeuristic()) == VALUATION_MIN


def test_minimax_depth_one_matches_best_child():
    board = Board.start_position(9)
    h = ConnectedComponentsHeuristic()
    children = [h.evaluate(board.apply(m)) for m in board.moves()]
    assert minimax_eval(board, 1, h) == max(children)


def test_minimax_depth_one_black_takes_minimum():
    board = replace(Board.start_position(9), whose_move=Color.BLACK)
    h = ConnectedComponentsHeuristic()
    children = [h.evaluate(board.apply(m)) for m in board.moves()]
    assert minimax_eval(board, 1, h) == min(children)


def test_best_move_is_legal_and_optimal():
    board = Board.start_position(9)
    h = ConnectedComponentsHeuristic()
    mov = best_move(board, 1, h)
    assert mov in list(board.moves())
    assert h.evaluate(board.apply(mov)) == minimax_eval(board, 1, h)


def test_best_move_rejects_zero_depth():
    with pytest.raises(ValueError):
        best_move(Board.start_position(9), 0, PieceCountHeuristic())


def test_playout_returns_existing_winner(capsys):
    board = _board([(0, 0), (0, 1)], [(8, 8), (6, 6)])
    assert playout(PieceCountHeuristic(), board) is Color.WHITE
    assert capsys.readouterr().out.splitlines()[0] == "0"


def test_playout_plays_winning_move(capsys):
    board = _board([(0, 0), (0, 1), (0, 3)], [(8, 8), (6, 8)])
    assert playout(ConnectedComponentsHeuristic(), board) is Color.WHITE
    assert "Turn 1 Heuristic" in capsys.readouterr().out