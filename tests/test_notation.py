import pytest

from quorum.board import Board, Movement, Placement
from quorum.notation import (
    MoveBuilder,
    MoveType,
    NotationError,
    game_result,
    parse_active,
    parse_black_move,
    parse_conversions,
    parse_coord,
    parse_dest,
    parse_file,
    parse_full_move_number,
    parse_line,
    parse_lines,
    parse_move_uncolored,
    parse_movement,
    parse_placement,
    parse_rank,
    parse_white_move,
)
from quorum.pieces import Color, Coord

PGN_EXAMPLE = (
    "1. 1一5三 1九3五\n"
    "2. 1二3四 2九2五\n"
    "3. 3二3六* 3九3七\n"
    "4. 1四5八 2八4八\n"
    "5. 1三5九 9一7五\n"
    "6. 9九7七 9四5六\n"
    "7. 3六3二 9二7四\n"
    "8. 4一6五 9三5五*6五\n"
    "9. 8八6六 ->4六\n"
    "10. 7八7六 7四3六\n"
    "11. 3一3三 5六5四\n"
    "12. 9六5六 8一6三\n"
    "13. 3二7四*7五 8三4三*5三\n"
    "14. 7九3九* 8二6二\n"
    "15. ->4五 ->3五\n"
    "16. 8七2五* 4八4四*4五\n"
    "0-1"
)


def test_illegal_pivot_point():
    with pytest.raises(NotationError):
        parse_white_move("3一4一")


def test_illegal_pivot_inside_lines_is_not_swallowed():
    with pytest.raises(NotationError):
        parse_lines("1. 3一4一 1九3五")


def test_example_game_parses_every_line():
    moves, rest = parse_lines(PGN_EXAMPLE)
    assert len(moves) == 16
    assert [number for number, _, _ in moves] == list(range(1, 17))
    assert rest == "\n0-1"
    assert game_result(rest.strip()) == ("0-1", "")


def test_example_game_specific_moves():
    moves, _ = parse_lines(PGN_EXAMPLE)
    assert moves[0] == (
        1,
        Movement(Color.WHITE, Coord(0, 0), Coord(2, 1)),
        Movement(Color.BLACK, Coord(0, 8), Coord(1, 6)),
    )
    assert moves[7][2] == Movement(Color.BLACK, Coord(8, 2), Coord(6, 3), (Coord(5, 4),))
    assert moves[8][2] == Placement(Color.BLACK, Coord(3, 5))
    assert moves[12][1] == Movement(Color.WHITE, Coord(2, 1), Coord(4, 2), (Coord(6, 4),))
    assert moves[14][1:] == (Placement(Color.WHITE, Coord(3, 4)), Placement(Color.BLACK, Coord(2, 4)))
    assert moves[15][1] == Movement(Color.WHITE, Coord(7, 6), Coord(4, 5))
    assert moves[15][2] == Movement(Color.BLACK, Coord(3, 7), Coord(3, 5), (Coord(3, 4),))


def test_example_game_first_turn_applies():
    (_, white_move, black_move), _ = parse_line(PGN_EXAMPLE)
    board = Board.start_position(9).apply(white_move)
    assert Coord(4, 2) in board.white
    assert Coord(0, 0) not in board.white
    board = board.apply(black_move)
    assert Coord(2, 4) in board.black
    assert Coord(0, 8) not in board.black
    assert board.whose_move is Color.WHITE


def test_parse_lines_empty_and_garbage():
    assert parse_lines("") == ([], "")
    assert parse_lines("abc") == ([], "abc")


def test_parse_full_move_number():
    assert parse_full_move_number("12. x") == (12, ". x")
    with pytest.raises(NotationError):
        parse_full_move_number("0")
    with pytest.raises(NotationError):
        parse_full_move_number("99999999999")


def test_parse_file_and_rank():
    assert parse_file("1") == (0, "")
    assert parse_file("9x") == (8, "x")
    assert parse_rank("九rest") == (8, "rest")
    with pytest.raises(NotationError):
        parse_file("0")
    with pytest.raises(NotationError):
        parse_rank("1")


def test_parse_coord_and_aliases():
    assert parse_coord("5三") == (Coord(4, 2), "")
    assert parse_active("1一x") == (Coord(0, 0), "x")
    assert parse_dest("9九") == (Coord(8, 8), "")
    with pytest.raises(NotationError):
        parse_coord("一5")


def test_parse_conversions_zero_or_more():
    assert parse_conversions(" rest") == ([], " rest")
    assert parse_conversions("7五4五 ") == ([Coord(6, 4), Coord(3, 4)], " ")


def test_parse_movement_builder():
    builder, rest = parse_movement("9三5五*6五 next")
    assert rest == " next"
    assert builder.move_type is MoveType.MOVEMENT
    assert builder.movement_active == Coord(8, 2)
    assert builder.movement_pivot == Coord(6, 3)
    assert builder.movement_conversions == (Coord(5, 4),)


def test_parse_placement_builder():
    builder, rest = parse_placement("->4六")
    assert rest == ""
    assert builder.move_type is MoveType.PLACEMENT
    assert builder.placement_at == Coord(3, 5)
    with pytest.raises(NotationError):
        parse_placement("4六")


def test_parse_move_uncolored_chooses_alternative():
    movement, _ = parse_move_uncolored("1一5三")
    placement, _ = parse_move_uncolored("->1一")
    assert movement.move_type is MoveType.MOVEMENT
    assert placement.move_type is MoveType.PLACEMENT
    with pytest.raises(NotationError):
        parse_move_uncolored("xyz")


def test_parse_black_move_sets_color():
    assert parse_black_move("->3五") == (Placement(Color.BLACK, Coord(2, 4)), "")


def test_builder_without_color_fails():
    with pytest.raises(NotationError):
        MoveBuilder(MoveType.PLACEMENT, placement_at=Coord(0, 0)).finish()
    with pytest.raises(NotationError):
        MoveBuilder(MoveType.MOVEMENT, color=Color.WHITE, movement_active=Coord(0, 0)).finish()


def test_game_result():
    assert game_result("1-0") == ("1-0", "")
    assert game_result("0-1\n") == ("0-1", "\n")
    with pytest.raises(NotationError):
        game_result("\n0-1")