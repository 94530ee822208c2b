# quorum

A Python library for Quorum, a two-player game on a square grid, normally
9×9. A player wins when all of their pieces form one orthogonally connected
group.

The package has these modules:

- `quorum.pieces`: `Coord`, a zero-based `(x, y)` square, and `Color`
  (`Color.BLACK`, `Color.WHITE`, with `opponent()`).
- `quorum.hashes`: fixed Zobrist tables with `piece_hash`, `reserve_hash`
  and `turn_hash`.
- `quorum.board`: the rules. It covers the start position, move validation,
  captures, conversions, reserve placement, legal move generation and move
  application.
- `quorum.notation`: a parser for the written move notation. Files are the
  digits `1`–`9` and ranks are the numerals `一`–`九`.
- `quorum.ai`: position heuristics, alpha–beta minimax search and a greedy
  self-play routine.

## Installation

```
pip install .
```

To add the test dependencies, run `pip install .[test]`. Then run the tests
with `pytest`.

## Rules as implemented

A **movement** (`Movement`) jumps one of your pieces (the *active* piece) over
another of your pieces (the *pivot*). It lands the same distance away on the
far side. The move is legal only when all of these hold:

- the destination is empty and on the board;
- the gap between active and pivot is at most `max_gap` squares (default 2).

After a movement, enemy pieces next to the destination may be removed:

- **Captured** (`Board.capturable_around`): every in-bounds neighbour of the
  piece is occupied or is the destination. This applies only when the active
  piece did not start next to the destination.
- **Convertible** (`Board.convertible_around`): the piece is flanked, with one
  of your own pieces directly beyond it as seen from the destination. The
  active piece does not count as that flanking piece.

Each removed enemy piece goes back to its owner's reserve. A movement may list
convertible squares in `conversions`, and each one listed costs one piece from
the mover's reserve. That piece is put on the converted square in the mover's
colour.

A **placement** (`Placement`) puts a piece from your reserve on any empty
square.

`Board.winner()` checks Black first, then White. It returns the first colour
whose pieces are all connected, or `None` if neither is. It raises
`ValueError` if a colour has no pieces.

## Using the board

```python
from quorum.pieces import Color, Coord
from quorum.board import Board, Movement

board = Board.start_position(9)
print(board.render())

move = Movement.simple(Color.WHITE, Coord(0, 0), Coord(1, 1))
assert board.valid_move(move) is None      # None means legal
board = board.apply(move)                  # returns a new Board

for mov in board.moves():                  # legal moves for the side to play
    ...

print(board.winner())                      # Color or None
```

Boards are immutable. `Board.from_position(size, whose_move, white, black)`
builds an arbitrary position and raises `ValueError` for pieces off the board.
`Board.start_position(size)` requires a size of at least 8.

`Board.valid_move` returns an `IllegalMoveReason` for an illegal move.
`Board.apply` raises `IllegalMoveError`, whose `reason` and `move` attributes
describe the move, when it is given one.

`Board.moves_of(color)` yields movements first, then placements.
When a movement has more convertible pieces than the player has in reserve,
it yields one movement for each way of picking as many as the reserve allows.

`Board.move_delta` returns a `MoveDelta` with the pieces each colour gains and
loses. `Board.apply` keeps `zobrist_hash` up to date through
`Board.apply_to_zobrist_hash`. The hash tables cover boards up to 9×9 and
reserves below 20.

Board equality compares size, gap limit, pieces and reserves. It ignores whose
turn it is and the hash.

## Reading notation

```python
from quorum.board import Board
from quorum.notation import parse_lines

text = "1. 1一5三 1九3五\n2. 1二3四 2九2五\n"
moves, rest = parse_lines(text)

board = Board.start_position(9)
for number, white_move, black_move in moves:
    board = board.apply(white_move).apply(black_move)
```

A movement is written as the active square followed by the destination, for
example `1一5三`. After that comes an optional `*` and the squares to convert.
A placement is `->` followed by a square, for example `->4六`. A record line is
`N. <white move> <black move>`. `game_result` reads `1-0` or `0-1`.

Every parse function returns `(value, remaining_text)`. When the input does
not match, the single-item parsers raise `NotationError`. `parse_lines` and
`parse_conversions` behave differently: they stop at the first item they
cannot read and return the text that is left. A movement whose destination
would put the pivot between squares, such as `3一4一`, always raises
`NotationError`.

## Searching for moves

```python
from quorum.ai import (
    best_move, LinearCombinationHeuristic, PieceCountHeuristic,
    ConnectedComponentsHeuristic,
)
from quorum.board import Board

heuristic = LinearCombinationHeuristic([
    (10, PieceCountHeuristic()),
    (5, ConnectedComponentsHeuristic()),
])
move = best_move(Board.start_position(9), 2, heuristic)
```

Scores are integers, and positive values favour White. The available
heuristics are:

- `PieceCountHeuristic`
- `LegalMovesHeuristic`
- `CentroidDistanceHeuristic(power)`
- `ConnectedComponentsHeuristic`
- `NthSmallestStringHeuristic(n)`
- `LinearCombinationHeuristic(terms)`

To write your own, subclass `Heuristic` and implement `evaluate(board)`.

The search functions are:

- `minimax_eval(board, depth, heuristic, alpha, beta)`: the alpha–beta value
  of a position.
- `best_move(board, depth, heuristic)`: the best move for the side to play,
  or `None` if there are no moves. The depth must be at least 1.
- `playout(heuristic, root)`: plays the move the heuristic rates best, ply by
  ply, and prints each board. It stops when there is a winner or after 1000
  plies, and returns the winner. It raises `RuntimeError` if a position has
  no winner and no legal moves.

## What is not included

This is a library only. It has no command-line program, no interactive play
and no way to save games. `parse_lines` reads only the move lines of a record.
To read a trailing result, call `game_result` on the remaining text.