"""Zobrist hash tables for board positions.

The tables are drawn from a ChaCha12 keystream with a fixed seed, so every
run of the program sees the same values.
"""

from __future__ import annotations

import struct
from collections.abc import Iterator
from itertools import islice

from quorum.pieces import Color, Coord

_ZOBRIST_SEED = bytes(
    [
        130, 248, 82, 126, 147, 35, 99, 45, 145, 146, 72, 121, 178, 133, 137, 137,
        47, 234, 168, 123, 152, 111, 231, 27, 136, 96, 37, 44, 106, 7, 166, 139,
    ]
)
_N_PIECE_HASHES = 9 * 9 * 2
_N_RESERVE_HASHES = 20 * 2

_MASK32 = 0xFFFFFFFF
_SIGMA = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & _MASK32


def _quarter_round(state: list[int], a: int, b: int, c: int, d: int) -> None:
    state[a] = (state[a] + state[b]) & _MASK32
    state[d] = _rotl(state[d] ^ state[a], 16)
    state[c] = (state[c] + state[d]) & _MASK32
    state[b] = _rotl(state[b] ^ state[c], 12)
    state[a] = (state[a] + state[b]) & _MASK32
    state[d] = _rotl(state[d] ^ state[a], 8)
    state[c] = (state[c] + state[d]) & _MASK32
    state[b] = _rotl(state[b] ^ state[c], 7)


def _chacha_words(seed: bytes, rounds: int) -> Iterator[int]:
    """Yield the 32-bit words of a ChaCha keystream with a zero stream id."""
    if len(seed) != 32:
        raise ValueError("ChaCha seed must be 32 bytes")
    key = struct.unpack("<8I", seed)
    counter = 0
    while True:
        initial = [
            *_SIGMA,
            *key,
            counter & _MASK32,
            (counter >> 32) & _MASK32,
            0,
            0,
        ]
        state = list(initial)
        for _ in range(rounds // 2):
            _quarter_round(state, 0, 4, 8, 12)
            _quarter_round(state, 1, 5, 9, 13)
            _quarter_round(state, 2, 6, 10, 14)
            _quarter_round(state, 3, 7, 11, 15)
            _quarter_round(state, 0, 5, 10, 15)
            _quarter_round(state, 1, 6, 11, 12)
            _quarter_round(state, 2, 7, 8, 13)
            _quarter_round(state, 3, 4, 9, 14)
        yield from ((mixed + orig) & _MASK32 for mixed, orig in zip(state, initial))
        counter += 1


def _u64_stream(seed: bytes, rounds: int = 12) -> Iterator[int]:
    """Yield 64-bit values, each built from two keystream words, low word first."""
    words = _chacha_words(seed, rounds)
    for low, high in zip(words, words):
        yield low | (high << 32)


def _build_tables() -> tuple[tuple[int, ...], tuple[int, ...], tuple[int, ...]]:
    stream = _u64_stream(_ZOBRIST_SEED)
    pieces = tuple(islice(stream, _N_PIECE_HASHES))
    reserves = tuple(islice(stream, _N_RESERVE_HASHES))
    turns = tuple(islice(stream, 2))
    return pieces, reserves, turns


_PIECE_HASHES, _RESERVE_HASHES, _TURN_HASHES = _build_tables()


def piece_hash(color: Color, coord: Coord) -> int:
    """Hash of a piece of ``color`` standing on ``coord``."""
    x, y = coord
    if x < 0 or y < 0:
        raise ValueError(f"coordinate out of range: {coord!r}")
    return _PIECE_HASHES[81 * int(color) + 9 * x + y]


def reserve_hash(color: Color, reserve: int) -> int:
    """Hash of ``color`` holding ``reserve`` pieces in hand."""
    if reserve < 0:
        raise ValueError(f"reserve must not be negative: {reserve}")
    return _RESERVE_HASHES[20 * int(color) + reserve]


def turn_hash(color: Color) -> int:
    """Hash of it being ``color``'s turn to move."""
    return _TURN_HASHES[int(color)]