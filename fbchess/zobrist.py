"""Zobrist hashing keys for pieces, side to move, castling and en passant."""

from __future__ import annotations

from dataclasses import dataclass

from .randgen import KeyGenerator


@dataclass(frozen=True)
class ZobristKeys:
    """Random keys combined by exclusive-or into position hashes."""

    side_to_move: int
    castling: tuple[int, ...]
    pieces: tuple[tuple[int, ...], ...]
    en_passant: tuple[int, ...]
    thread_seed: int


def generate_keys(generator: KeyGenerator | None = None) -> ZobristKeys:
    """Draw a full key set; each castling combination is the xor of its single rights."""
    gen = generator if generator is not None else KeyGenerator()
    side_to_move = gen.rand64()
    castling = [0] * 16
    for single in (1, 2, 4, 8):
        castling[single] = gen.rand64()
    for rights in range(16):
        if bin(rights).count("1") < 2:
            continue
        value = 0
        for single in (1, 2, 4, 8):
            if rights & single:
                value ^= castling[single]
        castling[rights] = value
    pieces = tuple(tuple(gen.rand64() for _ in range(64)) for _ in range(16))
    en_passant = tuple(gen.rand64() for _ in range(8))
    thread_seed = gen.rand64()
    return ZobristKeys(side_to_move, tuple(castling), pieces, en_passant, thread_seed)