"""Pieces, squares, move-ordering phases and fixed bitboard constants."""

from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import Iterator

ALL_SQUARES = (1 << 64) - 1


class Piece(IntEnum):
    """Piece codes; 0 and 8 index the per-colour occupancy bitboards."""

    WHITE_OCCUPIED = 0
    WHITE_PAWN = 1
    WHITE_KNIGHT = 2
    WHITE_KING = 3
    WHITE_BISHOP_LIGHT = 4
    WHITE_BISHOP_DARK = 5
    WHITE_ROOK = 6
    WHITE_QUEEN = 7
    BLACK_OCCUPIED = 8
    BLACK_PAWN = 9
    BLACK_KNIGHT = 10
    BLACK_KING = 11
    BLACK_BISHOP_LIGHT = 12
    BLACK_BISHOP_DARK = 13
    BLACK_ROOK = 14
    BLACK_QUEEN = 15

    @property
    def is_white(self) -> bool:
        return self < Piece.BLACK_OCCUPIED

    @property
    def symbol(self) -> str:
        """FEN letter of the piece, or an empty string for occupancy codes."""
        return ".PNKBBRQ.pnkbbrq"[self].strip(".")


class Square(IntEnum):
    """Board squares, A1 = 0 through H8 = 63."""

    A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
    A2, B2, C2, D2, E2, F2, G2, H2 = range(8, 16)
    A3, B3, C3, D3, E3, F3, G3, H3 = range(16, 24)
    A4, B4, C4, D4, E4, F4, G4, H4 = range(24, 32)
    A5, B5, C5, D5, E5, F5, G5, H5 = range(32, 40)
    A6, B6, C6, D6, E6, F6, G6, H6 = range(40, 48)
    A7, B7, C7, D7, E7, F7, G7, H7 = range(48, 56)
    A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)


class Phase(IntEnum):
    """Stages of the staged move picker."""

    TRANS = 0
    CAPTURE_GEN = 1
    CAPTURE_MOVES = 2
    KILLER1 = 3
    KILLER2 = 4
    ORDINARY_MOVES = 5
    BAD_CAPS = 6
    TRANS2 = 7
    CAPTURE_GEN2 = 8
    CAPTURE_MOVES2 = 9
    QUIET_CHECKS = 10
    EVADE_PHASE = 11
    TRANS3 = 12
    CAPTURE_GEN3 = 13
    CAPTURE_MOVES3 = 14
    QUIET_CHECKS3 = 15
    POSITIONAL_GAIN_PHASE = 16
    PHASE0 = 17


class Castling(IntFlag):
    """Castling rights bits."""

    NONE = 0
    WHITE_KINGSIDE = 1
    WHITE_QUEENSIDE = 2
    BLACK_KINGSIDE = 4
    BLACK_QUEENSIDE = 8
    WHITE = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE | BLACK


def _check_square(sq: int) -> int:
    if not 0 <= sq < 64:
        raise ValueError(f"square out of range: {sq}")
    return sq


def square_file(sq: int) -> int:
    """File index 0 (a) .. 7 (h)."""
    return _check_square(sq) & 7


def square_rank(sq: int) -> int:
    """Rank index 0 (first rank) .. 7 (eighth rank)."""
    return _check_square(sq) >> 3


def square_name(sq: int) -> str:
    """Algebraic name such as 'e4'."""
    return "abcdefgh"[square_file(sq)] + str(square_rank(sq) + 1)


def parse_square(name: str) -> Square:
    """Square from an algebraic name; raises ValueError when malformed."""
    text = name.strip().lower()
    if len(text) != 2 or text[0] not in "abcdefgh" or text[1] not in "12345678":
        raise ValueError(f"not a square: {name!r}")
    return Square("abcdefgh".index(text[0]) + 8 * (int(text[1]) - 1))


def bit(sq: int) -> int:
    """Bitboard holding only the given square."""
    return 1 << _check_square(sq)


def iter_bits(bitboard: int) -> Iterator[Square]:
    """Squares set in a bitboard, lowest first."""
    if not 0 <= bitboard <= ALL_SQUARES:
        raise ValueError("bitboard must be an unsigned 64-bit value")
    while bitboard:
        low = bitboard & -bitboard
        yield Square(low.bit_length() - 1)
        bitboard ^= low


RANK_MASKS = tuple(0xFF << (8 * r) for r in range(8))
FILE_MASKS = tuple(0x0101010101010101 << f for f in range(8))

LIGHT_SQUARES = 0x55AA55AA55AA55AA
DARK_SQUARES = 0xAA55AA55AA55AA55
NOT_FILE_A = 0xFEFEFEFEFEFEFEFE
NOT_FILE_H = 0x7F7F7F7F7F7F7F7F
RANK2_NOT_A = 0x000000000000FE00
RANK2_NOT_H = 0x0000000000007F00
RANK7_NOT_A = 0x00FE000000000000
RANK7_NOT_H = 0x007F000000000000
RANKS2TO6 = 0x0000FFFFFFFFFF00
RANKS2TO6_NOT_A = 0x0000FEFEFEFEFE00
RANKS2TO6_NOT_AB = 0x0000FCFCFCFCFC00
RANKS2TO6_NOT_H = 0x00007F7F7F7F7F00
RANKS2TO6_NOT_GH = 0x00003F3F3F3F3F00
RANKS3TO7_NOT_A = 0x00FEFEFEFEFE0000
RANKS3TO7_NOT_AB = 0x00FCFCFCFCFC0000
RANKS3TO7_NOT_GH = 0x003F3F3F3F3F0000
RANKS3TO7_NOT_H = 0x007F7F7F7F7F0000

F1G1 = 0x0000000000000060
C1D1 = 0x000000000000000C
B1C1D1 = 0x000000000000000E
F8G8 = 0x6000000000000000
C8D8 = 0x0C00000000000000
B8C8D8 = 0x0E00000000000000

LEFT90 = (
    7, 15, 23, 31, 39, 47, 55, 63,
    6, 14, 22, 30, 38, 46, 54, 62,
    5, 13, 21, 29, 37, 45, 53, 61,
    4, 12, 20, 28, 36, 44, 52, 60,
    3, 11, 19, 27, 35, 43, 51, 59,
    2, 10, 18, 26, 34, 42, 50, 58,
    1, 9, 17, 25, 33, 41, 49, 57,
    0, 8, 16, 24, 32, 40, 48, 56,
)

LEFT45 = (
    0, 2, 5, 9, 14, 20, 27, 35,
    1, 4, 8, 13, 19, 26, 34, 42,
    3, 7, 12, 18, 25, 33, 41, 48,
    6, 11, 17, 24, 32, 40, 47, 53,
    10, 16, 23, 31, 39, 46, 52, 57,
    15, 22, 30, 38, 45, 51, 56, 60,
    21, 29, 37, 44, 50, 55, 59, 62,
    28, 36, 43, 49, 54, 58, 61, 63,
)

RIGHT45 = (
    28, 21, 15, 10, 6, 3, 1, 0,
    36, 29, 22, 16, 11, 7, 4, 2,
    43, 37, 30, 23, 17, 12, 8, 5,
    49, 44, 38, 31, 24, 18, 13, 9,
    54, 50, 45, 39, 32, 25, 19, 14,
    58, 55, 51, 46, 40, 33, 26, 20,
    61, 59, 56, 52, 47, 41, 34, 27,
    63, 62, 60, 57, 53, 48, 42, 35,
)

SHIFT = (
    (1,) + (2,) * 2 + (4,) * 3 + (7,) * 4 + (11,) * 5 + (16,) * 6 + (22,) * 7
    + (29,) * 8 + (37,) * 7 + (44,) * 6 + (50,) * 5 + (55,) * 4 + (59,) * 3
    + (62,) * 2 + (64,)
)

KNIGHT_HOPS = (6, 10, 15, 17, -6, -10, -15, -17)

KING_SAFETY_MULT = (0, 1, 4, 9, 16, 25, 36, 49, 50, 50, 50, 50, 50, 50, 50, 50)

CRAMP_FILE = (FILE_MASKS[1], 0, 0, 0, 0, 0, 0, FILE_MASKS[6])


def _castle_table() -> tuple[Castling, ...]:
    table = [Castling.ALL] * 64
    table[Square.A1] = Castling.ALL & ~Castling.WHITE_QUEENSIDE
    table[Square.E1] = Castling.BLACK
    table[Square.H1] = Castling.ALL & ~Castling.WHITE_KINGSIDE
    table[Square.A8] = Castling.ALL & ~Castling.BLACK_QUEENSIDE
    table[Square.E8] = Castling.WHITE
    table[Square.H8] = Castling.ALL & ~Castling.BLACK_KINGSIDE
    return tuple(table)


CASTLE_TABLE = _castle_table()


def _neighbour_masks(rank: int) -> tuple[int, ...]:
    base = 8 * rank
    return tuple(
        (bit(base + f - 1) if f > 0 else 0) | (bit(base + f + 1) if f < 7 else 0)
        for f in range(8)
    )


WHITE_EP = _neighbour_masks(3)
BLACK_EP = _neighbour_masks(4)

PROMOTION_WHITE = (
    Piece.WHITE_OCCUPIED, Piece.WHITE_OCCUPIED, Piece.WHITE_OCCUPIED, Piece.WHITE_OCCUPIED,
    Piece.WHITE_KNIGHT, Piece.WHITE_BISHOP_LIGHT, Piece.WHITE_ROOK, Piece.WHITE_QUEEN,
)
PROMOTION_BLACK = (
    Piece.WHITE_OCCUPIED, Piece.WHITE_OCCUPIED, Piece.WHITE_OCCUPIED, Piece.WHITE_OCCUPIED,
    Piece.BLACK_KNIGHT, Piece.BLACK_BISHOP_LIGHT, Piece.BLACK_ROOK, Piece.BLACK_QUEEN,
)


def _rook_trapped() -> tuple[int, ...]:
    table = [0] * 64
    S = Square
    table[S.B1] = bit(S.A1) | bit(S.A2)
    table[S.C1] = bit(S.A1) | bit(S.A2) | bit(S.B1) | bit(S.B2)
    table[S.F1] = bit(S.H1) | bit(S.H2) | bit(S.G1) | bit(S.G2)
    table[S.G1] = bit(S.H1) | bit(S.H2)
    table[S.B8] = bit(S.A8) | bit(S.A7)
    table[S.C8] = bit(S.A8) | bit(S.A7) | bit(S.B8) | bit(S.B7)
    table[S.F8] = bit(S.H8) | bit(S.H7) | bit(S.G8) | bit(S.G7)
    table[S.G8] = bit(S.H8) | bit(S.H7)
    return tuple(table)


ROOK_TRAPPED = _rook_trapped()


def _trap_table(entries: dict[Square, Square]) -> tuple[int, ...]:
    table = [0] * 64
    for sq, trap in entries.items():
        table[sq] = int(trap)
    return tuple(table)


_S = Square
BISHOP_TRAP_SQ = _trap_table({
    _S.B1: _S.C2, _S.G1: _S.F2, _S.A2: _S.B3, _S.H2: _S.G3,
    _S.A3: _S.B4, _S.H3: _S.G4, _S.A6: _S.B5, _S.H6: _S.G5,
    _S.A7: _S.B6, _S.H7: _S.G6, _S.B8: _S.C7, _S.G8: _S.F7,
})
GOOD_BISHOP_TRAP_SQ = _trap_table({
    _S.B1: _S.D1, _S.G1: _S.E1, _S.A2: _S.C2, _S.H2: _S.F2,
    _S.A3: _S.C3, _S.H3: _S.F3, _S.A6: _S.C6, _S.H6: _S.F6,
    _S.A7: _S.C7, _S.H7: _S.F7, _S.B8: _S.D8, _S.G8: _S.E8,
})
del _S

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"