"""Precomputed bitboard tables: piece attacks, pawn structure masks and lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from functools import lru_cache

from .board import (
    ALL_SQUARES,
    FILE_MASKS,
    KNIGHT_HOPS,
    LEFT45,
    LEFT90,
    RANK_MASKS,
    RIGHT45,
    SHIFT,
    START_FEN,
    bit,
    iter_bits,
)

Bitboards = tuple[int, ...]
BitboardGrid = tuple[tuple[int, ...], ...]

BENCHMARK_POSITIONS = (
    START_FEN,
    "rnbqkb1r/pppp1ppp/4pn2/8/2PP4/2N5/PP2PPPP/R1BQKBNR b KQkq - 1 3",
    "rnbqkb1r/pp2pppp/1n1p4/8/2PP4/8/PP3PPP/RNBQKBNR w KQkq - 0 6",
    "r1bq1rk1/pppp1ppp/5n2/4n3/2P5/1PN3P1/P2PPKBP/R1BQ3R b - - 0 8",
    "r4rk1/ppqbbppp/2nppn2/8/4PP2/1NN1B3/PPP1B1PP/R2Q1RK1 w - - 1 11",
    "r2q1rk1/1pp2ppp/p1pbb3/4P3/4NB2/8/PPP2PPP/R2QR1K1 b - - 0 13",
    "r4rk1/3np1bp/pq1p2p1/2pP3n/6P1/2N1Bp2/PPQ1BPP1/R4RK1 w - - 0 16",
    "rnb2r2/p1p2pk1/1p1pqn1p/P7/Q1PPp1pP/2P3P1/4PPB1/1RB1K1NR b K - 3 18",
    "4rk1r/1b2pNbp/pq2Bn1p/1ppP4/P1p2Q2/2N4P/1P3PP1/R3K2R w KQ - 8 21",
    "r3r1k1/2p1np1p/1p2p1pB/p1q1P3/P1P1Q3/3R3P/1P3PP1/5RK1 b - - 2 23",
    "r2q1r1k/6np/1p1p1pp1/pNpPn3/P1P1P1P1/1PB1Q2P/5R2/5R1K w - - 0 26",
    "2kn4/ppN1R3/3p4/6rp/2NP3n/2P5/PP5r/4KR2 b - - 4 28",
    "r1br2k1/pp4p1/4p1Bp/4P3/2Rp3N/4n1P1/PP2P2P/R5K1 w - - 8 31",
    "6k1/1p3pp1/p2p4/3P1P2/P1Bpn3/1P2q3/2P4P/5Q1K b - - 0 33",
    "4q3/r4pkp/1p1P4/2n1P1p1/2Q2b2/7P/2R1B1P1/5R1K w - - 0 36",
    "3rr1k1/p4pbp/2bN1p2/8/2B3P1/2P3Bn/P2N4/3R1K2 b - - 1 38",
)


class Direction(IntEnum):
    """Line joining two squares."""

    NONE = -1
    HORIZONTAL = 0
    VERTICAL = 1
    A1H8 = 2
    H1A8 = 3


def _file(sq: int) -> int:
    return sq & 7


def _rank(sq: int) -> int:
    return sq >> 3


def _distance(a: int, b: int) -> int:
    return max(abs(_file(a) - _file(b)), abs(_rank(a) - _rank(b)))


def _check(sq: int) -> int:
    if not 0 <= sq < 64:
        raise ValueError(f"square out of range: {sq}")
    return sq


def _inverse(mapping: tuple[int, ...]) -> tuple[int, ...]:
    inverse = [0] * 64
    for sq, rotated in enumerate(mapping):
        inverse[rotated] = sq
    return tuple(inverse)


def _remap(bitboard: int, mapping: tuple[int, ...]) -> int:
    result = 0
    for sq in iter_bits(bitboard):
        result |= 1 << mapping[sq]
    return result


def _slide(occupancy: int, pos: int, length: int) -> int:
    """Ray bits both ways from ``pos`` inside a line of ``length``, stopping at blockers."""
    ray = 0
    s = pos + 1
    while s < length:
        ray |= 1 << s
        if occupancy >> s & 1:
            break
        s += 1
    s = pos - 1
    while s >= 0:
        ray |= 1 << s
        if occupancy >> s & 1:
            break
        s -= 1
    return ray


def _ray(sq: int, df: int, dr: int) -> int:
    result = 0
    f, r = _file(sq) + df, _rank(sq) + dr
    while 0 <= f < 8 and 0 <= r < 8:
        result |= bit(8 * r + f)
        f += df
        r += dr
    return result


_LEFT09 = _inverse(LEFT90)
_LEFT54 = _inverse(LEFT45)
_RIGHT54 = _inverse(RIGHT45)


def _diagonal_layout() -> tuple[tuple[int, ...], tuple[int, ...]]:
    length: list[int] = []
    where: list[int] = []
    for size in [*range(1, 9), *range(7, 0, -1)]:
        for j in range(size):
            length.append(size)
            where.append(j)
    return tuple(length), tuple(where)


_LENGTH, _WHERE = _diagonal_layout()


@dataclass(frozen=True)
class Tables:
    """All precomputed square and bitboard tables."""

    knight: Bitboards
    king: Bitboards
    pawn_white: Bitboards
    pawn_black: Bitboards
    ortho: Bitboards
    diag: Bitboards
    ortho_diag: Bitboards
    non_ortho: Bitboards
    non_diag: Bitboards
    isolated_files: Bitboards
    isolated_pawn_white: Bitboards
    isolated_pawn_black: Bitboards
    connected_pawns: Bitboards
    in_front_white: Bitboards
    in_front_black: Bitboards
    not_in_front_white: Bitboards
    not_in_front_black: Bitboards
    passed_pawn_white: Bitboards
    passed_pawn_black: Bitboards
    protected_pawn_white: Bitboards
    protected_pawn_black: Bitboards
    left1: Bitboards
    right1: Bitboards
    left2: Bitboards
    right2: Bitboards
    adjacent: Bitboards
    long_diag: Bitboards
    open_file_white: Bitboards
    open_file_black: Bitboards
    doubled: Bitboards
    quadrant_wk_wtm: Bitboards
    quadrant_wk_btm: Bitboards
    quadrant_bk_wtm: Bitboards
    quadrant_bk_btm: Bitboards
    shepherd_wk: Bitboards
    shepherd_bk: Bitboards
    north_west: Bitboards
    north_east: Bitboards
    south_west: Bitboards
    south_east: Bitboards
    files_left: Bitboards
    files_right: Bitboards
    evade: BitboardGrid
    interpose: BitboardGrid
    line: tuple[tuple[Direction, ...], ...]
    rank_lookup: BitboardGrid = field(repr=False, compare=False)
    file_lookup: BitboardGrid = field(repr=False, compare=False)
    a1h8_lookup: BitboardGrid = field(repr=False, compare=False)
    h1a8_lookup: BitboardGrid = field(repr=False, compare=False)

    def rook_attacks(self, sq: int, occupied: int) -> int:
        """Squares a rook on ``sq`` attacks given the occupied squares."""
        _check(sq)
        rank_index = (occupied >> (1 + (sq & 56))) & 63
        rotated = _remap(occupied, LEFT90)
        file_index = (rotated >> (1 + (LEFT90[sq] & 56))) & 63
        return self.rank_lookup[sq][rank_index] | self.file_lookup[sq][file_index]

    def bishop_attacks(self, sq: int, occupied: int) -> int:
        """Squares a bishop on ``sq`` attacks given the occupied squares."""
        _check(sq)
        right = (_remap(occupied, RIGHT45) >> SHIFT[RIGHT45[sq]]) & 63
        left = (_remap(occupied, LEFT45) >> SHIFT[LEFT45[sq]]) & 63
        return self.a1h8_lookup[sq][right] | self.h1a8_lookup[sq][left]

    def queen_attacks(self, sq: int, occupied: int) -> int:
        """Squares a queen on ``sq`` attacks given the occupied squares."""
        return self.rook_attacks(sq, occupied) | self.bishop_attacks(sq, occupied)


def _knight(sq: int) -> int:
    result = 0
    for hop in KNIGHT_HOPS:
        target = sq + hop
        if 0 <= target < 64 and abs(_file(sq) - _file(target)) <= 2 \
                and abs(_rank(sq) - _rank(target)) <= 2:
            result |= bit(target)
    return result


def _king(sq: int) -> int:
    return sum(bit(j) for j in range(64) if _distance(sq, j) == 1)


def _pawn_white(sq: int) -> int:
    if _rank(sq) == 0:
        return 0
    return (bit(sq - 9) if _file(sq) > 0 else 0) | (bit(sq - 7) if _file(sq) < 7 else 0)


def _pawn_black(sq: int) -> int:
    if _rank(sq) == 7:
        return 0
    return (bit(sq + 7) if _file(sq) > 0 else 0) | (bit(sq + 9) if _file(sq) < 7 else 0)


def _isolated_files(f: int) -> int:
    return (FILE_MASKS[f - 1] if f > 0 else 0) | (FILE_MASKS[f + 1] if f < 7 else 0)


def _sliding_lookups() -> tuple[BitboardGrid, BitboardGrid, BitboardGrid, BitboardGrid]:
    rank_lookup = tuple(
        tuple(_slide(idx << 1, _file(sq), 8) << (8 * _rank(sq)) for idx in range(64))
        for sq in range(64)
    )
    file_lookup = tuple(
        tuple(_remap(rank_lookup[LEFT90[sq]][idx], _LEFT09) for idx in range(64))
        for sq in range(64)
    )

    def diagonal(inverse: tuple[int, ...]) -> BitboardGrid:
        grid = [[0] * 64 for _ in range(64)]
        for rotated in range(64):
            w, length = _WHERE[rotated], _LENGTH[rotated]
            for idx in range(64):
                ray = _slide(idx << 1, w, length) << (rotated - w)
                grid[inverse[rotated]][idx] = _remap(ray, inverse)
        return tuple(tuple(row) for row in grid)

    return rank_lookup, file_lookup, diagonal(_RIGHT54), diagonal(_LEFT54)


def _evade(king_att: Bitboards, k: int, s: int) -> int:
    result = king_att[k]
    kf, kr, sf, sr = _file(k), _rank(k), _file(s), _rank(s)
    if kr == sr:
        if kf != 0:
            result ^= bit(k - 1)
        if kf != 7:
            result ^= bit(k + 1)
    if kf == sf:
        if kr != 0:
            result ^= bit(k - 8)
        if kr != 7:
            result ^= bit(k + 8)
    if kr - sr == kf - sf:
        if kr != 7 and kf != 7:
            result ^= bit(k + 9)
        if kr != 0 and kf != 0:
            result ^= bit(k - 9)
    if kr - sr == sf - kf:
        if kr != 7 and kf != 0:
            result ^= bit(k + 7)
        if kr != 0 and kf != 7:
            result ^= bit(k - 7)
    if king_att[k] & bit(s):
        result |= bit(s)
    return result


def _interpose(k: int, s: int) -> int:
    result = bit(s)
    step = 0
    kf, kr, sf, sr = _file(k), _rank(k), _file(s), _rank(s)
    if kr == sr:
        step = 1 if k > s else -1
    if kf == sf:
        step = 8 if k > s else -8
    if kr - sr == kf - sf:
        step = 9 if k > s else -9
    if kr - sr == sf - kf:
        step = 7 if k > s else -7
    if step:
        i = s
        while i != k:
            result |= bit(i)
            i += step
    return result


def _line(i: int, j: int) -> Direction:
    if i == j:
        return Direction.NONE
    direction = Direction.NONE
    if _rank(i) == _rank(j):
        direction = Direction.HORIZONTAL
    if _file(i) == _file(j):
        direction = Direction.VERTICAL
    if _file(i) - _file(j) == _rank(i) - _rank(j):
        direction = Direction.A1H8
    if _file(j) - _file(i) == _rank(i) - _rank(j):
        direction = Direction.H1A8
    return direction


def _quadrants() -> tuple[Bitboards, Bitboards, Bitboards, Bitboards]:
    wk_wtm, wk_btm, bk_wtm, bk_btm = ([0] * 64 for _ in range(4))
    for sq in range(64):
        promo = _file(sq) + 56
        origin = sq + 8 if _rank(sq) == 1 else sq
        for i in range(64):
            if _distance(origin, promo) < _distance(promo, i) - 1:
                bk_btm[sq] |= bit(i)
            if _distance(origin, promo) < _distance(promo, i):
                bk_wtm[sq] |= bit(i)
        promo = _file(sq)
        origin = sq - 8 if _rank(sq) == 6 else sq
        for i in range(64):
            if _distance(origin, promo) < _distance(promo, i) - 1:
                wk_wtm[sq] |= bit(i)
            if _distance(origin, promo) < _distance(promo, i):
                wk_btm[sq] |= bit(i)
    return tuple(wk_wtm), tuple(wk_btm), tuple(bk_wtm), tuple(bk_btm)


def _shepherds() -> tuple[Bitboards, Bitboards]:
    white, black = [0] * 64, [0] * 64
    for sq in range(64):
        f, r = _file(sq), _rank(sq)
        area = _isolated_files(f) if f in (0, 7) else _isolated_files(f) | FILE_MASKS[f]
        if r >= 5:
            white[sq] |= area & RANK_MASKS[7]
        if r >= 4:
            white[sq] |= area & RANK_MASKS[6]
        if r <= 2:
            black[sq] |= area & RANK_MASKS[0]
        if r <= 3:
            black[sq] |= area & RANK_MASKS[1]
    return tuple(white), tuple(black)


@lru_cache(maxsize=None)
def build_tables() -> Tables:
    """Compute every table once; later calls return the same object."""
    squares = range(64)
    king = tuple(_king(sq) for sq in squares)
    isolated_files = tuple(_isolated_files(f) for f in range(8))
    in_front_white = tuple(
        sum(RANK_MASKS[j] for j in range(r + 1, 8)) for r in range(8)
    )
    in_front_black = tuple(sum(RANK_MASKS[j] for j in range(r)) for r in range(8))
    not_in_front_white = tuple(ALL_SQUARES ^ m for m in in_front_white)
    not_in_front_black = tuple(ALL_SQUARES ^ m for m in in_front_black)

    def isolated_pawn(sq: int, forward: int) -> int:
        r, files = _rank(sq), isolated_files[_file(sq)]
        result = 0
        for step in (1, 2):
            target = r + forward * step
            if 0 <= target < 8:
                result |= files & RANK_MASKS[target]
        return result

    isolated_white = tuple(isolated_pawn(sq, 1) for sq in squares)
    isolated_black = tuple(isolated_pawn(sq, -1) for sq in squares)
    connected = tuple(
        isolated_white[sq] | isolated_black[sq]
        | (RANK_MASKS[_rank(sq)] & isolated_files[_file(sq)])
        for sq in squares
    )
    ortho = tuple(
        (RANK_MASKS[_rank(sq)] | FILE_MASKS[_file(sq)]) & ~bit(sq) for sq in squares
    )
    diag = tuple(
        _ray(sq, 1, 1) | _ray(sq, 1, -1) | _ray(sq, -1, 1) | _ray(sq, -1, -1)
        for sq in squares
    )
    left1 = tuple(bit(sq - 1) if _file(sq) >= 1 else 0 for sq in squares)
    right1 = tuple(bit(sq + 1) if _file(sq) <= 6 else 0 for sq in squares)
    quadrants = _quadrants()
    shepherd_wk, shepherd_bk = _shepherds()
    rank_lookup, file_lookup, a1h8_lookup, h1a8_lookup = _sliding_lookups()

    return Tables(
        knight=tuple(_knight(sq) for sq in squares),
        king=king,
        pawn_white=tuple(_pawn_white(sq) for sq in squares),
        pawn_black=tuple(_pawn_black(sq) for sq in squares),
        ortho=ortho,
        diag=diag,
        ortho_diag=tuple(o | d for o, d in zip(ortho, diag)),
        non_ortho=tuple(ALL_SQUARES ^ o for o in ortho),
        non_diag=tuple(ALL_SQUARES ^ d for d in diag),
        isolated_files=isolated_files,
        isolated_pawn_white=isolated_white,
        isolated_pawn_black=isolated_black,
        connected_pawns=connected,
        in_front_white=in_front_white,
        in_front_black=in_front_black,
        not_in_front_white=not_in_front_white,
        not_in_front_black=not_in_front_black,
        passed_pawn_white=tuple(
            (isolated_files[_file(sq)] | FILE_MASKS[_file(sq)]) & in_front_white[_rank(sq)]
            for sq in squares
        ),
        passed_pawn_black=tuple(
            (isolated_files[_file(sq)] | FILE_MASKS[_file(sq)]) & in_front_black[_rank(sq)]
            for sq in squares
        ),
        protected_pawn_white=tuple(
            isolated_files[_file(sq)] & not_in_front_white[_rank(sq)] for sq in squares
        ),
        protected_pawn_black=tuple(
            isolated_files[_file(sq)] & not_in_front_black[_rank(sq)] for sq in squares
        ),
        left1=left1,
        right1=right1,
        left2=tuple(bit(sq - 2) if _file(sq) >= 2 else 0 for sq in squares),
        right2=tuple(bit(sq + 2) if _file(sq) <= 5 else 0 for sq in squares),
        adjacent=tuple(a | b for a, b in zip(left1, right1)),
        long_diag=tuple(
            _ray(sq, 1, 1) | _ray(sq, 1, -1) if _file(sq) <= 3
            else _ray(sq, -1, 1) | _ray(sq, -1, -1)
            for sq in squares
        ),
        open_file_white=tuple(
            FILE_MASKS[_file(sq)] & in_front_white[_rank(sq)] for sq in squares
        ),
        open_file_black=tuple(
            FILE_MASKS[_file(sq)] & in_front_black[_rank(sq)] for sq in squares
        ),
        doubled=tuple(FILE_MASKS[_file(sq)] ^ bit(sq) for sq in squares),
        quadrant_wk_wtm=quadrants[0],
        quadrant_wk_btm=quadrants[1],
        quadrant_bk_wtm=quadrants[2],
        quadrant_bk_btm=quadrants[3],
        shepherd_wk=shepherd_wk,
        shepherd_bk=shepherd_bk,
        north_west=tuple(
            bit(sq + 7) if _rank(sq) != 7 and _file(sq) != 0 else 0 for sq in squares
        ),
        north_east=tuple(
            bit(sq + 9) if _rank(sq) != 7 and _file(sq) != 7 else 0 for sq in squares
        ),
        south_west=tuple(
            bit(sq - 9) if _rank(sq) != 0 and _file(sq) != 0 else 0 for sq in squares
        ),
        south_east=tuple(
            bit(sq - 7) if _rank(sq) != 0 and _file(sq) != 7 else 0 for sq in squares
        ),
        files_left=tuple(sum(FILE_MASKS[i] for i in range(f)) for f in range(8)),
        files_right=tuple(sum(FILE_MASKS[i] for i in range(f + 1, 8)) for f in range(8)),
        evade=tuple(tuple(_evade(king, k, s) for s in squares) for k in squares),
        interpose=tuple(tuple(_interpose(k, s) for s in squares) for k in squares),
        line=tuple(tuple(_line(i, j) for j in squares) for i in squares),
        rank_lookup=rank_lookup,
        file_lookup=file_lookup,
        a1h8_lookup=a1h8_lookup,
        h1a8_lookup=h1a8_lookup,
    )