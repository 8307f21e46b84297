"""Material-balance table: value, scaling token and ending flags per piece count."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import IntFlag
from functools import lru_cache

MATERIAL_TABLE_SIZE = 419904

# Four interpolation lanes: opening, early middlegame, late middlegame, ending.
_PAWN = (80, 90, 110, 125)
_KNIGHT = (265, 280, 320, 355)
_BISHOP = (280, 295, 325, 360)
_ROOK = (405, 450, 550, 610)
_QUEEN = (800, 875, 1025, 1150)
_BISHOP_PAIR = (35, 40, 50, 55)
_KNIGHT_PAWN_ADJUST = (0, 2, 4, 5)
_ROOK_PAWN_ADJUST = (5, 4, 2, 0)
_ROOK_PAIR = (16, 20, 28, 32)
_MAJOR_PAIR = (8, 10, 14, 16)
_MINOR_EDGE = (20, 15, 10, 5)

_PHASE_MINOR = 1
_PHASE_ROOK = 3
_PHASE_QUEEN = 6


class EndingFlag(IntFlag):
    """Bits of a material entry's flags byte.

    Bits 2..4 hold one ending code; the multi-bit members name those codes.
    """

    NONE = 0
    BLACK_PIECES = 1
    WHITE_PIECES = 2
    QUEEN_ENDING = 4
    ROOK_ENDING = 8
    BISHOP_ENDING = 12
    OPPOSITE_BISHOP_ENDING = 16
    KNIGHT_ENDING = 20
    BISHOP_KNIGHT_ENDING = 24
    PAWN_ENDING = 28
    WHITE_MINOR_ONLY = 32
    BLACK_MINOR_ONLY = 64
    BISHOP_KNIGHT_MATE = 128


ENDING_MASK = 28


@dataclass(frozen=True)
class MaterialCounts:
    """Number of each piece kind on the board, kings excluded."""

    white_pawns: int = 0
    white_knights: int = 0
    white_light_bishops: int = 0
    white_dark_bishops: int = 0
    white_rooks: int = 0
    white_queens: int = 0
    black_pawns: int = 0
    black_knights: int = 0
    black_light_bishops: int = 0
    black_dark_bishops: int = 0
    black_rooks: int = 0
    black_queens: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} must not be negative")

    @property
    def white_bishops(self) -> int:
        return self.white_light_bishops + self.white_dark_bishops

    @property
    def black_bishops(self) -> int:
        return self.black_light_bishops + self.black_dark_bishops


@dataclass(frozen=True)
class MaterialEntry:
    """Precomputed evaluation data for one material configuration."""

    value: int
    token: int
    flags: EndingFlag


# Mixed-radix layout of a table index, least significant digit first.
_RADICES = (
    ("white_queens", 2),
    ("black_queens", 2),
    ("white_rooks", 3),
    ("black_rooks", 3),
    ("white_light_bishops", 2),
    ("white_dark_bishops", 2),
    ("black_light_bishops", 2),
    ("black_dark_bishops", 2),
    ("white_knights", 3),
    ("black_knights", 3),
    ("white_pawns", 9),
    ("black_pawns", 9),
)


def decode_index(index: int) -> MaterialCounts:
    """Piece counts encoded by a material table index."""
    if not 0 <= index < MATERIAL_TABLE_SIZE:
        raise ValueError(f"material index out of range: {index}")
    values = {}
    for name, radix in _RADICES:
        index, values[name] = divmod(index, radix)
    return MaterialCounts(**values)


def encode_index(counts: MaterialCounts) -> int:
    """Material table index of the given piece counts."""
    index = 0
    for name, radix in reversed(_RADICES):
        count = getattr(counts, name)
        if count >= radix:
            raise ValueError(f"{name}={count} exceeds the table limit of {radix - 1}")
        index = index * radix + count
    return index


@dataclass(frozen=True)
class _Side:
    pawns: int
    knights: int
    light: int
    dark: int
    rooks: int
    queens: int

    @property
    def bishops(self) -> int:
        return self.light + self.dark

    @property
    def minors(self) -> int:
        return self.bishops + self.knights

    @property
    def phase(self) -> int:
        return self.minors + 2 * self.rooks + 4 * self.queens

    @property
    def worth(self) -> int:
        return 3 * self.minors + 5 * self.rooks + 9 * self.queens


def _white(c: MaterialCounts) -> _Side:
    return _Side(c.white_pawns, c.white_knights, c.white_light_bishops,
                 c.white_dark_bishops, c.white_rooks, c.white_queens)


def _black(c: MaterialCounts) -> _Side:
    return _Side(c.black_pawns, c.black_knights, c.black_light_bishops,
                 c.black_dark_bishops, c.black_rooks, c.black_queens)


def _weight(me: _Side, opp: _Side, pair_pawns: int) -> int:
    """Scaling weight (out of 10) for ``me`` when it is ahead."""
    pm, po = me.phase, opp.phase
    weight = 10

    if not me.pawns:
        if pm == 1:
            weight = 0
        if pm == 2:
            if po == 0 and me.knights == 2:
                weight = 3 if pair_pawns >= 1 else 0
            if po == 1:
                weight = 1
                if me.bishops == 2 and opp.knights == 1:
                    weight = 8
                if me.rooks == 1 and opp.knights == 1:
                    weight = 2
            if po == 2:
                weight = 1
        if pm == 3 and me.rooks == 1:
            if po == 2 and opp.rooks == 1:
                if me.knights == 1:
                    weight = 1
                if me.bishops == 1:
                    weight = 1
            if po == 2 and opp.rooks == 0:
                weight = 2
                if me.bishops == 1 and opp.knights == 2:
                    weight = 6
                if opp.knights == 1 and (me.light == 1 and opp.light == 1
                                         or me.dark == 1 and opp.dark == 1):
                    weight = 2
                if opp.knights == 1 and (me.dark == 1 and opp.light == 1
                                         or me.light == 1 and opp.dark == 1):
                    weight = 7
            if po == 3:
                weight = 2
        if pm == 3 and me.rooks == 0:
            if po == 2 and opp.rooks == 1:
                if me.knights == 2:
                    weight = 2
                if me.bishops == 2:
                    weight = 7
            if po == 2 and opp.rooks == 0:
                weight = 2
                if me.bishops == 2 and opp.knights == 2:
                    weight = 4
            if po == 3:
                weight = 2
        if pm == 4 and me.queens:
            if po == 2 and opp.knights == 2:
                weight = 2
            if po == 2 and opp.knights == 1:
                weight = 8
            if po == 2 and opp.knights == 0:
                weight = 7
            if po in (3, 4):
                weight = 1
        if pm == 4 and me.rooks == 2:
            if po == 2 and opp.rooks == 0:
                weight = 7
            if po == 3:
                weight = 2
            if po == 4:
                weight = 1
        if pm == 4 and me.rooks == 1:
            if po == 3 and opp.rooks == 1:
                weight = 3
            if po == 3 and opp.rooks == 0:
                weight = 2
            if po == 4:
                weight = 2
        if pm == 4 and me.rooks == 0 and me.queens == 0:
            if po == 3 and opp.rooks == 1:
                weight = 4
            if po == 3 and opp.rooks == 0:
                weight = 2
            if po == 4 and opp.queens:
                weight = 8
            if po == 4 and opp.queens == 0:
                weight = 1
        if pm == 5 and me.queens:
            if po == 4:
                weight = 2
            if po == 5:
                weight = 1
            if po == 4 and opp.rooks == 2:
                if me.knights:
                    weight = 3
                if me.bishops:
                    weight = 7
        if pm == 5 and me.rooks == 1:
            if po == 4 and opp.queens:
                weight = 9
            if po == 4 and opp.rooks == 2:
                weight = 7
            if po == 4 and opp.rooks == 1:
                weight = 3
            if po == 4 and opp.queens == 0 and opp.rooks == 0:
                weight = 1
            if po == 5:
                weight = 2
        if pm == 5 and me.rooks == 2:
            if po == 4 and opp.queens and me.bishops == 1:
                weight = 8
            if po == 4 and opp.queens and me.knights == 1:
                weight = 7
            if po == 4 and opp.rooks == 2:
                weight = 3
            if po == 4 and opp.rooks == 1:
                weight = 2
            if po == 4 and opp.queens == 0 and opp.rooks == 0:
                weight = 1
            if po == 5:
                weight = 1
        if pm == 6 and me.queens and me.rooks:
            if po == 4 and opp.queens == 0 and opp.rooks == 0:
                weight = 2
            if po == 5 and opp.queens:
                weight = 1
            if po == 4 and opp.rooks == 1:
                weight = 6
            if po == 4 and opp.rooks == 2:
                weight = 3
            if po == 5 and opp.rooks:
                weight = 1
            if po == 6:
                weight = 1
        if pm == 6 and me.queens and me.rooks == 0:
            if po == 4 and opp.queens == 0 and opp.rooks == 0:
                weight = 5
            if po == 5 and opp.queens:
                weight = 2
            if po == 5 and opp.rooks == 2:
                weight = 2
            if po == 5 and opp.rooks == 1:
                weight = 1
            if po == 6:
                weight = 1
        if pm == 6 and me.queens == 0 and me.rooks == 2:
            if po == 5 and opp.queens:
                weight = 7
            if po == 5 and opp.rooks == 1:
                weight = 1
            if po == 5 and opp.rooks == 2:
                weight = 2
            if po == 6:
                weight = 1
        if pm == 6 and me.queens == 0 and me.rooks == 1:
            if po == 5 and opp.queens:
                weight = 9
            if po == 5 and opp.rooks == 2:
                weight = 3
            if po == 5 and opp.rooks == 1:
                weight = 2
            if po == 6:
                weight = 1
            if po == 6 and opp.queens:
                weight = 2
            if po == 6 and opp.queens and opp.rooks:
                weight = 4
        if pm >= 7:
            diff = me.worth - opp.worth
            if diff > 4:
                weight = 9
            elif diff == 4:
                weight = 7
            elif diff == 3:
                weight = 4
            elif diff == 2:
                weight = 2
            else:
                weight = 1

    if me.pawns == 1:
        if po == 1:
            if pm == 1:
                weight = 3
            if pm == 2 and me.knights == 2:
                weight = 3 if opp.pawns == 0 else 5
            if pm == 2 and me.rooks == 1:
                weight = 7
        if po == 2 and opp.rooks == 1 and pm == 2 and me.rooks == 1:
            weight = 8
        if po == 2 and opp.rooks == 0 and pm == 2:
            weight = 4
        if po >= 3 and opp.minors > 0 and pm == po:
            weight = 3
        if po >= 3 and opp.minors == 0 and pm == po:
            weight = 5
        if po == 4 and opp.queens == 1 and pm == po:
            weight = 7
    return weight


def white_weight(counts: MaterialCounts) -> int:
    """Weight, out of 10, applied to a balance in White's favour."""
    return _weight(_white(counts), _black(counts), counts.black_pawns)


def black_weight(counts: MaterialCounts) -> int:
    """Weight, out of 10, applied to a balance in Black's favour."""
    # Black's knight-pair rule looks at its own pawns, which are absent there.
    return _weight(_black(counts), _white(counts), counts.black_pawns)


def _tdiv(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def _lanes(w: _Side, b: _Side) -> tuple[int, ...]:
    terms = [
        (w.bishops // 2 - b.bishops // 2, _BISHOP_PAIR),
        (w.pawns - b.pawns, _PAWN),
        (w.knights - b.knights, _KNIGHT),
        (w.rooks - b.rooks, _ROOK),
        (w.queens - b.queens, _QUEEN),
        (w.bishops - b.bishops, _BISHOP),
        (-(w.rooks == 2) + (b.rooks == 2), _ROOK_PAIR),
        (-(w.queens + w.rooks >= 2) + (b.queens + b.rooks >= 2), _MAJOR_PAIR),
        ((w.minors > b.minors) - (b.minors > w.minors), _MINOR_EDGE),
        (-(w.pawns - 5) * w.rooks + (b.pawns - 5) * b.rooks, _ROOK_PAWN_ADJUST),
        ((w.pawns - 5) * w.knights - (b.pawns - 5) * b.knights, _KNIGHT_PAWN_ADJUST),
    ]
    return tuple(sum(coef * vector[lane] for coef, vector in terms) for lane in range(4))


def _balance(w: _Side, b: _Side) -> int:
    opening, early, late, ending = _lanes(w, b)
    phase = (_PHASE_MINOR * (w.minors + b.minors) + _PHASE_ROOK * (w.rooks + b.rooks)
             + _PHASE_QUEEN * (w.queens + b.queens))
    if phase < 8:
        return _tdiv(late * phase + ending * (8 - phase), 8)
    if phase < 24:
        return _tdiv(early * (phase - 8) + late * (24 - phase), 16)
    return _tdiv(opening * (phase - 24) + early * (32 - phase), 8)


def _opposite_bishops(w: _Side, b: _Side) -> bool:
    return (w.light == 1 and w.dark == 0 and b.light == 0 and b.dark == 1
            or w.light == 0 and w.dark == 1 and b.light == 1 and b.dark == 0)


def _token(w: _Side, b: _Side) -> int:
    pawns = max(w.pawns, b.pawns)
    no_minors = w.knights == b.knights == 0 and w.bishops == b.bishops == 0
    no_rooks = w.rooks == b.rooks == 0
    no_queens = w.queens == b.queens == 0
    token = 0x80
    if no_minors and no_rooks and w.queens == 1 and b.queens == 1:
        token = 0x70 + pawns
    if no_minors and no_queens and w.rooks == 1 and b.rooks == 1:
        token = 0x60 + 2 * pawns
    if (w.knights == b.knights == 0 and no_rooks and no_queens
            and w.bishops == 1 and b.bishops == 1):
        token = 0x30 + 4 * pawns if _opposite_bishops(w, b) else 0x78 + 2 * pawns
    if (w.knights == 1 and b.knights == 1 and no_rooks and no_queens
            and w.bishops == b.bishops == 0):
        token = 0x80 + pawns
    if no_minors and no_rooks and no_queens:
        token = 0xC0 - 8 * pawns
    if (w.knights == b.knights == 0 and w.bishops == 1 and b.bishops == 1
            and w.rooks == 1 and b.rooks == 1 and no_queens and _opposite_bishops(w, b)):
        token = 0x70 + pawns
    return token


def _flags(w: _Side, b: _Side) -> EndingFlag:
    F = EndingFlag
    flags = (F.WHITE_PIECES if w.knights or w.bishops or w.queens or w.rooks else F.NONE)
    if b.knights or b.bishops or b.queens or b.rooks:
        flags |= F.BLACK_PIECES
    few_pawns = w.pawns <= 4 and b.pawns <= 4
    if not w.queens and not w.rooks and w.minors == 1 and few_pawns:
        flags &= F.BLACK_PIECES
    if not b.queens and not b.rooks and b.minors == 1 and few_pawns:
        flags &= F.WHITE_PIECES

    only_q = w.rooks == b.rooks == 0 and w.bishops == b.bishops == 0
    only_q = only_q and w.knights == b.knights == 0
    if w.queens == 1 and b.queens == 1 and only_q:
        flags |= F.QUEEN_ENDING
    no_q = not w.queens and not b.queens
    if (w.rooks == 1 and b.rooks == 1 and no_q and not w.bishops and not b.bishops
            and not w.knights and not b.knights):
        flags |= F.ROOK_ENDING
    if (w.bishops == 1 and b.bishops == 1 and no_q and not w.rooks and not b.rooks
            and not w.knights and not b.knights):
        if w.light == 1 and b.dark == 1 or w.dark == 1 and b.light == 1:
            flags |= F.BISHOP_ENDING
        else:
            flags |= F.OPPOSITE_BISHOP_ENDING
        flags |= F.WHITE_MINOR_ONLY | F.BLACK_MINOR_ONLY
    if (w.knights == 1 and b.knights == 1 and no_q and not w.rooks and not b.rooks
            and not w.bishops and not b.bishops):
        flags |= F.KNIGHT_ENDING
    if (w.knights == 1 and b.bishops == 1 and no_q and not w.rooks and not b.rooks
            and not w.bishops and not b.knights):
        flags |= F.BISHOP_KNIGHT_ENDING
    if (w.bishops == 1 and b.knights == 1 and no_q and not w.rooks and not b.rooks
            and not b.bishops and not w.knights):
        flags |= F.BISHOP_KNIGHT_ENDING
    if w.bishops == 1 and not w.queens and not w.rooks and not w.knights:
        flags |= F.WHITE_MINOR_ONLY
    if b.bishops == 1 and not b.queens and not b.rooks and not b.knights:
        flags |= F.BLACK_MINOR_ONLY
    if w.knights == 1 and not w.queens and not w.rooks and not w.bishops:
        flags |= F.WHITE_MINOR_ONLY
    if b.knights == 1 and not b.queens and not b.rooks and not b.bishops:
        flags |= F.BLACK_MINOR_ONLY
    if w.phase == 0 and b.phase == 0 and w.pawns + b.pawns == 1:
        flags |= F.PAWN_ENDING
    if (w.knights == 1 and w.bishops == 1 and not w.rooks and not w.queens and not w.pawns
            and b.phase == 0 and not b.pawns):
        flags |= F.BISHOP_KNIGHT_MATE
    if (b.knights == 1 and b.bishops == 1 and not b.rooks and not b.queens and not b.pawns
            and w.phase == 0 and not w.pawns):
        flags |= F.BISHOP_KNIGHT_MATE
    return EndingFlag(flags)


def _entry(counts: MaterialCounts) -> MaterialEntry:
    w, b = _white(counts), _black(counts)
    value = _balance(w, b)
    weight = white_weight(counts) if value > 0 else black_weight(counts)
    return MaterialEntry(_tdiv(value * weight, 10), _token(w, b), _flags(w, b))


def material_entry(index: int) -> MaterialEntry:
    """Value, token and flags for one material table index."""
    return _entry(decode_index(index))


@lru_cache(maxsize=1)
def build_material_table() -> tuple[MaterialEntry, ...]:
    """Entries for every index in order; computed once."""
    return tuple(material_entry(index) for index in range(MATERIAL_TABLE_SIZE))