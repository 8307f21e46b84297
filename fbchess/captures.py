"""Move-ordering scores for captures and quiet moves, by mover and victim."""

from __future__ import annotations

from .board import Piece

_PAWN, _KNIGHT, _KING, _BISHOP_L, _BISHOP_D, _ROOK, _QUEEN = 1, 2, 3, 4, 5, 6, 7

_KINDS = {
    "pawn": (_PAWN,),
    "knight": (_KNIGHT,),
    "bishop": (_BISHOP_L, _BISHOP_D),
    "rook": (_ROOK,),
    "queen": (_QUEEN,),
    "king": (_KING,),
}
_ATTACKER_ORDER = ("pawn", "knight", "bishop", "rook", "queen", "king")

# Victim kind -> (top byte, bonus) per attacker in _ATTACKER_ORDER.
_CAPTURE_ROWS = {
    "queen": ((0xD0, 2), (0xCF, 2), (0xCE, 2), (0xCD, 2), (0xCC, 1), (0xCB, 0)),
    "rook": ((0xC8, 2), (0xC7, 2), (0xC6, 2), (0xC5, 1), (0xC4, 0), (0xC3, 0)),
    "bishop": ((0xC0, 2), (0xBF, 1), (0xBE, 1), (0xBD, 0), (0xBC, 0), (0xBB, 0)),
    "knight": ((0xB8, 2), (0xB7, 1), (0xB6, 1), (0xB5, 0), (0xB4, 0), (0xB3, 0)),
    "pawn": ((0xB0, 1), (0xAF, 0), (0xAE, 0), (0xAD, 0), (0xAC, 0), (0xAB, 0)),
}
# Quiet moves: (top byte, bonus) per attacker in _ATTACKER_ORDER.
_QUIET_ROW = ((0x06, 1), (0x05, 1), (0x04, 1), (0x03, 1), (0x02, 1), (0x07, 0))


def _build() -> tuple[tuple[int, ...], ...]:
    table = [[0] * 16 for _ in range(16)]
    for own, opp in ((0, 8), (8, 0)):
        for name, (top, bonus) in zip(_ATTACKER_ORDER, _QUIET_ROW):
            for attacker in _KINDS[name]:
                table[own + attacker][0] = (top << 24) + (bonus << 15)
        for victim_name, row in _CAPTURE_ROWS.items():
            for attacker_name, (top, bonus) in zip(_ATTACKER_ORDER, row):
                for attacker in _KINDS[attacker_name]:
                    for victim in _KINDS[victim_name]:
                        table[own + attacker][opp + victim] = (top << 24) + (bonus << 20)
    return tuple(tuple(row) for row in table)


_TABLE = _build()


def capture_value(attacker: int, victim: int) -> int:
    """Ordering score of a move by ``attacker`` onto a square holding ``victim``.

    A victim of 0 denotes an empty square. Unlisted pairings score 0.
    """
    for piece in (attacker, victim):
        if not 0 <= piece < 16:
            raise ValueError(f"piece code out of range: {piece}")
    return _TABLE[Piece(attacker)][Piece(victim)]


def capture_table() -> tuple[tuple[int, ...], ...]:
    """The whole 16 x 16 score table, indexed [attacker][victim]."""
    return _TABLE