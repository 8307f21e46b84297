"""Attacked squares, checking pieces and x-rays through pieces next to the king."""

from __future__ import annotations

from dataclasses import dataclass, field

from .board import ALL_SQUARES, FILE_MASKS, Piece, bit, iter_bits
from .position import Position
from .tables import Tables, build_tables

_FILE_A = FILE_MASKS[0]
_FILE_H = FILE_MASKS[7]


@dataclass(frozen=True)
class AttackMap:
    """Attack information for both sides.

    ``*_king_checkers`` hold the squares of pieces giving check to that king;
    ``*_xray`` hold pieces standing between that side's sliders and the enemy
    king, and ``*_xray_sources`` map each such square to the slider behind it.
    """

    white_attacks: int
    black_attacks: int
    white_xray: int
    black_xray: int
    white_king_checkers: int
    black_king_checkers: int
    white_xray_sources: dict[int, int] = field(default_factory=dict)
    black_xray_sources: dict[int, int] = field(default_factory=dict)


def _lowest(bitboard: int) -> int:
    return (bitboard & -bitboard).bit_length() - 1


def _side(position: Position, tables: Tables, own: int, king_sq: int,
          occupied: int) -> tuple[int, int, int, dict[int, int]]:
    """Attacks, x-rays, checkers and x-ray sources of one side's pieces."""
    boards = position.bitboards
    king_bb = bit(king_sq)
    attacks = xray = checkers = 0
    sources: dict[int, int] = {}

    for sq in iter_bits(boards[own + Piece.WHITE_KNIGHT]):
        targets = tables.knight[sq]
        attacks |= targets
        if targets & king_bb:
            checkers |= bit(sq)

    bishops = boards[own + Piece.WHITE_BISHOP_LIGHT] | boards[own + Piece.WHITE_BISHOP_DARK]
    for sq in iter_bits(bishops):
        targets = tables.bishop_attacks(sq, occupied)
        attacks |= targets
        if targets & king_bb:
            checkers |= bit(sq)
        elif king_bb & tables.diag[sq]:
            through = tables.bishop_attacks(king_sq, occupied) & targets
            xray |= through
            if through:
                sources[_lowest(through)] = sq

    for sq in iter_bits(boards[own + Piece.WHITE_ROOK]):
        targets = tables.rook_attacks(sq, occupied)
        attacks |= targets
        if targets & king_bb:
            checkers |= bit(sq)
        elif king_bb & tables.ortho[sq]:
            through = tables.rook_attacks(king_sq, occupied) & targets
            xray |= through
            if through:
                sources[_lowest(through)] = sq

    for sq in iter_bits(boards[own + Piece.WHITE_QUEEN]):
        rook_part = tables.rook_attacks(sq, occupied)
        bishop_part = tables.bishop_attacks(sq, occupied)
        targets = rook_part | bishop_part
        attacks |= targets
        through = 0
        if targets & king_bb:
            checkers |= bit(sq)
        elif king_bb & tables.diag[sq]:
            through = tables.bishop_attacks(king_sq, occupied) & bishop_part
        elif king_bb & tables.ortho[sq]:
            through = tables.rook_attacks(king_sq, occupied) & rook_part
        xray |= through
        if through:
            sources[_lowest(through)] = sq

    return attacks, xray, checkers, sources


def compute_mobility(position: Position, tables: Tables | None = None) -> AttackMap:
    """Attack map of a position."""
    tables = tables if tables is not None else build_tables()
    occupied = position.occupied
    wk, bk = position.white_king, position.black_king
    white_king_bb, black_king_bb = bit(wk), bit(bk)

    white_attacks = tables.king[wk]
    black_king_checkers = bit(wk) if white_attacks & black_king_bb else 0
    black_attacks = tables.king[bk]
    white_king_checkers = bit(bk) if black_attacks & white_king_bb else 0

    w_att, white_xray, w_checks, white_sources = _side(
        position, tables, Piece.WHITE_OCCUPIED, bk, occupied)
    b_att, black_xray, b_checks, black_sources = _side(
        position, tables, Piece.BLACK_OCCUPIED, wk, occupied)
    white_attacks |= w_att
    black_attacks |= b_att
    black_king_checkers |= w_checks
    white_king_checkers |= b_checks

    white_pawns = position.bitboards[Piece.WHITE_PAWN]
    black_pawns = position.bitboards[Piece.BLACK_PAWN]

    left = ((white_pawns & ~_FILE_A) << 7) & ALL_SQUARES
    black_king_checkers |= (left & black_king_bb) >> 7
    right = ((white_pawns & ~_FILE_H) << 9) & ALL_SQUARES
    black_king_checkers |= (right & black_king_bb) >> 9
    white_attacks |= left | right

    left = (black_pawns & ~_FILE_H) >> 7
    white_king_checkers |= (left & white_king_bb) << 7
    right = (black_pawns & ~_FILE_A) >> 9
    white_king_checkers |= (right & white_king_bb) << 9
    black_attacks |= left | right

    return AttackMap(
        white_attacks=white_attacks,
        black_attacks=black_attacks,
        white_xray=white_xray,
        black_xray=black_xray,
        white_king_checkers=white_king_checkers,
        black_king_checkers=black_king_checkers,
        white_xray_sources=white_sources,
        black_xray_sources=black_sources,
    )