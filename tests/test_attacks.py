import pytest

from fbchess.attacks import compute_mobility
from fbchess.board import RANK_MASKS, START_FEN, Square, bit
from fbchess.position import Position
from fbchess.tables import build_tables
from fbchess.zobrist import generate_keys


@pytest.fixture(scope="module")
def tables():
    return build_tables()


@pytest.fixture(scope="module")
def keys():
    return generate_keys()


def mirror(bitboard):
    return int.from_bytes(bitboard.to_bytes(8, "big"), "little")


def attacks_of(text, keys, tables):
    return compute_mobility(Position.from_fen(text, keys), tables)


def test_start_position_covers_third_ranks(keys, tables):
    result = attacks_of(START_FEN, keys, tables)
    assert result.white_attacks & RANK_MASKS[2] == RANK_MASKS[2]
    assert result.black_attacks & RANK_MASKS[5] == RANK_MASKS[5]
    assert result.white_attacks & RANK_MASKS[3] == 0
    assert result.white_king_checkers == 0 and result.black_king_checkers == 0
    assert result.white_xray == 0 and result.black_xray == 0


def test_start_position_is_symmetric(keys, tables):
    result = attacks_of(START_FEN, keys, tables)
    assert result.black_attacks == mirror(result.white_attacks)


def test_king_zones_always_attacked(keys, tables):
    pos = Position.from_fen("r1bqkb1r/pppp1ppp/2n2n2/4p3/2B1P3/5N2/PPPP1PPP/RNBQK2R w KQkq - 4 4", keys)
    result = compute_mobility(pos, tables)
    assert result.white_attacks & tables.king[pos.white_king] == tables.king[pos.white_king]
    assert result.black_attacks & tables.king[pos.black_king] == tables.king[pos.black_king]


def test_rook_check(keys, tables):
    result = attacks_of("4k3/8/8/8/8/8/8/4R1K1 b - - 0 1", keys, tables)
    assert result.black_king_checkers == bit(Square.E1)
    assert result.white_king_checkers == 0
    assert result.white_xray == 0


def test_knight_check(keys, tables):
    result = attacks_of("4k3/8/3N4/8/8/8/8/4K3 b - - 0 1", keys, tables)
    assert result.black_king_checkers == bit(Square.D6)


def test_white_pawn_check(keys, tables):
    result = attacks_of("4k3/3P4/8/8/8/8/8/4K3 b - - 0 1", keys, tables)
    assert result.black_king_checkers == bit(Square.D7)
    assert result.white_attacks & bit(Square.C8)


def test_black_pawn_check(keys, tables):
    result = attacks_of("4k3/8/8/8/8/8/5p2/4K3 w - - 0 1", keys, tables)
    assert result.white_king_checkers == bit(Square.F2)
    assert result.black_attacks & bit(Square.G1)


def test_rook_xray_through_pinned_knight(keys, tables):
    result = attacks_of("4k3/4n3/8/8/8/8/8/4R1K1 b - - 0 1", keys, tables)
    assert result.black_king_checkers == 0
    assert result.white_xray == bit(Square.E7)
    assert result.white_xray_sources == {Square.E7: Square.E1}


def test_queen_diagonal_xray(keys, tables):
    result = attacks_of("4k3/8/2b5/8/Q7/8/8/4K3 b - - 0 1", keys, tables)
    assert result.white_xray == bit(Square.C6)
    assert result.white_xray_sources == {Square.C6: Square.A4}


def test_black_bishop_xray(keys, tables):
    result = attacks_of("4k3/8/8/b7/8/8/3N4/4K3 w - - 0 1", keys, tables)
    assert result.black_xray == bit(Square.D2)
    assert result.black_xray_sources == {Square.D2: Square.A5}
    assert result.white_king_checkers == 0


def test_adjacent_kings_check_each_other(keys, tables):
    result = attacks_of("8/8/8/8/8/8/4k3/4K3 w - - 0 1", keys, tables)
    assert result.white_king_checkers == bit(Square.E2)
    assert result.black_king_checkers == bit(Square.E1)