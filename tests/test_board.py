import pytest

from fbchess.board import (
    ALL_SQUARES,
    BISHOP_TRAP_SQ,
    BLACK_EP,
    CASTLE_TABLE,
    DARK_SQUARES,
    FILE_MASKS,
    LEFT45,
    LEFT90,
    LIGHT_SQUARES,
    RANK_MASKS,
    RIGHT45,
    ROOK_TRAPPED,
    SHIFT,
    START_FEN,
    WHITE_EP,
    Castling,
    Phase,
    Piece,
    Square,
    bit,
    iter_bits,
    parse_square,
    square_file,
    square_name,
    square_rank,
)


def test_square_name_round_trip():
    for sq in Square:
        assert parse_square(square_name(sq)) == sq


def test_parse_square_known():
    assert parse_square("e4") == Square.E4
    assert parse_square("H8") == Square.H8


@pytest.mark.parametrize("text", ["", "i1", "a9", "e44", "4e", "a0"])
def test_parse_square_rejects(text):
    with pytest.raises(ValueError):
        parse_square(text)


def test_file_and_rank_consistent():
    assert square_file(Square.E4) == square_file(Square.E1)
    assert square_rank(Square.E4) == square_rank(Square.A4)
    for sq in Square:
        assert bit(sq) & FILE_MASKS[square_file(sq)]
        assert bit(sq) & RANK_MASKS[square_rank(sq)]


@pytest.mark.parametrize("bad", [-1, 64])
def test_square_range_checked(bad):
    with pytest.raises(ValueError):
        bit(bad)
    with pytest.raises(ValueError):
        square_name(bad)


def test_iter_bits_file_a():
    expected = [parse_square(f"a{r}") for r in range(1, 9)]
    assert list(iter_bits(FILE_MASKS[0])) == expected


@pytest.mark.parametrize("board", [0, 1, ALL_SQUARES, LIGHT_SQUARES, 0x8000000000000001])
def test_iter_bits_round_trip(board):
    squares = list(iter_bits(board))
    assert squares == sorted(squares)
    assert sum(bit(sq) for sq in squares) == board


def test_iter_bits_rejects_negative():
    with pytest.raises(ValueError):
        list(iter_bits(-1))


def test_colour_masks_partition_board():
    assert LIGHT_SQUARES & DARK_SQUARES == 0
    assert LIGHT_SQUARES | DARK_SQUARES == ALL_SQUARES
    assert len(list(iter_bits(LIGHT_SQUARES))) == 32
    assert bit(Square.A1) & DARK_SQUARES == bit(Square.A1)
    assert bit(Square.H1) & LIGHT_SQUARES == bit(Square.H1)


def test_file_and_rank_masks_pinned():
    assert sum(bit(parse_square(f"a{r}")) for r in range(1, 9)) == FILE_MASKS[0]
    assert list(iter_bits(RANK_MASKS[7])) == [parse_square(f"{f}8") for f in "abcdefgh"]


def test_rotation_tables_are_permutations():
    for table in (LEFT90, LEFT45, RIGHT45):
        assert sum(bit(sq) for sq in table) == ALL_SQUARES
        assert len(table) == 64
    assert len(SHIFT) == 64


def test_castle_table():
    assert CASTLE_TABLE[parse_square("e1")] == Castling.BLACK
    assert CASTLE_TABLE[parse_square("e8")] == Castling.WHITE
    assert CASTLE_TABLE[parse_square("d4")] == Castling.ALL
    assert CASTLE_TABLE[parse_square("h8")] & Castling.BLACK_KINGSIDE == 0


def test_en_passant_masks():
    assert WHITE_EP[0] == bit(Square.B4)
    assert BLACK_EP[3] == bit(Square.C5) | bit(Square.E5)


def test_trap_tables():
    assert ROOK_TRAPPED[Square.G1] == bit(Square.H1) | bit(Square.H2)
    assert BISHOP_TRAP_SQ[Square.A7] == Square.B6


def test_piece_properties():
    assert Piece(7) is Piece.WHITE_QUEEN
    assert Piece(7).is_white is True
    assert Piece(9).is_white is False
    assert Piece(Piece.WHITE_QUEEN + 8) is Piece.BLACK_QUEEN
    assert "".join(p.symbol for p in Piece) == "PNKBBRQpnkbbrq"


def test_phase_order():
    assert Phase(0) is Phase.TRANS
    assert Phase(5) < Phase(7)
    assert Phase(5) is Phase.ORDINARY_MOVES
    assert Phase(7) is Phase.TRANS2


def test_start_fen_fields():
    assert START_FEN.split()[1] == "w"