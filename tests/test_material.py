import dataclasses

import pytest

from fbchess.material import (
    ENDING_MASK,
    MATERIAL_TABLE_SIZE,
    EndingFlag,
    MaterialCounts,
    black_weight,
    decode_index,
    encode_index,
    material_entry,
    white_weight,
)


def _mirror(c: MaterialCounts) -> MaterialCounts:
    return MaterialCounts(
        white_pawns=c.black_pawns,
        white_knights=c.black_knights,
        white_light_bishops=c.black_dark_bishops,
        white_dark_bishops=c.black_light_bishops,
        white_rooks=c.black_rooks,
        white_queens=c.black_queens,
        black_pawns=c.white_pawns,
        black_knights=c.white_knights,
        black_light_bishops=c.white_dark_bishops,
        black_dark_bishops=c.white_light_bishops,
        black_rooks=c.white_rooks,
        black_queens=c.white_queens,
    )


START = MaterialCounts(8, 2, 1, 1, 2, 1, 8, 2, 1, 1, 2, 1)
SAMPLE = list(range(0, MATERIAL_TABLE_SIZE, 1237)) + [MATERIAL_TABLE_SIZE - 1]


@pytest.mark.parametrize("index", SAMPLE)
def test_index_round_trip(index):
    assert encode_index(decode_index(index)) == index


def test_extreme_indices():
    assert decode_index(0) == MaterialCounts()
    assert decode_index(MATERIAL_TABLE_SIZE - 1) == START


def test_decode_rejects_out_of_range():
    with pytest.raises(ValueError):
        decode_index(-1)
    with pytest.raises(ValueError):
        decode_index(MATERIAL_TABLE_SIZE)


def test_encode_rejects_excess_pieces():
    with pytest.raises(ValueError):
        encode_index(MaterialCounts(white_pawns=9))
    with pytest.raises(ValueError):
        encode_index(MaterialCounts(black_queens=2))


def test_negative_counts_rejected():
    with pytest.raises(ValueError):
        MaterialCounts(white_rooks=-1)


def test_bare_kings():
    entry = material_entry(0)
    assert entry.value == 0
    assert entry.token == 0xC0
    assert entry.flags == EndingFlag.NONE


def test_start_position_balanced():
    entry = material_entry(encode_index(START))
    assert entry.value == 0
    assert entry.token == 0x80
    assert white_weight(START) == 10
    assert entry.flags & EndingFlag.WHITE_PIECES
    assert entry.flags & EndingFlag.BLACK_PIECES


@pytest.mark.parametrize("index", SAMPLE)
def test_mirror_antisymmetry(index):
    counts = decode_index(index)
    quirk = (counts.white_pawns == 0 or counts.black_pawns == 0)
    entry = material_entry(index)
    mirrored = material_entry(encode_index(_mirror(counts)))
    assert mirrored.token == entry.token
    if not quirk:
        assert mirrored.value == -entry.value


@pytest.mark.parametrize("index", SAMPLE)
def test_weights_in_range(index):
    counts = decode_index(index)
    assert 0 <= white_weight(counts) <= 10
    assert 0 <= black_weight(counts) <= 10


def test_extra_pawn_favours_white():
    counts = MaterialCounts(white_pawns=1)
    entry = material_entry(encode_index(counts))
    assert entry.value > 0
    assert entry.flags & ENDING_MASK == EndingFlag.PAWN_ENDING
    assert material_entry(encode_index(_mirror(counts))).value == -entry.value


def test_lone_minor_cannot_win():
    counts = MaterialCounts(white_knights=1)
    assert white_weight(counts) == 0
    assert material_entry(encode_index(counts)).value == 0
    assert material_entry(encode_index(counts)).flags & EndingFlag.WHITE_MINOR_ONLY


def test_knight_pair_rule_is_asymmetric():
    counts = MaterialCounts(white_knights=2, black_pawns=1)
    mirrored = _mirror(counts)
    assert black_weight(mirrored) == 0
    assert white_weight(counts) > black_weight(mirrored)


def test_queen_and_rook_ending_tokens():
    queens = material_entry(encode_index(MaterialCounts(white_queens=1, black_queens=1)))
    assert queens.token == 0x70
    assert queens.flags & ENDING_MASK == EndingFlag.QUEEN_ENDING
    rooks = material_entry(encode_index(MaterialCounts(white_rooks=1, black_rooks=1)))
    assert rooks.token == 0x60
    assert rooks.flags & ENDING_MASK == EndingFlag.ROOK_ENDING


def test_bishop_ending_tokens():
    opposite = MaterialCounts(white_light_bishops=1, black_dark_bishops=1)
    same = dataclasses.replace(opposite, black_dark_bishops=0, black_light_bishops=1)
    opp_entry = material_entry(encode_index(opposite))
    same_entry = material_entry(encode_index(same))
    assert opp_entry.token == 0x30
    assert same_entry.token == 0x78
    for entry in (opp_entry, same_entry):
        assert entry.flags & EndingFlag.WHITE_MINOR_ONLY
        assert entry.flags & EndingFlag.BLACK_MINOR_ONLY


def test_single_minor_clears_piece_bit():
    entry = material_entry(encode_index(MaterialCounts(white_knights=1, black_rooks=1)))
    piece_bits = EndingFlag.WHITE_PIECES | EndingFlag.BLACK_PIECES
    assert entry.flags & piece_bits == EndingFlag.BLACK_PIECES


def test_bishop_knight_mate_flag():
    counts = MaterialCounts(white_knights=1, white_dark_bishops=1)
    entry = material_entry(encode_index(counts))
    assert entry.flags & EndingFlag.BISHOP_KNIGHT_MATE
    assert entry.value > 0
    mirrored = material_entry(encode_index(_mirror(counts)))
    assert mirrored.flags & EndingFlag.BISHOP_KNIGHT_MATE
    assert mirrored.value == -entry.value