from fbchess.randgen import KeyGenerator
from fbchess.zobrist import generate_keys


def test_deterministic_with_default_generator():
    assert generate_keys() == generate_keys(KeyGenerator(1))


def test_draw_order():
    keys = generate_keys(KeyGenerator())
    reference = KeyGenerator()
    assert keys.side_to_move == reference.rand64()
    for single in (1, 2, 4, 8):
        assert keys.castling[single] == reference.rand64()
    assert keys.pieces[0][0] == reference.rand64()
    assert keys.pieces[0][1] == reference.rand64()


def test_generator_advanced_by_all_draws():
    used = KeyGenerator(5)
    keys = generate_keys(used)
    reference = KeyGenerator(5)
    for _ in range(1 + 4 + 16 * 64 + 8):
        reference.rand64()
    assert keys.thread_seed == reference.rand64()
    assert used.state == reference.state


def test_castling_combinations_are_xors():
    keys = generate_keys()
    assert keys.castling[0] == 0
    assert keys.castling[3] == keys.castling[1] ^ keys.castling[2]
    assert keys.castling[12] == keys.castling[4] ^ keys.castling[8]
    assert keys.castling[15] == (
        keys.castling[1] ^ keys.castling[2] ^ keys.castling[4] ^ keys.castling[8])


def test_shapes_and_uniqueness():
    keys = generate_keys()
    assert len(keys.pieces) == 16
    assert all(len(row) == 64 for row in keys.pieces)
    assert len(keys.en_passant) == 8
    flat = [k for row in keys.pieces for k in row]
    assert len(set(flat)) == len(flat)
    assert all(0 <= k < 1 << 64 for k in flat)


def test_different_seeds_differ():
    assert generate_keys(KeyGenerator(2)).side_to_move != generate_keys(
        KeyGenerator(3)).side_to_move