import pytest

from fbchess.transposition import MAX_AGE, EntryFlag, TranspositionTable

LOW = 0x40


def key(high: int) -> int:
    return (high << 32) | LOW


@pytest.fixture
def table():
    return TranspositionTable(1)


def test_store_lower_round_trip(table):
    table.store_lower(key(7), 0x8123, 5, 42)
    entries = table.probe(key(7))
    assert len(entries) == 1
    entry = entries[0]
    assert entry.lower_depth == 5
    assert entry.lower_value == 42
    assert entry.move == 0x8123 & 0x7FFF
    assert entry.flags == EntryFlag.LOWER


def test_store_upper_round_trip(table):
    table.store_upper(key(9), 6, -17)
    [entry] = table.probe(key(9))
    assert entry.upper_depth == 6
    assert entry.upper_value == -17
    assert EntryFlag.UPPER in entry.flags
    assert entry.lower_depth == 0


def test_lower_then_upper_share_slot(table):
    table.store_lower(key(3), 11, 4, 10)
    table.store_upper(key(3), 4, 20)
    [entry] = table.probe(key(3))
    assert entry.lower_value == 10
    assert entry.upper_value == 20
    assert entry.flags == EntryFlag.LOWER | EntryFlag.UPPER


def test_upper_clears_cut_flag(table):
    table.store_upper_cut(key(2), 3, 5)
    assert EntryFlag.CUT in table.probe(key(2))[0].flags
    table.store_upper(key(2), 4, 6)
    [entry] = table.probe(key(2))
    assert EntryFlag.CUT not in entry.flags
    assert entry.upper_depth == 4


def test_lower_all_updates_same_slot_when_deeper(table):
    table.store_lower_all(key(5), 1, 3, 7)
    table.store_lower_all(key(5), 2, 8, 9)
    entries = table.probe(key(5))
    assert len(entries) == 1
    assert entries[0].lower_depth == 8
    assert entries[0].move == 2
    assert EntryFlag.ALL in entries[0].flags


def test_lower_all_does_not_overwrite_cut_lower(table):
    table.store_lower(key(5), 1, 3, 7)
    table.store_lower_all(key(5), 2, 8, 9)
    assert len(table.probe(key(5))) == 2


def test_exact_entry_not_overwritten_by_lower(table):
    flags = EntryFlag.EXACT | EntryFlag.LOWER | EntryFlag.UPPER
    table.store_exact(key(4), 33, 10, 55, flags)
    table.store_lower(key(4), 34, 12, 60)
    entries = table.probe(key(4))
    assert len(entries) == 2
    exact = [e for e in entries if EntryFlag.EXACT in e.flags][0]
    assert exact.lower_value == exact.upper_value == 55
    assert exact.lower_depth == exact.upper_depth == 10


def test_exact_writes_pv_table(table):
    table.store_exact(key(8), 0x9001, 7, 123, EntryFlag.EXACT)
    pv = table.pv_probe(key(8))
    assert pv is not None
    assert pv.value == 123
    assert pv.depth == 7
    assert pv.move == 0x9001 & 0x7FFF
    assert table.pv_probe(key(99)) is None


def test_shallowest_entry_replaced_when_bucket_full(table):
    for high, depth in zip(range(1, 5), (5, 6, 7, 8)):
        table.store_lower(key(high), 0, depth, 0)
    table.store_lower(key(50), 0, 9, 0)
    assert table.probe(key(1)) == []
    for high in (2, 3, 4, 50):
        assert len(table.probe(key(high))) == 1


def test_clear_empties_and_resets_age(table):
    table.increment_age()
    table.store_lower(key(1), 1, 1, 1)
    table.store_exact(key(2), 1, 1, 1, EntryFlag.EXACT)
    table.clear()
    assert table.probe(key(1)) == []
    assert table.pv_probe(key(2)) is None
    assert table.age == 0


def test_age_wraps():
    table = TranspositionTable(1)
    for _ in range(MAX_AGE):
        table.increment_age()
    assert table.age == 0


def test_stored_entry_carries_current_age(table):
    table.increment_age()
    table.increment_age()
    table.store_upper(key(6), 1, 1)
    assert table.probe(key(6))[0].age == table.age


def test_resize_rounds_down_to_power_of_two():
    table = TranspositionTable(1)
    assert table.resize(128) == 128
    assert table.resize(100) == 64
    assert table.size * 16 == table.megabytes << 20


def test_resize_rejects_zero():
    with pytest.raises(ValueError):
        TranspositionTable(0)