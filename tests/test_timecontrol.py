import pytest

from fbchess.timecontrol import allocate_time, parse_go


def test_defaults():
    command = parse_go("go")
    assert command.depth == 255
    assert command.wtime_us is None
    assert command.btime_us is None
    assert command.movetime_us is None
    assert not command.infinite
    assert command.searchmoves == []


def test_depth_parsed_and_clamped():
    assert parse_go("go depth 14").depth == 14
    assert parse_go("go depth 0").depth == 1


def test_clock_values_in_microseconds():
    command = parse_go("go wtime 1500 btime 2500 winc 10 binc 20 movestogo 5")
    assert command.wtime_us == 1500 * 1000
    assert command.btime_us == 2500 * 1000
    assert command.winc_us == 10 * 1000
    assert command.binc_us == 20 * 1000
    assert command.movestogo == 5


def test_movetime_reserve():
    assert parse_go("go movetime 1000").movetime_us == 990000


def test_flags_and_searchmoves():
    command = parse_go("go infinite ponder searchmoves e2e4 d2d4")
    assert command.infinite
    assert command.ponder
    assert command.searchmoves == ["e2e4", "d2d4"]


def test_keywords_still_recognised_after_searchmoves():
    command = parse_go("go searchmoves e2e4 depth 3")
    assert command.searchmoves == ["e2e4"]
    assert command.depth == 3


def test_missing_value_raises():
    with pytest.raises(ValueError):
        parse_go("go depth")


def test_not_go_raises():
    with pytest.raises(ValueError):
        parse_go("stop")


def test_tiny_clock_uses_minimum():
    budget = allocate_time(0, 0, 0, False)
    assert budget.absolute_us == 1000
    assert budget.desired_us == 1000


def test_budget_ordering_invariants():
    for moves in (0, 1, 10, 40):
        budget = allocate_time(60_000_000, 500_000, moves, False)
        assert 1000 <= budget.desired_us <= budget.absolute_us
        assert budget.easy_us < budget.ordinary_us <= budget.battle_us


def test_single_move_left_clamps_desired_to_absolute():
    budget = allocate_time(60_000_000, 0, 1, False)
    assert budget.desired_us == budget.absolute_us


def test_moves_to_go_capped():
    assert allocate_time(90_000_000, 0, 30, False) == allocate_time(90_000_000, 0, 25, False)


def test_pondering_extends_easy_time():
    quiet = allocate_time(60_000_000, 0, 0, False)
    pondering = allocate_time(60_000_000, 0, 0, True)
    assert pondering.easy_us > quiet.easy_us
    assert pondering.desired_us == quiet.desired_us


def test_more_time_never_shrinks_budget():
    small = allocate_time(10_000_000, 0, 0, False)
    large = allocate_time(100_000_000, 0, 0, False)
    assert large.desired_us >= small.desired_us
    assert large.absolute_us >= small.absolute_us


def test_negative_moves_to_go_rejected():
    with pytest.raises(ValueError):
        allocate_time(1_000_000, 0, -1, False)