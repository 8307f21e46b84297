"""Parsing of the 'go' command and allocation of thinking time."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

DEFAULT_DEPTH = 255
MIN_TIME_US = 1000
MAX_MOVES_TO_GO = 25

ABSOLUTE_FACTOR = 25
BATTLE_FACTOR = 100
DESIRED_MILLIS = 40
EASY_FACTOR = 15
EASY_FACTOR_PONDER = 33
NORMAL_FACTOR = 75

_NUMBER = re.compile(r"\s*([+-]?\d+)")


@dataclass
class GoCommand:
    """Search limits of a 'go' command; times are in microseconds, None meaning unset."""

    depth: int = DEFAULT_DEPTH
    movetime_us: int | None = None
    wtime_us: int | None = None
    btime_us: int | None = None
    winc_us: int = 0
    binc_us: int = 0
    movestogo: int = 0
    infinite: bool = False
    ponder: bool = False
    searchmoves: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TimeBudget:
    """Time thresholds, in microseconds, at which the search may stop."""

    desired_us: int
    absolute_us: int
    easy_us: int
    battle_us: int
    ordinary_us: int


def _leading_int(text: str) -> int:
    match = _NUMBER.match(text)
    return int(match.group(1)) if match else 0


def parse_go(text: str) -> GoCommand:
    """Read the limits from a 'go' command line."""
    tokens = text.split()
    if not tokens or tokens[0] != "go":
        raise ValueError(f"not a go command: {text!r}")
    command = GoCommand()
    numeric = {"depth", "movetime", "wtime", "winc", "btime", "binc", "movestogo"}
    in_searchmoves = False
    rest = iter(tokens[1:])
    for token in rest:
        if token in numeric:
            try:
                value = _leading_int(next(rest))
            except StopIteration:
                raise ValueError(f"missing value after {token!r}") from None
            if token == "depth":
                command.depth = max(1, value)
            elif token == "movetime":
                command.movetime_us = max(1, value) * 1000 - 10000
            elif token == "wtime":
                command.wtime_us = value * 1000
            elif token == "winc":
                command.winc_us = value * 1000
            elif token == "btime":
                command.btime_us = value * 1000
            elif token == "binc":
                command.binc_us = value * 1000
            else:
                command.movestogo = value
        elif token == "infinite":
            command.infinite = True
        elif token == "ponder":
            command.ponder = True
        elif token == "searchmoves":
            in_searchmoves = True
        elif in_searchmoves:
            command.searchmoves.append(token)
    return command


def allocate_time(
    time_us: int, increment_us: int, moves_to_go: int, pondering: bool
) -> TimeBudget:
    """Split the remaining clock into the search's stopping thresholds."""
    if moves_to_go < 0:
        raise ValueError("moves to go must not be negative")
    time_us = max(0, time_us)
    if moves_to_go:
        mtg = min(moves_to_go, MAX_MOVES_TO_GO)
        desired = time_us // mtg + increment_us
        absolute = time_us * mtg // ((mtg << 2) - 3) - min(1_000_000, time_us // 10)
        if mtg == 1:
            absolute -= min(1_000_000, absolute // 10)
        absolute = max(absolute, MIN_TIME_US)
    else:
        absolute = max(time_us * ABSOLUTE_FACTOR // 100 - 10000, MIN_TIME_US)
        desired = time_us * DESIRED_MILLIS // 1000 + increment_us
    desired = max(min(desired, absolute), MIN_TIME_US)
    easy_factor = EASY_FACTOR_PONDER if pondering else EASY_FACTOR
    return TimeBudget(
        desired_us=desired,
        absolute_us=absolute,
        easy_us=desired * easy_factor // 100,
        battle_us=desired * BATTLE_FACTOR // 100,
        ordinary_us=desired * NORMAL_FACTOR // 100,
    )