"""Transposition table with four-way buckets and a small principal-variation table."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntFlag
from typing import Callable

ENTRY_BYTES = 16
MAX_AGE = 256
MAX_DEPTH = 256
BUCKET = 4
PV_TABLE_SIZE = 0x10000
_PV_MASK = PV_TABLE_SIZE - BUCKET
_MAX_ENTRIES = 0x100000000
_MASK64 = (1 << 64) - 1


class EntryFlag(IntFlag):
    """Bound and node-type markers of a table entry."""

    NONE = 0
    LOWER = 1
    UPPER = 2
    CUT = 4
    ALL = 8
    EXACT = 16


@dataclass
class HashEntry:
    """One slot: the high half of the key plus lower and upper bound data."""

    key_high: int = 0
    flags: EntryFlag = EntryFlag.NONE
    age: int = 0
    upper_depth: int = 0
    lower_depth: int = 0
    lower_value: int = 0
    upper_value: int = 0
    move: int = 0


@dataclass
class PVEntry:
    """Principal-variation slot keyed by the full 64-bit hash."""

    key: int = 0
    value: int = 0
    move: int = 0
    depth: int = 0
    age: int = 0


class TranspositionTable:
    """Main search cache. Slots that were never written read as empty entries."""

    def __init__(self, megabytes: int = 128) -> None:
        self._entries: dict[int, HashEntry] = {}
        self._pv: dict[int, PVEntry] = {}
        self._age = 0
        self.size = 0
        self.megabytes = 0
        self._mask = 0
        self.resize(megabytes)

    @property
    def age(self) -> int:
        return self._age

    def resize(self, megabytes: int) -> int:
        """Set the size to the largest power of two not above ``megabytes``; returns MB used."""
        if megabytes < 1:
            raise ValueError("hash size must be at least 1 MB")
        size = ((1 << (megabytes.bit_length() - 1)) << 20) // ENTRY_BYTES
        size = min(size, _MAX_ENTRIES)
        self.size = size
        self.megabytes = size * ENTRY_BYTES >> 20
        self._mask = size - BUCKET
        self.clear()
        return self.megabytes

    def clear(self) -> None:
        """Empty both tables and reset the age."""
        self._entries.clear()
        self._pv.clear()
        self._age = 0

    def increment_age(self) -> None:
        """Advance the age counter, wrapping at MAX_AGE."""
        self._age = (self._age + 1) % MAX_AGE

    def _locate(self, key: int) -> tuple[int, int]:
        key &= _MASK64
        return key & self._mask, key >> 32

    def _peek(self, index: int) -> HashEntry:
        entry = self._entries.get(index)
        return entry if entry is not None else HashEntry(age=MAX_AGE // 2)

    def _slot(self, index: int) -> HashEntry:
        return self._entries.setdefault(index, HashEntry(age=MAX_AGE // 2))

    def _mix(self, age: int, depth: int) -> int:
        return ((self._age - age) & (MAX_AGE - 1)) * MAX_DEPTH + (MAX_DEPTH - (depth + 1))

    def _store(
        self,
        key: int,
        matches: Callable[[HashEntry], bool],
        update: Callable[[HashEntry], None],
        fresh: Callable[[int], HashEntry],
    ) -> None:
        base, high = self._locate(key)
        best, victim = 0, 0
        for i in range(BUCKET):
            entry = self._peek(base + i)
            if entry.key_high == high and matches(entry):
                update(self._slot(base + i))
                return
            score = self._mix(entry.age, max(entry.lower_depth, entry.upper_depth))
            if score > best:
                best, victim = score, i
        self._entries[base + victim] = fresh(high)

    def probe(self, key: int) -> list[HashEntry]:
        """Copies of the bucket's entries whose stored key half matches ``key``."""
        base, high = self._locate(key)
        return [
            replace(entry)
            for entry in (self._peek(base + i) for i in range(BUCKET))
            if entry.key_high == high
        ]

    def store_lower(self, key: int, move: int, depth: int, value: int) -> None:
        """Record a lower bound from a cut node."""
        move &= 0x7FFF

        def update(e: HashEntry) -> None:
            e.lower_depth, e.move, e.lower_value, e.age = depth, move, value, self._age
            e.flags = (e.flags | EntryFlag.LOWER) & ~EntryFlag.ALL

        self._store(
            key,
            lambda e: EntryFlag.EXACT not in e.flags and e.lower_depth <= depth,
            update,
            lambda high: HashEntry(high, EntryFlag.LOWER, self._age, 0, depth, value, 0, move),
        )

    def store_lower_all(self, key: int, move: int, depth: int, value: int) -> None:
        """Record a lower bound found at an expected all node."""
        move &= 0x7FFF

        def update(e: HashEntry) -> None:
            e.lower_depth, e.move, e.lower_value, e.age = depth, move, value, self._age
            e.flags |= EntryFlag.LOWER | EntryFlag.ALL

        self._store(
            key,
            lambda e: (not e.lower_depth or EntryFlag.ALL in e.flags) and e.lower_depth <= depth,
            update,
            lambda high: HashEntry(
                high, EntryFlag.LOWER | EntryFlag.ALL, self._age, 0, depth, value, 0, move
            ),
        )

    def store_upper(self, key: int, depth: int, value: int) -> None:
        """Record an upper bound from an all node."""

        def update(e: HashEntry) -> None:
            e.upper_depth, e.upper_value, e.age = depth, value, self._age
            e.flags = (e.flags | EntryFlag.UPPER) & ~EntryFlag.CUT

        self._store(
            key,
            lambda e: EntryFlag.EXACT not in e.flags and e.upper_depth <= depth,
            update,
            lambda high: HashEntry(high, EntryFlag.UPPER, self._age, depth, 0, 0, value, 0),
        )

    def store_upper_cut(self, key: int, depth: int, value: int) -> None:
        """Record an upper bound found at an expected cut node."""

        def update(e: HashEntry) -> None:
            e.upper_depth, e.upper_value, e.age = depth, value, self._age
            e.flags |= EntryFlag.UPPER | EntryFlag.CUT

        self._store(
            key,
            lambda e: (not e.upper_depth or EntryFlag.CUT in e.flags) and e.upper_depth <= depth,
            update,
            lambda high: HashEntry(
                high, EntryFlag.UPPER | EntryFlag.CUT, self._age, depth, 0, 0, value, 0
            ),
        )

    def _store_pv(self, key: int, move: int, depth: int, value: int) -> None:
        key &= _MASK64
        base = key & _PV_MASK
        best, victim = 0, 0
        for i in range(BUCKET):
            entry = self._pv.get(base + i) or PVEntry()
            if entry.key == key:
                self._pv[base + i] = PVEntry(key, value, move, depth, self._age)
                return
            score = self._mix(entry.age, entry.depth)
            if score > best:
                best, victim = score, i
        self._pv[base + victim] = PVEntry(key, value, move, depth, self._age)

    def store_exact(self, key: int, move: int, depth: int, value: int, flags: int) -> None:
        """Record an exact score in both tables; shallower duplicates are wiped."""
        move &= 0x7FFF
        self._store_pv(key, move, depth, value)
        base, high = self._locate(key)
        entry_flags = EntryFlag(flags)
        best, victim = 0, 0
        for i in range(BUCKET):
            entry = self._peek(base + i)
            deepest = max(entry.upper_depth, entry.lower_depth)
            if entry.key_high == high and deepest <= depth:
                self._entries[base + i] = HashEntry(
                    high, entry_flags, self._age, depth, depth, value, value, move
                )
                for j in range(i + 1, BUCKET):
                    other = self._peek(base + j)
                    if other.key_high == high and max(other.upper_depth, other.lower_depth) <= depth:
                        self._entries[base + j] = HashEntry(age=self._age ^ MAX_AGE // 2)
                return
            score = self._mix(entry.age, deepest)
            if score > best:
                best, victim = score, i
        self._entries[base + victim] = HashEntry(
            high, entry_flags, self._age, depth, depth, value, value, move
        )

    def pv_probe(self, key: int) -> PVEntry | None:
        """The principal-variation entry for the full key, if present."""
        key &= _MASK64
        base = key & _PV_MASK
        for i in range(BUCKET):
            entry = self._pv.get(base + i)
            if entry is not None and entry.key == key:
                return replace(entry)
        return None