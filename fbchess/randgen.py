"""Deterministic pseudo-random generators for hash keys and per-thread use."""

from __future__ import annotations

_MASK64 = (1 << 64) - 1


class KeyGenerator:
    """Linear congruential generator used to build Zobrist keys."""

    def __init__(self, seed: int = 1) -> None:
        self.state = seed & _MASK64

    def rand16(self) -> int:
        """Next 16-bit value."""
        self.state = (self.state * 8765432181103515245 + 1234567891) & _MASK64
        return (self.state >> 32) % 65536

    def rand64(self) -> int:
        """Next 64-bit value, built from four 16-bit draws, highest part first."""
        value = 0
        for _ in range(4):
            value = (value << 16) | self.rand16()
        return value


class Random32Pool:
    """Independent 32-bit generators, one per worker."""

    def __init__(self, seed: int, cpus: int = 8) -> None:
        if cpus < 1:
            raise ValueError("at least one generator is required")
        keys = []
        x = seed & _MASK64
        for _ in range(cpus):
            x = (x * 0xB18EC564FF729005 + 0x86EE25701B5E244F) & _MASK64
            keys.append(x)
        self._keys = keys

    def __len__(self) -> int:
        return len(self._keys)

    def next(self, cpu: int) -> int:
        """Next 32-bit value of the given worker's generator."""
        if not 0 <= cpu < len(self._keys):
            raise IndexError(f"no generator for cpu {cpu}")
        key = (self._keys[cpu] * 0x7913CC52088A6CF + 0x99F2E6BB0313CA0D) & _MASK64
        self._keys[cpu] = key
        return (key >> 18) & 0xFFFFFFFF