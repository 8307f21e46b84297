"""Bitboard chess components: board constants, attack tables, Zobrist keys, material table, transposition table, time allocation, move making and attack maps."""

__version__ = "0.1.0"