# fbchess

Building blocks for a bitboard chess engine, in pure Python with no
dependencies outside the standard library.

## Modules

- `fbchess.board`: the `Piece`, `Square`, `Phase` and `Castling`
  enumerations, fixed bitboard constants (rank and file masks, light and
  dark squares, rotated-board layouts, castling-rights table, `START_FEN`)
  and the helpers `square_file`, `square_rank`, `square_name`,
  `parse_square`, `bit` and `iter_bits`.
- `fbchess.randgen`: `KeyGenerator`, a deterministic generator with
  `rand16()` and `rand64()`, and `Random32Pool`, one 32-bit generator per
  worker, drawn with `next(cpu)`.
- `fbchess.captures`: move-ordering scores by mover and victim piece code
  (`capture_value(attacker, victim)`, `capture_table()`); a victim of 0
  stands for an empty square.
- `fbchess.tables`: `build_tables()` computes, once, a `Tables` object of
  knight, king and pawn attacks, pawn-structure masks (isolated, passed,
  protected, connected, doubled, open files), king quadrants, evasion and
  interposition masks and the `Direction` joining any two squares. Sliding
  attacks come from `Tables.rook_attacks`, `Tables.bishop_attacks` and
  `Tables.queen_attacks`. `BENCHMARK_POSITIONS` holds sixteen FEN strings.
- `fbchess.zobrist`: `generate_keys(generator)` draws a `ZobristKeys` set
  (side to move, castling, piece-square and en passant keys); each
  castling combination is the xor of its single rights.
- `fbchess.material`: the material table. `MaterialCounts` describes the
  pieces on the board, `encode_index`/`decode_index` convert to and from a
  table index, and `material_entry(index)` gives a `MaterialEntry` with a
  balance value, a scaling token and `EndingFlag` bits. `white_weight` and
  `black_weight` give the weight, out of 10, applied to a balance in that
  side's favour. `build_material_table()` computes all 419,904 entries
  (slow; the result is cached).
- `fbchess.transposition`: `TranspositionTable`, sized in megabytes to a
  power of two, with four-way buckets, ageing (`increment_age`), bound
  stores (`store_lower`, `store_lower_all`, `store_upper`,
  `store_upper_cut`, `store_exact`), `probe(key)` returning matching
  `HashEntry` copies, and a separate principal-variation store read with
  `pv_probe(key)`.
- `fbchess.timecontrol`: `parse_go(text)` reads a UCI `go` line into a
  `GoCommand` (times in microseconds) and raises `ValueError` for anything
  else; `allocate_time(time_us, increment_us, moves_to_go, pondering)`
  returns a `TimeBudget` of stopping thresholds.
- `fbchess.position`: `Position.from_fen(fen, keys)` with incremental
  hashing, `make(move)`/`undo()` and `make_null()`/`undo_null()`. Moves
  are packed with `encode_move(fr, to, flag)` using a `MoveFlag`, and read
  back with `move_from` and `move_to`.
- `fbchess.attacks`: `compute_mobility(position, tables)` returns an
  `AttackMap` of attacked squares, pieces giving check and x-ray pieces
  for both sides.

## Example

```python
from fbchess.attacks import compute_mobility
from fbchess.board import parse_square
from fbchess.position import Position, encode_move
from fbchess.randgen import KeyGenerator
from fbchess.tables import build_tables
from fbchess.timecontrol import allocate_time, parse_go
from fbchess.transposition import TranspositionTable
from fbchess.zobrist import generate_keys

keys = generate_keys(KeyGenerator())
tables = build_tables()
pos = Position.from_fen(
    "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", keys
)
move = encode_move(parse_square("e2"), parse_square("e4"))
pos.make(move)
attacks = compute_mobility(pos, tables)

table = TranspositionTable(16)
table.store_lower(pos.current.hash, move, depth=8, value=25)
entries = table.probe(pos.current.hash)
pos.undo()

go = parse_go("go wtime 60000 btime 60000 winc 1000 binc 1000")
budget = allocate_time(go.wtime_us, go.winc_us, go.movestogo, go.ponder)
```

## What the package does not do

There is no move generator, no legality check beyond the moving piece
belonging to the side to move, no static evaluation and no search. There
is no command to run: no UCI loop reads input or answers a GUI. The
pieces here are the tables, keys, caches, time rules and board updates
such a program would be built on.

## Running the tests

```
pip install -e ".[test]"
pytest
```