"""Board position with incremental hashing, move making and null moves."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum

from .board import (
    ALL_SQUARES,
    BLACK_EP,
    CASTLE_TABLE,
    DARK_SQUARES,
    LIGHT_SQUARES,
    PROMOTION_BLACK,
    PROMOTION_WHITE,
    WHITE_EP,
    Castling,
    Piece,
    Square,
    bit,
    iter_bits,
    parse_square,
)
from .zobrist import ZobristKeys, generate_keys

FLAG_MASK = 0x7000


class MoveFlag(IntEnum):
    """Special-move codes held in bits 12..14 of a move."""

    NONE = 0
    CASTLE = 0x1000
    EN_PASSANT = 0x2000
    PROMOTE_KNIGHT = 0x4000
    PROMOTE_BISHOP = 0x5000
    PROMOTE_ROOK = 0x6000
    PROMOTE_QUEEN = 0x7000


def encode_move(fr: int, to: int, flag: int = MoveFlag.NONE) -> int:
    """Pack a move: destination in bits 0..5, origin in bits 6..11, flag above."""
    for sq in (fr, to):
        if not 0 <= sq < 64:
            raise ValueError(f"square out of range: {sq}")
    return int(MoveFlag(flag)) | fr << 6 | to


def move_from(move: int) -> int:
    """Origin square of a packed move."""
    return (move >> 6) & 63


def move_to(move: int) -> int:
    """Destination square of a packed move."""
    return move & 63


# Piece -> (game phase contribution, weight in the material table index).
_MATERIAL = {
    Piece.WHITE_PAWN: (0, 5184),
    Piece.WHITE_KNIGHT: (1, 576),
    Piece.WHITE_BISHOP_LIGHT: (1, 36),
    Piece.WHITE_BISHOP_DARK: (1, 72),
    Piece.WHITE_ROOK: (3, 4),
    Piece.WHITE_QUEEN: (6, 1),
    Piece.BLACK_PAWN: (0, 46656),
    Piece.BLACK_KNIGHT: (1, 1728),
    Piece.BLACK_BISHOP_LIGHT: (1, 144),
    Piece.BLACK_BISHOP_DARK: (1, 288),
    Piece.BLACK_ROOK: (3, 12),
    Piece.BLACK_QUEEN: (6, 2),
}

# Largest count of each piece kind the material table can describe.
_TABLE_LIMITS = {
    Piece.WHITE_PAWN: 8, Piece.BLACK_PAWN: 8,
    Piece.WHITE_KNIGHT: 2, Piece.BLACK_KNIGHT: 2,
    Piece.WHITE_BISHOP_LIGHT: 1, Piece.BLACK_BISHOP_LIGHT: 1,
    Piece.WHITE_BISHOP_DARK: 1, Piece.BLACK_BISHOP_DARK: 1,
    Piece.WHITE_ROOK: 2, Piece.BLACK_ROOK: 2,
    Piece.WHITE_QUEEN: 1, Piece.BLACK_QUEEN: 1,
}

_FEN_PIECES = {
    "P": Piece.WHITE_PAWN, "N": Piece.WHITE_KNIGHT, "B": Piece.WHITE_BISHOP_LIGHT,
    "R": Piece.WHITE_ROOK, "Q": Piece.WHITE_QUEEN, "K": Piece.WHITE_KING,
    "p": Piece.BLACK_PAWN, "n": Piece.BLACK_KNIGHT, "b": Piece.BLACK_BISHOP_LIGHT,
    "r": Piece.BLACK_ROOK, "q": Piece.BLACK_QUEEN, "k": Piece.BLACK_KING,
}

_FEN_CASTLING = {
    "K": Castling.WHITE_KINGSIDE, "Q": Castling.WHITE_QUEENSIDE,
    "k": Castling.BLACK_KINGSIDE, "q": Castling.BLACK_QUEENSIDE,
}

# King destination -> (rook origin, rook destination).
_CASTLE_ROOKS = {
    Square.G1: (Square.H1, Square.F1),
    Square.C1: (Square.A1, Square.D1),
    Square.G8: (Square.H8, Square.F8),
    Square.C8: (Square.A8, Square.D8),
}


@dataclass
class State:
    """Per-ply data that changes with every move and is restored on undo."""

    hash: int = 0
    pawn_hash: int = 0
    phase: int = 0
    material_index: int = 0
    unusual_material: bool = False
    castling: Castling = Castling.NONE
    reversible: int = 0
    ep: int = 0
    captured: int = 0
    move: int = 0
    value: int = 0
    positional_value: int = 0
    lazy: int = 0
    flags: int = 0


class Position:
    """Pieces on the board plus a stack of per-ply states."""

    def __init__(self, keys: ZobristKeys, tempo: int = 0) -> None:
        self.keys = keys
        self.tempo = tempo
        self.board: list[int] = [0] * 64
        self.bitboards: list[int] = [0] * 16
        self.white_to_move = True
        self.white_king = 0
        self.black_king = 0
        self.height = 0
        self.nodes = 0
        self.states: list[State] = [State()]
        self.hash_stack: list[int] = []
        self._undo: list[tuple[int, list[int], list[int], int, int] | None] = []

    @property
    def current(self) -> State:
        return self.states[-1]

    @property
    def occupied(self) -> int:
        return self.bitboards[Piece.WHITE_OCCUPIED] | self.bitboards[Piece.BLACK_OCCUPIED]

    @classmethod
    def from_fen(cls, fen: str, keys: ZobristKeys | None = None) -> Position:
        """Set up a position from a FEN string; raises ValueError when malformed."""
        parts = fen.split()
        if len(parts) < 2:
            raise ValueError(f"incomplete FEN: {fen!r}")
        pos = cls(keys if keys is not None else generate_keys())
        pos._place_from_fen(parts[0])

        if parts[1] not in ("w", "b"):
            raise ValueError(f"bad side to move: {parts[1]!r}")
        pos.white_to_move = parts[1] == "w"

        castling = Castling.NONE
        rights = parts[2] if len(parts) > 2 else "-"
        if rights != "-":
            for char in rights:
                if char not in _FEN_CASTLING:
                    raise ValueError(f"bad castling field: {rights!r}")
                castling |= _FEN_CASTLING[char]

        ep = pos._fen_en_passant(parts[3] if len(parts) > 3 else "-")
        reversible = int(parts[4]) if len(parts) > 4 else 0
        if reversible < 0:
            raise ValueError("halfmove clock must not be negative")

        state = State(castling=castling, reversible=reversible, ep=ep)
        k = pos.keys
        for sq, piece in enumerate(pos.board):
            if not piece:
                continue
            state.hash ^= k.pieces[piece][sq]
            if piece in (Piece.WHITE_PAWN, Piece.BLACK_PAWN, Piece.WHITE_KING, Piece.BLACK_KING):
                state.pawn_hash ^= k.pieces[piece][sq]
            if piece in _MATERIAL:
                phase, weight = _MATERIAL[piece]
                state.phase += phase
                state.material_index += weight
        state.hash ^= k.castling[castling]
        state.pawn_hash ^= k.castling[castling]
        if ep:
            state.hash ^= k.en_passant[ep & 7]
        if not pos.white_to_move:
            state.hash ^= k.side_to_move
        state.unusual_material = any(
            pos.bitboards[piece].bit_count() > limit for piece, limit in _TABLE_LIMITS.items()
        )
        pos.states = [state]
        pos.hash_stack = [state.hash]
        return pos

    def _place_from_fen(self, placement: str) -> None:
        rows = placement.split("/")
        if len(rows) != 8:
            raise ValueError(f"FEN board needs 8 ranks: {placement!r}")
        for row_index, row in enumerate(rows):
            rank = 7 - row_index
            file = 0
            for char in row:
                if char.isdigit() and "1" <= char <= "8":
                    file += int(char)
                elif char in _FEN_PIECES:
                    if file > 7:
                        raise ValueError(f"rank too long: {row!r}")
                    sq = 8 * rank + file
                    piece = _FEN_PIECES[char]
                    if piece in (Piece.WHITE_BISHOP_LIGHT, Piece.BLACK_BISHOP_LIGHT) \
                            and not bit(sq) & LIGHT_SQUARES:
                        piece = Piece(piece + 1)
                    self._place(piece, sq)
                    file += 1
                else:
                    raise ValueError(f"bad FEN character: {char!r}")
            if file != 8:
                raise ValueError(f"rank does not hold 8 squares: {row!r}")
        kings = [self.bitboards[Piece.WHITE_KING], self.bitboards[Piece.BLACK_KING]]
        if any(king.bit_count() != 1 for king in kings):
            raise ValueError("each side needs exactly one king")
        self.white_king = next(iter_bits(kings[0]))
        self.black_king = next(iter_bits(kings[1]))

    def _fen_en_passant(self, text: str) -> int:
        if text == "-":
            return 0
        sq = parse_square(text)
        file = sq & 7
        if self.white_to_move:
            if sq >> 3 != 5:
                raise ValueError(f"en passant square on the wrong rank: {text!r}")
            capturable = BLACK_EP[file] & self.bitboards[Piece.WHITE_PAWN]
        else:
            if sq >> 3 != 2:
                raise ValueError(f"en passant square on the wrong rank: {text!r}")
            capturable = WHITE_EP[file] & self.bitboards[Piece.BLACK_PAWN]
        return int(sq) if capturable else 0

    def _occupancy_index(self, piece: int) -> int:
        return Piece.WHITE_OCCUPIED if piece < Piece.BLACK_OCCUPIED else Piece.BLACK_OCCUPIED

    def _place(self, piece: int, sq: int) -> None:
        self.board[sq] = piece
        self.bitboards[piece] |= bit(sq)
        self.bitboards[self._occupancy_index(piece)] |= bit(sq)

    def _remove(self, piece: int, sq: int) -> None:
        clear = ALL_SQUARES ^ bit(sq)
        self.board[sq] = 0
        self.bitboards[piece] &= clear
        self.bitboards[self._occupancy_index(piece)] &= clear

    @staticmethod
    def _adjust_material(state: State, piece: int, sign: int) -> None:
        phase, weight = _MATERIAL.get(Piece(piece), (0, 0))
        state.phase += sign * phase
        state.material_index += sign * weight

    def make(self, move: int) -> None:
        """Play a move, pushing a new state; the move is trusted to be legal in shape."""
        fr, to = move_from(move), move_to(move)
        piece = self.board[fr]
        white = self.white_to_move
        if not piece:
            raise ValueError(f"no piece on square {fr}")
        if Piece(piece).is_white != white:
            raise ValueError("the piece does not belong to the side to move")
        self._undo.append((move, list(self.board), list(self.bitboards),
                           self.white_king, self.black_king))
        self.nodes += 1
        keys = self.keys
        prev = self.current
        st = State(
            hash=prev.hash, pawn_hash=prev.pawn_hash, phase=prev.phase,
            material_index=prev.material_index, unusual_material=prev.unusual_material,
            castling=prev.castling, reversible=prev.reversible + 1, ep=prev.ep,
            captured=prev.captured, move=move,
        )
        pawn = Piece.WHITE_PAWN if white else Piece.BLACK_PAWN
        king = Piece.WHITE_KING if white else Piece.BLACK_KING
        opp_pawn = Piece.BLACK_PAWN if white else Piece.WHITE_PAWN

        rights = CASTLE_TABLE[fr] & CASTLE_TABLE[to] & st.castling
        castle_key = keys.castling[int(st.castling ^ rights)]
        st.hash ^= castle_key
        st.pawn_hash ^= castle_key
        st.castling = Castling(rights)
        if st.ep:
            st.hash ^= keys.en_passant[st.ep & 7]
            st.ep = 0

        self._remove(piece, fr)
        mask = keys.pieces[piece][fr] ^ keys.pieces[piece][to]
        captured = self.board[to]
        st.captured = captured
        st.hash ^= mask
        if piece in (pawn, king):
            st.pawn_hash ^= mask
        self.white_to_move = not white
        self.height += 1
        st.hash ^= keys.side_to_move
        if piece == king:
            if white:
                self.white_king = to
            else:
                self.black_king = to

        flag = move & FLAG_MASK
        if captured:
            self._remove(captured, to)
            self._adjust_material(st, captured, -1)
            st.hash ^= keys.pieces[captured][to]
            if captured == opp_pawn:
                st.pawn_hash ^= keys.pieces[captured][to]
            st.reversible = 0
        elif flag == MoveFlag.CASTLE and to in _CASTLE_ROOKS:
            st.reversible = 0
            rook = Piece.WHITE_ROOK if white else Piece.BLACK_ROOK
            rook_from, rook_to = _CASTLE_ROOKS[Square(to)]
            self._remove(rook, rook_from)
            self._place(rook, rook_to)
            st.hash ^= keys.pieces[rook][rook_from] ^ keys.pieces[rook][rook_to]
        self._place(piece, to)

        if piece == pawn:
            st.reversible = 0
            if flag == MoveFlag.EN_PASSANT:
                victim = to ^ 8
                self._remove(opp_pawn, victim)
                self._adjust_material(st, opp_pawn, -1)
                st.hash ^= keys.pieces[opp_pawn][victim]
                st.pawn_hash ^= keys.pieces[opp_pawn][victim]
            elif flag >= MoveFlag.PROMOTE_KNIGHT:
                promoted = (PROMOTION_WHITE if white else PROMOTION_BLACK)[flag >> 12]
                light = Piece.WHITE_BISHOP_LIGHT if white else Piece.BLACK_BISHOP_LIGHT
                if promoted == light and bit(to) & DARK_SQUARES:
                    promoted = Piece(promoted + 1)
                if self.bitboards[promoted]:
                    st.unusual_material = True
                self._remove(pawn, to)
                self._place(promoted, to)
                self._adjust_material(st, promoted, 1)
                self._adjust_material(st, pawn, -1)
                st.hash ^= keys.pieces[promoted][to] ^ keys.pieces[pawn][to]
                st.pawn_hash ^= keys.pieces[pawn][to]
            elif to ^ fr == 16:
                neighbours = (WHITE_EP if white else BLACK_EP)[to & 7]
                if neighbours & self.bitboards[opp_pawn]:
                    st.ep = (fr + to) >> 1
                    st.hash ^= keys.en_passant[st.ep & 7]

        self.states.append(st)
        self.hash_stack.append(st.hash)

    def undo(self) -> None:
        """Take back the last move made with make()."""
        if not self._undo:
            raise ValueError("there is no move to undo")
        entry = self._undo[-1]
        if entry is None:
            raise ValueError("the last move was a null move")
        self._undo.pop()
        _, self.board, self.bitboards, self.white_king, self.black_king = entry
        self.states.pop()
        self.hash_stack.pop()
        self.height -= 1
        self.white_to_move = not self.white_to_move

    def make_null(self) -> None:
        """Pass the move to the opponent."""
        self.nodes += 1
        prev = self.current
        st = replace(
            prev,
            hash=prev.hash ^ self.keys.side_to_move,
            reversible=prev.reversible + 1,
            value=-(prev.value + self.tempo),
            flags=prev.flags & ~3,
            move=0,
        )
        if st.ep:
            st.hash ^= self.keys.en_passant[st.ep & 7]
            st.ep = 0
        self.white_to_move = not self.white_to_move
        self.height += 1
        self.states.append(st)
        self.hash_stack.append(st.hash)
        self._undo.append(None)

    def undo_null(self) -> None:
        """Take back the last null move."""
        if not self._undo or self._undo[-1] is not None:
            raise ValueError("the last move was not a null move")
        self._undo.pop()
        self.states.pop()
        self.hash_stack.pop()
        self.height -= 1
        self.white_to_move = not self.white_to_move