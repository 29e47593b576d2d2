from __future__ import annotations

from typing import Protocol

import chess

from .types import Piece, PieceType, Player, Square

_PIECE_TYPES: dict[PieceType, chess.PieceType] = {
    "pawn": chess.PAWN,
    "knight": chess.KNIGHT,
    "bishop": chess.BISHOP,
    "rook": chess.ROOK,
    "queen": chess.QUEEN,
    "king": chess.KING,
}
_PIECE_NAMES: dict[chess.PieceType, PieceType] = {v: k for k, v in _PIECE_TYPES.items()}


def _color(player: Player) -> chess.Color:
    return chess.WHITE if player == "white" else chess.BLACK


def _player(color: chess.Color) -> Player:
    return "white" if color == chess.WHITE else "black"


class ChessAdapter(Protocol):
    """Chess rules the card engine consumes. The adapter owns the board."""

    def is_legal_move(self, from_square: Square, to_square: Square, promotion: PieceType | None = None) -> bool: ...

    def apply_move(self, from_square: Square, to_square: Square, promotion: PieceType | None = None) -> bool: ...

    def piece_at(self, square: Square) -> Piece | None: ...

    def remove_piece_at(self, square: Square) -> Piece | None: ...

    def place_piece(self, square: Square, piece_type: PieceType, owner: Player) -> None: ...

    def is_valid_square(self, square: Square) -> bool: ...

    def squares_of(self, owner: Player) -> list[Square]: ...

    def king_square(self, owner: Player) -> Square | None: ...

    def is_in_check(self, player: Player) -> bool: ...

    def is_checkmate(self) -> bool: ...

    def is_stalemate(self) -> bool: ...

    def current_turn_owner(self) -> Player: ...

    def pass_turn(self) -> None: ...

    def fen(self) -> str: ...

    def copy(self) -> ChessAdapter:
        """Independent scratch board; mutating it never touches this one."""
        ...


class PythonChessAdapter:
    """ChessAdapter backed by a python-chess board."""

    def __init__(self, fen: str | None = None) -> None:
        self.board = chess.Board(fen) if fen else chess.Board()

    def _parse(self, square: Square) -> chess.Square:
        return chess.parse_square(square)

    def _move(self, from_square: Square, to_square: Square, promotion: PieceType | None) -> chess.Move | None:
        if not (self.is_valid_square(from_square) and self.is_valid_square(to_square)):
            return None
        promo = _PIECE_TYPES.get(promotion) if promotion else None
        return chess.Move(self._parse(from_square), self._parse(to_square), promotion=promo)

    def is_legal_move(self, from_square: Square, to_square: Square, promotion: PieceType | None = None) -> bool:
        move = self._move(from_square, to_square, promotion)
        return move is not None and self.board.is_legal(move)

    def apply_move(self, from_square: Square, to_square: Square, promotion: PieceType | None = None) -> bool:
        move = self._move(from_square, to_square, promotion)
        if move is None or not self.board.is_legal(move):
            return False
        self.board.push(move)
        return True

    def is_valid_square(self, square: Square) -> bool:
        return square in chess.SQUARE_NAMES

    def piece_at(self, square: Square) -> Piece | None:
        p = self.board.piece_at(self._parse(square))
        if p is None:
            return None
        return Piece(type=_PIECE_NAMES[p.piece_type], owner=_player(p.color))

    def remove_piece_at(self, square: Square) -> Piece | None:
        sq = self._parse(square)
        p = self.board.remove_piece_at(sq)
        self._touch(sq)
        if p is None:
            return None
        return Piece(type=_PIECE_NAMES[p.piece_type], owner=_player(p.color))

    def place_piece(self, square: Square, piece_type: PieceType, owner: Player) -> None:
        sq = self._parse(square)
        self.board.set_piece_at(sq, chess.Piece(_PIECE_TYPES[piece_type], _color(owner)))
        self._touch(sq)
        if len(self.board.pieces(chess.KING, _color(owner))) > 1:
            raise RuntimeError(f"Board holds two {owner} kings after placing on {square}")

    def _touch(self, sq: chess.Square) -> None:
        # Pieces moved by card effects forfeit castling from their home squares.
        self.board.castling_rights &= ~chess.BB_SQUARES[sq]

    def squares_of(self, owner: Player) -> list[Square]:
        return [
            chess.square_name(sq)
            for sq, p in self.board.piece_map().items()
            if p.color == _color(owner)
        ]

    def king_square(self, owner: Player) -> Square | None:
        sq = self.board.king(_color(owner))
        return chess.square_name(sq) if sq is not None else None

    def is_in_check(self, player: Player) -> bool:
        sq = self.board.king(_color(player))
        if sq is None:
            return False
        return self.board.is_attacked_by(not _color(player), sq)

    def is_checkmate(self) -> bool:
        return self.board.is_checkmate()

    def is_stalemate(self) -> bool:
        return self.board.is_stalemate()

    def current_turn_owner(self) -> Player:
        return _player(self.board.turn)

    def pass_turn(self) -> None:
        self.board.push(chess.Move.null())

    def fen(self) -> str:
        return self.board.fen()

    def copy(self) -> PythonChessAdapter:
        dup = PythonChessAdapter.__new__(PythonChessAdapter)
        dup.board = self.board.copy(stack=False)
        return dup
