"""Position: complete game state (board plus metadata) with apply/unapply."""

from __future__ import annotations

from pocketchess.core.board import Board
from pocketchess.core.enums import CastlingRights, Color, PieceType
from pocketchess.core.move import Move, UndoInfo
from pocketchess.core.piece import Piece
from pocketchess.core.types import (
    A1,
    A8,
    D1,
    D8,
    F1,
    F8,
    H1,
    H8,
    Square,
    file_of,
    make_square,
    row_of,
)

# (color, kingside) -> (rook home, rook destination)
_CASTLE_ROOK_SQUARES: dict[tuple[Color, bool], tuple[Square, Square]] = {
    (Color.WHITE, True): (H1, F1),
    (Color.WHITE, False): (A1, D1),
    (Color.BLACK, True): (H8, F8),
    (Color.BLACK, False): (A8, D8),
}

# rook home square -> (owner, right lost when that rook moves or is taken)
_ROOK_HOMES: dict[Square, tuple[Color, CastlingRights]] = {
    rook_home: (color, CastlingRights.of(color, kingside))
    for (color, kingside), (rook_home, _) in _CASTLE_ROOK_SQUARES.items()
}


def en_passant_victim_square(move: Move) -> Square:
    """Square of the pawn removed by an en-passant *move*."""
    return make_square(file_of(move.to_sq), row_of(move.from_sq))


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    :meth:`apply_move` returns an :class:`UndoInfo` that the caller keeps and
    hands back to :meth:`unapply_move`; the position itself stores no history.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number

    @classmethod
    def initial(cls) -> Position:
        """Standard starting position, white to move."""
        return cls()

    def reset(self) -> None:
        """Return this position, board included, to the starting position."""
        self.board.setup_initial()
        self.side_to_move = Color.WHITE
        self.castling = CastlingRights.ALL
        self.en_passant = None
        self.halfmove_clock = 0
        self.fullmove_number = 1

    # ── Core move operations ─────────────────────────────────────────────

    def apply_move(self, move: Move) -> UndoInfo:
        """Apply *move* in place and return the record needed to revert it."""
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        if move.is_en_passant:
            capture_sq = en_passant_victim_square(move)
        else:
            capture_sq = move.to_sq
        captured = board[capture_sq]

        undo = UndoInfo(
            captured=captured,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            side_to_move=self.side_to_move,
        )

        # 1. En passant removes a pawn that is not on the destination square
        if move.is_en_passant:
            board[capture_sq] = None

        # 2. Castling drags the rook along
        if move.is_castle:
            rook_from, rook_to = _CASTLE_ROOK_SQUARES[
                (piece.color, move.is_castle_kingside)
            ]
            board[rook_to] = board[rook_from]
            board[rook_from] = None

        # 3. Relocate (and possibly promote) the moving piece
        if move.promotion is not None:
            board[move.to_sq] = piece.with_type(move.promotion)
        else:
            board[move.to_sq] = piece
        board[move.from_sq] = None

        # 4. Castling rights
        self._update_castling(move, piece, captured)

        # 5. En passant target for the opponent
        if piece.piece_type == PieceType.PAWN and abs(move.to_sq - move.from_sq) == 16:
            self.en_passant = (move.from_sq + move.to_sq) // 2
        else:
            self.en_passant = None

        # 6. Clocks
        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        # 7. Hand the move over
        self.side_to_move = self.side_to_move.opposite
        return undo

    def unapply_move(self, move: Move, undo: UndoInfo) -> None:
        """Revert *move* using the *undo* record produced when it was applied."""
        board = self.board
        piece = board[move.to_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.to_sq} to take back")

        if move.promotion is not None:
            piece = piece.with_type(PieceType.PAWN)
        board[move.from_sq] = piece

        if move.is_en_passant:
            board[move.to_sq] = None
            board[en_passant_victim_square(move)] = undo.captured
        else:
            board[move.to_sq] = undo.captured

        if move.is_castle:
            rook_from, rook_to = _CASTLE_ROOK_SQUARES[
                (undo.side_to_move, move.is_castle_kingside)
            ]
            board[rook_from] = board[rook_to]
            board[rook_to] = None

        self.castling = undo.castling
        self.en_passant = undo.en_passant
        self.halfmove_clock = undo.halfmove_clock
        self.fullmove_number = undo.fullmove_number
        self.side_to_move = undo.side_to_move

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(
        self, move: Move, piece: Piece, captured: Piece | None
    ) -> None:
        castling = self.castling
        if piece.piece_type == PieceType.KING:
            castling &= ~CastlingRights.both(piece.color)

        if piece.piece_type == PieceType.ROOK and move.from_sq in _ROOK_HOMES:
            home_color, right = _ROOK_HOMES[move.from_sq]
            if home_color == piece.color:
                castling &= ~right

        if (
            captured is not None
            and captured.piece_type == PieceType.ROOK
            and move.to_sq in _ROOK_HOMES
        ):
            home_color, right = _ROOK_HOMES[move.to_sq]
            if home_color == captured.color:
                castling &= ~right

        self.castling = castling

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Fully independent clone."""
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.board == other.board
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Position(side_to_move={self.side_to_move}, castling={self.castling!r}, "
            f"en_passant={self.en_passant}, halfmove_clock={self.halfmove_clock}, "
            f"fullmove_number={self.fullmove_number})\n{self.board!r}"
        )
