"""Move descriptor and the undo record produced when a move is applied."""

from __future__ import annotations

from dataclasses import dataclass

from pocketchess.core.enums import CastlingRights, Color, PieceType
from pocketchess.core.piece import Piece
from pocketchess.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable description of a move; holds no reference to any board."""

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None
    is_capture: bool = False
    is_castle_kingside: bool = False
    is_castle_queenside: bool = False
    is_en_passant: bool = False

    @property
    def is_castle(self) -> bool:
        return self.is_castle_kingside or self.is_castle_queenside

    @property
    def uci(self) -> str:
        """Long algebraic form, e.g. ``e7e8q``."""
        promo = self.promotion.letter.lower() if self.promotion is not None else ""
        return square_name(self.from_sq) + square_name(self.to_sq) + promo

    def __str__(self) -> str:
        return self.uci


@dataclass(frozen=True, slots=True)
class UndoInfo:
    """State captured by :meth:`Position.apply_move` so the move can be reverted.

    Only meaningful together with the exact move and prior position it was
    produced from.
    """

    captured: Piece | None
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    fullmove_number: int
    side_to_move: Color
