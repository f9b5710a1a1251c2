"""High-level chess rules: check, checkmate and stalemate reporting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pocketchess.core.enums import GameStatus
from pocketchess.core.move_generator import MoveGenerator
from pocketchess.core.types import Square

if TYPE_CHECKING:
    from pocketchess.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Only reports facts; declaring a finished game is up to the caller.
    """

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def checked_king_square(position: Position) -> Square | None:
        """Square of the side-to-move king if it is in check."""
        if not Rules.is_in_check(position):
            return None
        return position.board.find_king(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        gen = MoveGenerator(position)
        return len(gen.generate_legal_moves()) == 0

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        gen = MoveGenerator(position)
        return len(gen.generate_legal_moves()) == 0

    @staticmethod
    def status(position: Position) -> GameStatus:
        """Classify the position for the side to move."""
        gen = MoveGenerator(position)
        if gen.generate_legal_moves():
            return GameStatus.IN_PROGRESS
        if gen.is_in_check(position.side_to_move):
            return GameStatus.CHECKMATE
        return GameStatus.STALEMATE
