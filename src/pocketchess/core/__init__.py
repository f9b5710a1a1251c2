"""Core domain layer: pure chess logic with zero external dependencies.

Quick start::

    from pocketchess.core import Position, MoveGenerator

    pos = Position.initial()
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from pocketchess.core.board import Board
from pocketchess.core.enums import CastlingRights, Color, GameStatus, PieceType
from pocketchess.core.move import Move, UndoInfo
from pocketchess.core.move_generator import MoveGenerator
from pocketchess.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from pocketchess.core.piece import Piece
from pocketchess.core.position import Position
from pocketchess.core.rules import Rules
from pocketchess.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_number,
    row_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameStatus",
    "PieceType",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_number",
    "row_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "UndoInfo",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_san",
    "position_from_fen",
    "position_to_fen",
]
