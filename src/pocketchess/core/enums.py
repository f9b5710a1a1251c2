"""Sides, piece kinds, castling bits and the status the rules engine reports."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side to move or owner of a piece."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def fen(self) -> str:
        """Side-to-move field of a FEN record."""
        return "w" if self is Color.WHITE else "b"

    @classmethod
    def from_fen(cls, text: str) -> Color:
        if text == "w":
            return cls.WHITE
        if text == "b":
            return cls.BLACK
        raise ValueError(f"Invalid side to move: {text!r}")

    def __str__(self) -> str:
        return self.name.lower()


_LETTERS = "PNBRQK"


class PieceType(IntEnum):
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def letter(self) -> str:
        """Uppercase English letter used by FEN and SAN."""
        return _LETTERS[self.value - 1]

    @classmethod
    def from_letter(cls, letter: str) -> PieceType:
        """Inverse of :attr:`letter`; case-insensitive."""
        idx = _LETTERS.find(letter.upper()) if len(letter) == 1 else -1
        if idx < 0:
            raise ValueError(f"Invalid piece letter: {letter!r}")
        return cls(idx + 1)


class CastlingRights(IntFlag):
    """Four independent castling bits."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def of(cls, color: Color, kingside: bool) -> CastlingRights:
        """The single right for *color* on the given wing."""
        if color == Color.WHITE:
            return cls.WHITE_KINGSIDE if kingside else cls.WHITE_QUEENSIDE
        return cls.BLACK_KINGSIDE if kingside else cls.BLACK_QUEENSIDE

    @classmethod
    def both(cls, color: Color) -> CastlingRights:
        return cls.WHITE_BOTH if color == Color.WHITE else cls.BLACK_BOTH


class GameStatus(IntEnum):
    """Terminal state of the side to move, as far as the rules engine sees it."""

    IN_PROGRESS = 0
    CHECKMATE = 1
    STALEMATE = 2
