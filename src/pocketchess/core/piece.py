"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from pocketchess.core.enums import Color, PieceType

# White glyphs start at U+2654 in K, Q, R, B, N, P order; black ones follow.
_GLYPH_ORDER = (
    PieceType.KING,
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.PAWN,
)
_WHITE_KING_CODEPOINT = 0x2654


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable (side, type) pair occupying one board cell."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN character: uppercase for white, lowercase for black."""
        letter = self.piece_type.letter
        return letter if self.color == Color.WHITE else letter.lower()

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Inverse of ``str(piece)``, e.g. ``'n'`` is a black knight."""
        try:
            piece_type = PieceType.from_letter(char)
        except ValueError:
            raise ValueError(f"Invalid piece character: {char!r}") from None
        return cls(Color.WHITE if char.isupper() else Color.BLACK, piece_type)

    def with_type(self, piece_type: PieceType) -> Piece:
        """Same-colored piece of another type (promotion / demotion)."""
        return Piece(self.color, piece_type)

    @property
    def symbol(self) -> str:
        """Unicode chess glyph for renderers."""
        offset = _GLYPH_ORDER.index(self.piece_type) + 6 * self.color.value
        return chr(_WHITE_KING_CODEPOINT + offset)
