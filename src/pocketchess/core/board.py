"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator

from pocketchess.core.enums import Color, PieceType
from pocketchess.core.piece import Piece
from pocketchess.core.types import Square, make_square, rank_number

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


class Board:
    """Mutable 64-cell board; each cell holds at most one :class:`Piece`."""

    __slots__ = ("_squares",)

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        self._squares[sq] = piece

    def __iter__(self) -> Iterator[Piece | None]:
        return iter(self._squares)

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    # -- Query helpers ------------------------------------------------------

    def occupied(self, color: Color) -> list[Square]:
        """Squares holding *color*'s pieces, in index order."""
        return [
            sq
            for sq, piece in enumerate(self._squares)
            if piece is not None and piece.color == color
        ]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        target = Piece(color, piece_type)
        return [sq for sq, piece in enumerate(self._squares) if piece == target]

    def find_king(self, color: Color) -> Square | None:
        """First square holding *color*'s king, or ``None`` if there is none."""
        king = Piece(color, PieceType.KING)
        for sq, piece in enumerate(self._squares):
            if piece == king:
                return sq
        return None

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        return b

    def clear(self) -> None:
        self._squares = [None] * 64

    def setup_initial(self) -> None:
        """Put the standard starting placement on this board in place."""
        self.clear()
        for f, pt in enumerate(_BACK_RANK):
            self[make_square(f, 0)] = Piece(Color.BLACK, pt)
            self[make_square(f, 1)] = Piece(Color.BLACK, PieceType.PAWN)
            self[make_square(f, 6)] = Piece(Color.WHITE, PieceType.PAWN)
            self[make_square(f, 7)] = Piece(Color.WHITE, pt)

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        b.setup_initial()
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(8):
            cells = []
            for file in range(8):
                p = self[make_square(file, row)]
                cells.append(str(p) if p else ".")
            rows.append(f"{rank_number(make_square(0, row))} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
