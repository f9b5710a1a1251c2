"""FEN parsing and serialisation.

Only the shape of each field is checked; whether the resulting position is
reachable or sensible is not.
"""

from __future__ import annotations

from pocketchess.core.board import Board
from pocketchess.core.enums import CastlingRights, Color
from pocketchess.core.piece import Piece
from pocketchess.core.position import Position
from pocketchess.core.types import Square, make_square, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# FEN order: K Q k q
_CASTLING_ORDER: tuple[tuple[str, CastlingRights], ...] = tuple(
    (letter if color == Color.WHITE else letter.lower(), CastlingRights.of(color, kingside))
    for color in Color
    for kingside, letter in ((True, "K"), (False, "Q"))
)


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`.

    The two clock fields may be omitted and default to ``0`` and ``1``.
    Raises :class:`ValueError` for any malformed field.
    """
    fields = fen.split()
    if not 4 <= len(fields) <= 6:
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    board = _parse_placement(fields[0])
    side = Color.from_fen(fields[1])
    castling = _parse_castling(fields[2])
    ep: Square | None = None if fields[3] == "-" else parse_square(fields[3])

    try:
        clocks = [int(text) for text in fields[4:]]
    except ValueError:
        raise ValueError(f"Invalid FEN clock fields: {fen!r}") from None
    halfmove = clocks[0] if clocks else 0
    fullmove = clocks[1] if len(clocks) > 1 else 1

    return Position(board, side, castling, ep, halfmove, fullmove)


def _parse_placement(text: str) -> Board:
    rows = text.split("/")
    if len(rows) != 8:
        raise ValueError(f"FEN placement must have 8 ranks: {text!r}")

    board = Board()
    # The first FEN rank is rank 8, which is row 0.
    for row, row_text in enumerate(rows):
        file = 0
        for ch in row_text:
            if ch in "12345678":
                file += int(ch)
            elif file < 8:
                board[make_square(file, row)] = Piece.from_char(ch)
                file += 1
            else:
                file = 9
            if file > 8:
                break
        if file != 8:
            raise ValueError(f"FEN rank {8 - row} is not 8 squares wide: {row_text!r}")
    return board


def _parse_castling(text: str) -> CastlingRights:
    rights = CastlingRights.NONE
    if text == "-":
        return rights
    known = dict(_CASTLING_ORDER)
    for ch in text:
        right = known.get(ch)
        if right is None or rights & right:
            raise ValueError(f"Invalid FEN castling field: {text!r}")
        rights |= right
    return rights


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to a six-field FEN string."""
    ranks: list[str] = []
    for row in range(8):
        rank = ""
        gap = 0
        for file in range(8):
            piece = pos.board[make_square(file, row)]
            if piece is None:
                gap += 1
                continue
            rank += (str(gap) if gap else "") + str(piece)
            gap = 0
        ranks.append(rank + (str(gap) if gap else ""))

    castling = "".join(ch for ch, right in _CASTLING_ORDER if pos.castling & right) or "-"
    ep = "-" if pos.en_passant is None else square_name(pos.en_passant)
    return " ".join(
        [
            "/".join(ranks),
            pos.side_to_move.fen,
            castling,
            ep,
            str(pos.halfmove_clock),
            str(pos.fullmove_number),
        ]
    )
