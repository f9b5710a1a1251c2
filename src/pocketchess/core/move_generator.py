"""Move generation over a Position: geometry tables, legality filter, attacks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pocketchess.core.enums import CastlingRights, Color, PieceType
from pocketchess.core.move import Move
from pocketchess.core.piece import Piece
from pocketchess.core.types import (
    A1,
    A8,
    B1,
    B8,
    C1,
    C8,
    D1,
    D8,
    E1,
    E8,
    F1,
    F8,
    G1,
    G8,
    H1,
    H8,
    Square,
    file_of,
    make_square,
    row_of,
)

if TYPE_CHECKING:
    from pocketchess.core.position import Position


# Offsets are (file delta, row delta); row grows towards white's side.
KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)

# Pawn geometry per color: (row step, start row, promotion row)
_PAWN_STEP: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
_PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
_PAWN_PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}


class _CastleSide:
    """Static geometry of one castling option."""

    __slots__ = ("right", "king_from", "king_to", "rook_from", "empty", "safe", "kingside")

    def __init__(
        self,
        right: CastlingRights,
        king_from: Square,
        king_to: Square,
        rook_from: Square,
        empty: tuple[Square, ...],
        safe: tuple[Square, ...],
        kingside: bool,
    ) -> None:
        self.right = right
        self.king_from = king_from
        self.king_to = king_to
        self.rook_from = rook_from
        self.empty = empty
        self.safe = safe
        self.kingside = kingside


_CASTLE_SIDES: dict[Color, tuple[_CastleSide, _CastleSide]] = {
    Color.WHITE: (
        _CastleSide(CastlingRights.WHITE_KINGSIDE, E1, G1, H1, (F1, G1), (E1, F1, G1), True),
        _CastleSide(
            CastlingRights.WHITE_QUEENSIDE, E1, C1, A1, (B1, C1, D1), (E1, D1, C1), False
        ),
    ),
    Color.BLACK: (
        _CastleSide(CastlingRights.BLACK_KINGSIDE, E8, G8, H8, (F8, G8), (E8, F8, G8), True),
        _CastleSide(
            CastlingRights.BLACK_QUEENSIDE, E8, C8, A8, (B8, C8, D8), (E8, D8, C8), False
        ),
    ),
}


# -- Geometry tables, built once at import ---------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    """Per-square jump targets; off-board (wrapping) targets are dropped."""
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = file_of(sq)
        row_idx = row_of(sq)
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = row_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    """Per-square rays; file and row advance in lockstep until the edge."""
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = file_of(sq)
        row_idx = row_of(sq)
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = row_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_attackers(color: Color) -> tuple[tuple[Square, ...], ...]:
    """Squares from which a *color* pawn would attack each square."""
    back = -_PAWN_STEP[color]
    return _build_targets(((-1, back), (1, back)))


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_PAWN_ATTACKERS: dict[Color, tuple[tuple[Square, ...], ...]] = {
    Color.WHITE: _build_pawn_attackers(Color.WHITE),
    Color.BLACK: _build_pawn_attackers(Color.BLACK),
}

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_DIAGONAL_SLIDERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_SLIDERS = (PieceType.ROOK, PieceType.QUEEN)


class MoveGenerator:
    """Move source bound to one :class:`Position`.

    The generator mutates the position via ``apply_move`` / ``unapply_move``
    while filtering, and leaves it exactly as found.
    """

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    # -- Generation --------------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """Pseudo-legal moves that do not leave the mover's king attacked."""
        pos = self._pos
        legal: list[Move] = []
        moving_color = pos.side_to_move

        for move in self.generate_pseudo_legal_moves():
            undo = pos.apply_move(move)
            try:
                if not self.is_in_check(moving_color):
                    legal.append(move)
            finally:
                pos.unapply_move(move, undo)
        return legal

    def legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves of the piece standing on *sq*."""
        return [m for m in self.generate_legal_moves() if m.from_sq == sq]

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """Moves obeying piece geometry and occupancy; the mover may be left in check."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        board = self._pos.board

        for sq in board.occupied(color):
            piece = board[sq]
            assert piece is not None
            ptype = piece.piece_type
            if ptype == PieceType.PAWN:
                self._gen_pawn(sq, color, moves)
            elif ptype == PieceType.KNIGHT:
                self._gen_jumps(sq, color, _KNIGHT_TARGETS[sq], moves)
            elif ptype == PieceType.BISHOP:
                self._gen_sliding(sq, color, _BISHOP_RAYS[sq], moves)
            elif ptype == PieceType.ROOK:
                self._gen_sliding(sq, color, _ROOK_RAYS[sq], moves)
            elif ptype == PieceType.QUEEN:
                self._gen_sliding(sq, color, _QUEEN_RAYS[sq], moves)
            else:
                self._gen_jumps(sq, color, _KING_TARGETS[sq], moves)
                self._gen_castling(sq, color, moves)
        return moves

    # -- Attacks ---------------------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?

        A missing king counts as "not in check".
        """
        king_sq = self._pos.board.find_king(color)
        if king_sq is None:
            return False
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Geometric attack test; pins and legality are not considered."""
        board = self._pos.board

        pawn = Piece(by_color, PieceType.PAWN)
        for from_sq in _PAWN_ATTACKERS[by_color][sq]:
            if board[from_sq] == pawn:
                return True

        knight = Piece(by_color, PieceType.KNIGHT)
        for from_sq in _KNIGHT_TARGETS[sq]:
            if board[from_sq] == knight:
                return True

        king = Piece(by_color, PieceType.KING)
        for from_sq in _KING_TARGETS[sq]:
            if board[from_sq] == king:
                return True

        return self._ray_attacked(
            sq, by_color, _BISHOP_RAYS[sq], _DIAGONAL_SLIDERS
        ) or self._ray_attacked(sq, by_color, _ROOK_RAYS[sq], _STRAIGHT_SLIDERS)

    def _ray_attacked(
        self,
        sq: Square,
        by_color: Color,
        rays: tuple[tuple[Square, ...], ...],
        sliders: tuple[PieceType, ...],
    ) -> bool:
        board = self._pos.board
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in sliders:
                    return True
                break
        return False

    # -- Per-piece generation --------------------------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._pos.board
        step = _PAWN_STEP[color]
        file_idx = file_of(sq)
        next_row = row_of(sq) + step
        if not 0 <= next_row < 8:
            return

        one_step = make_square(file_idx, next_row)
        if board.is_empty(one_step):
            self._add_pawn_move(sq, one_step, color, False, moves)
            if row_of(sq) == _PAWN_START_ROW[color]:
                two_step = make_square(file_idx, next_row + step)
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step))

        for df in (-1, 1):
            cap_file = file_idx + df
            if not 0 <= cap_file < 8:
                continue
            cap_sq = make_square(cap_file, next_row)
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, color, True, moves)
            elif cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq, is_capture=True, is_en_passant=True))

    @staticmethod
    def _add_pawn_move(
        from_sq: Square,
        to_sq: Square,
        color: Color,
        is_capture: bool,
        moves: list[Move],
    ) -> None:
        if row_of(to_sq) == _PAWN_PROMOTION_ROW[color]:
            for pt in PROMOTION_TYPES:
                moves.append(Move(from_sq, to_sq, promotion=pt, is_capture=is_capture))
        else:
            moves.append(Move(from_sq, to_sq, is_capture=is_capture))

    def _gen_jumps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._pos.board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq))
            elif target.color != color:
                moves.append(Move(sq, to_sq, is_capture=True))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._pos.board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq, is_capture=True))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._pos.board
        opponent = color.opposite
        rook = Piece(color, PieceType.ROOK)

        for side in _CASTLE_SIDES[color]:
            if not self._pos.castling & side.right:
                continue
            if king_sq != side.king_from or board[side.rook_from] != rook:
                continue
            if any(not board.is_empty(s) for s in side.empty):
                continue
            if any(self.is_square_attacked(s, opponent) for s in side.safe):
                continue
            moves.append(
                Move(
                    king_sq,
                    side.king_to,
                    is_castle_kingside=side.kingside,
                    is_castle_queenside=not side.kingside,
                )
            )
