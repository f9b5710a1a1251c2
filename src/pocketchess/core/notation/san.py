"""SAN (Standard Algebraic Notation) rendering and parsing."""

from __future__ import annotations

import re

from pocketchess.core.enums import PieceType
from pocketchess.core.move import Move
from pocketchess.core.move_generator import MoveGenerator
from pocketchess.core.position import Position
from pocketchess.core.types import (
    file_letter,
    file_of,
    parse_square,
    rank_number,
    row_of,
    square_name,
)

_SAN_RE = re.compile(
    r"""
    ^(?P<piece>[NBRQK])?
    (?P<file>[a-h])?(?P<rank>[1-8])?
    x?
    (?P<dest>[a-h][1-8])
    (?:=(?P<promo>[NBRQ]))?
    $""",
    re.VERBOSE,
)
_CASTLE_TOKENS = {
    "O-O": True,
    "0-0": True,
    "O-O-O": False,
    "0-0-0": False,
}


def move_to_san(position: Position, move: Move) -> str:
    """Render a legal *move* in SAN against the *position* before the move.

    The position is simulated on for the check suffix and restored before
    returning.
    """
    piece = position.board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {square_name(move.from_sq)}")

    if move.is_castle:
        body = "O-O" if move.is_castle_kingside else "O-O-O"
    else:
        takes = move.is_capture or not position.board.is_empty(move.to_sq)
        if piece.piece_type == PieceType.PAWN:
            prefix = file_letter(move.from_sq) if takes else ""
        else:
            prefix = piece.piece_type.letter + _disambiguation(position, move)
        body = prefix + ("x" if takes else "") + square_name(move.to_sq)
        if move.promotion is not None:
            body += "=" + move.promotion.letter

    return body + _check_suffix(position, move)


def _disambiguation(position: Position, move: Move) -> str:
    """Shortest source qualifier telling *move* apart from same-type rivals."""
    board = position.board
    mover = board[move.from_sq]
    rivals = [
        m.from_sq
        for m in MoveGenerator(position).generate_legal_moves()
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and board[m.from_sq] == mover
    ]
    if not rivals:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        return file_letter(move.from_sq)
    if all(row_of(sq) != row_of(move.from_sq) for sq in rivals):
        return str(rank_number(move.from_sq))
    return square_name(move.from_sq)


def _check_suffix(position: Position, move: Move) -> str:
    undo = position.apply_move(move)
    try:
        gen = MoveGenerator(position)
        if not gen.is_in_check(position.side_to_move):
            return ""
        return "+" if gen.generate_legal_moves() else "#"
    finally:
        position.unapply_move(move, undo)


def parse_san(position: Position, san: str) -> Move:
    """Resolve *san* to the matching legal move in *position*.

    Check, mate and annotation marks are ignored.  Raises :class:`ValueError`
    when the text is malformed, matches no legal move, or matches several.
    """
    text = san.rstrip("+#!?")
    legal = MoveGenerator(position).generate_legal_moves()

    if text in _CASTLE_TOKENS:
        kingside = _CASTLE_TOKENS[text]
        for m in legal:
            if m.is_castle and m.is_castle_kingside == kingside:
                return m
        raise ValueError(f"Illegal move: {san}")

    match = _SAN_RE.match(text)
    if match is None:
        raise ValueError(f"Invalid SAN: {san!r}")

    piece_type = PieceType.from_letter(match["piece"]) if match["piece"] else PieceType.PAWN
    promotion = PieceType.from_letter(match["promo"]) if match["promo"] else None
    dest = parse_square(match["dest"])

    candidates = [
        m
        for m in legal
        if m.to_sq == dest
        and m.promotion == promotion
        and position.board[m.from_sq].piece_type == piece_type  # type: ignore[union-attr]
        and (match["file"] is None or file_letter(m.from_sq) == match["file"])
        and (match["rank"] is None or str(rank_number(m.from_sq)) == match["rank"])
    ]

    if not candidates:
        raise ValueError(f"Illegal move: {san}")
    if len(candidates) > 1:
        raise ValueError(f"Ambiguous move: {san} -> {[str(c) for c in candidates]}")
    return candidates[0]
