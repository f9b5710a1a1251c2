"""Opponent move-selection protocol and the default random opponent."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Protocol

from pocketchess.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from pocketchess.core.move import Move
    from pocketchess.core.position import Position


class IOpponent(Protocol):
    """Anything that can pick one legal move for the side to move.

    Implementations receive a clone they may use freely but must leave it as
    they found it, and return ``None`` only when no legal move exists.
    """

    def choose_move(self, position: Position) -> Move | None: ...


class RandomOpponent:
    """Picks a uniformly random legal move."""

    __slots__ = ("_rng",)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def choose_move(self, position: Position) -> Move | None:
        moves = MoveGenerator(position).generate_legal_moves()
        if not moves:
            return None
        return self._rng.choice(moves)
