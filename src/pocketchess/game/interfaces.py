"""Shared types for the game layer: modes, phases, settings and view state."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from pocketchess.core.enums import Color
from pocketchess.core.types import Square

if TYPE_CHECKING:
    from pocketchess.core.move import Move
    from pocketchess.core.position import Position


class GameMode(IntEnum):
    """Who plays the non-human side."""

    HUMAN_VS_OPPONENT = auto()
    PASS_AND_PLAY = auto()


class SessionPhase(IntEnum):
    """Finite-state-machine states of a session."""

    AWAITING_MOVE = auto()
    AWAITING_OPPONENT = auto()  # opponent reply outstanding; human input locked


@dataclass
class SessionSettings:
    """User-configurable session settings."""

    mode: GameMode = GameMode.HUMAN_VS_OPPONENT
    human_color: Color = Color.WHITE
    white_at_bottom: bool = True


@dataclass(frozen=True, slots=True)
class Highlight:
    """Snapshot of what a board renderer should emphasise."""

    selected: Square | None = None
    legal_targets: tuple[Square, ...] = ()
    last_move: tuple[Square, Square] | None = None
    king_in_check: Square | None = None


# position clone, request id
OpponentRequest = Callable[["Position", int], None]
# candidate promotion moves -> chosen move
PromotionChooser = Callable[[list["Move"]], "Move"]
