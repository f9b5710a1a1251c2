"""Game management layer: session state machine and selection controller.

Quick start::

    from pocketchess.game import GameController

    ctrl = GameController()
    ctrl.select_square(E2)
    ctrl.select_square(E4)   # the built-in opponent replies at once
    ctrl.undo()              # back to the start position
"""

from pocketchess.game.controller import ControllerEvents, GameController
from pocketchess.game.interfaces import (
    GameMode,
    Highlight,
    SessionPhase,
    SessionSettings,
)
from pocketchess.game.state import GameState, HistoryEntry

__all__ = [
    "ControllerEvents",
    "GameController",
    "GameMode",
    "GameState",
    "Highlight",
    "HistoryEntry",
    "SessionPhase",
    "SessionSettings",
]
