"""Qt bridge to run opponent move selection in a worker thread."""

from __future__ import annotations

import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from pocketchess.core.position import Position
from pocketchess.opponent.base import IOpponent, RandomOpponent


class OpponentWorker(QObject):
    """Thread-affine worker that asks an :class:`IOpponent` for a move."""

    move_ready = pyqtSignal(int, object)
    no_move = pyqtSignal(int)
    selection_cancelled = pyqtSignal(int)
    selection_error = pyqtSignal(int, str)

    def __init__(self, opponent: IOpponent | None = None) -> None:
        super().__init__()
        self._opponent: IOpponent = opponent if opponent is not None else RandomOpponent()
        self._cancel_event = threading.Event()

    @pyqtSlot(object, int)
    def request_move(self, position_obj: object, request_id: int) -> None:
        """Pick a move for *position_obj* and emit the outcome."""
        if not isinstance(position_obj, Position):
            self.selection_error.emit(request_id, "Opponent received invalid position")
            return

        self._cancel_event.clear()
        try:
            move = self._opponent.choose_move(position_obj)
        except Exception as exc:
            self.selection_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.selection_cancelled.emit(request_id)
            return

        if move is None:
            self.no_move.emit(request_id)
            return

        self.move_ready.emit(request_id, move)

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current selection."""
        self._cancel_event.set()
