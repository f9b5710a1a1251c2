"""Opponent worker-thread lifecycle and reply handoff to the controller."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from pocketchess.core.move import Move
from pocketchess.game.controller import GameController
from pocketchess.opponent.qt_bridge import OpponentWorker

if TYPE_CHECKING:
    from pocketchess.core.position import Position
    from pocketchess.opponent.base import IOpponent


class _OpponentCommandBus(QObject):
    """Signal bridge for issuing worker commands with queued delivery."""

    move_requested = pyqtSignal(object, int)
    cancel_requested = pyqtSignal()


class OpponentSession:
    """Runs opponent selection on a dedicated ``QThread``.

    Wire it up with :meth:`create_controller` (or pass :meth:`request_move` and
    :meth:`cancel` to a :class:`GameController` yourself).  Replies arrive on
    the thread owning this session and are passed to the controller, which
    drops anything that no longer matches its pending request.
    """

    __slots__ = (
        "__weakref__",
        "_controller",
        "_command_bus",
        "_thread",
        "_worker",
        "_is_started",
    )

    def __init__(
        self,
        opponent: IOpponent | None = None,
        parent: QObject | None = None,
    ) -> None:
        self._controller: GameController | None = None
        self._command_bus = _OpponentCommandBus(parent)
        self._thread = QThread(parent)
        self._worker = OpponentWorker(opponent)
        self._is_started = False

    @property
    def is_started(self) -> bool:
        return self._is_started

    def create_controller(self, **kwargs: object) -> GameController:
        """Create a controller whose opponent turns run through this session."""
        controller = GameController(
            request_opponent=self.request_move,
            cancel_opponent=self.cancel,
            **kwargs,  # type: ignore[arg-type]
        )
        self.attach(controller)
        return controller

    def attach(self, controller: GameController) -> None:
        self._controller = controller

    def setup(self) -> None:
        """Start the worker thread and connect signals."""
        if self._is_started:
            return
        self._worker.moveToThread(self._thread)
        self._command_bus.move_requested.connect(self._worker.request_move)
        self._command_bus.cancel_requested.connect(self._worker.cancel)
        self._worker.move_ready.connect(self._on_move_ready)
        self._worker.no_move.connect(self._on_no_move)
        self._worker.selection_cancelled.connect(self._on_cancelled)
        self._worker.selection_error.connect(self._on_error)
        self._thread.start()
        self._is_started = True

    def shutdown(self) -> None:
        """Cancel outstanding work and stop the worker thread."""
        if not self._is_started:
            return
        self.cancel()
        self._thread.quit()
        self._thread.wait(2000)
        self._is_started = False

    def request_move(self, position: Position, request_id: int) -> None:
        """Queue a selection for *position*; the reply is tagged with *request_id*."""
        if not self._is_started:
            self._on_error(request_id, "Opponent thread is not running")
            return
        self._command_bus.move_requested.emit(position, request_id)

    def cancel(self) -> None:
        if self._is_started:
            self._command_bus.cancel_requested.emit()

    # ── Worker replies ───────────────────────────────────────────────────

    def _on_move_ready(self, request_id: int, move_obj: object) -> None:
        if self._controller is None:
            return
        if not isinstance(move_obj, Move):
            self._controller.opponent_failed(request_id, "Opponent returned a non-move")
            return
        self._controller.deliver_opponent_move(request_id, move_obj)

    def _on_no_move(self, request_id: int) -> None:
        if self._controller is not None:
            self._controller.deliver_opponent_move(request_id, None)

    def _on_cancelled(self, request_id: int) -> None:
        if self._controller is not None:
            self._controller.opponent_failed(request_id, "cancelled")

    def _on_error(self, request_id: int, message: str) -> None:
        if self._controller is not None:
            self._controller.opponent_failed(request_id, message)
