"""GameController: turns square selections into moves and runs opponent turns.

Coordinates: GameState, MoveGenerator, an opponent.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from pocketchess.core.enums import PieceType
from pocketchess.core.move import Move
from pocketchess.core.move_generator import MoveGenerator
from pocketchess.core.rules import Rules
from pocketchess.core.types import Square
from pocketchess.game.interfaces import (
    GameMode,
    Highlight,
    OpponentRequest,
    PromotionChooser,
    SessionPhase,
)
from pocketchess.game.state import GameState
from pocketchess.opponent.base import IOpponent, RandomOpponent

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, str], None]  # move, san
PhaseCallback = Callable[[SessionPhase], None]
ChangedCallback = Callable[[], None]


@dataclass
class ControllerEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_changed: list[ChangedCallback] = field(default_factory=list)


def _prefer_queen(candidates: list[Move]) -> Move:
    for move in candidates:
        if move.promotion == PieceType.QUEEN:
            return move
    return candidates[0]


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Orchestrates a session: selection, move submission, undo and opponent turns.

    Only one mutating operation runs at a time.  While an opponent reply is
    outstanding the controller sits in ``AWAITING_OPPONENT`` and refuses human
    moves; replies are matched against the current request id, so a reply to
    a request that was cancelled by ``reset`` or ``undo`` is dropped.

    Args:
        state: Session state to drive (a fresh one by default).
        opponent: Strategy used when no ``request_opponent`` is given.
        request_opponent: ``(Position, request_id) -> None``; hands the work
            elsewhere (e.g. a worker thread) which later calls
            :meth:`deliver_opponent_move`.
        cancel_opponent: ``() -> None``; called when a pending request is
            abandoned.
        choose_promotion: Picks among promotion moves for a tapped target;
            defaults to queening.
    """

    __slots__ = (
        "_state",
        "_opponent",
        "_request_opponent",
        "_cancel_opponent",
        "_choose_promotion",
        "_phase",
        "_selected",
        "_request_id",
        "events",
    )

    def __init__(
        self,
        state: GameState | None = None,
        *,
        opponent: IOpponent | None = None,
        request_opponent: OpponentRequest | None = None,
        cancel_opponent: Callable[[], None] | None = None,
        choose_promotion: PromotionChooser | None = None,
    ) -> None:
        self._state = state if state is not None else GameState()
        self._opponent: IOpponent = opponent if opponent is not None else RandomOpponent()
        self._request_opponent = request_opponent
        self._cancel_opponent = cancel_opponent
        self._choose_promotion = choose_promotion or _prefer_queen
        self._phase = SessionPhase.AWAITING_MOVE
        self._selected: Square | None = None
        self._request_id = 0
        self.events = ControllerEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def selected(self) -> Square | None:
        return self._selected

    @property
    def pending_request_id(self) -> int | None:
        """Id of the outstanding opponent request, if any."""
        if self._phase != SessionPhase.AWAITING_OPPONENT:
            return None
        return self._request_id

    # ── Human input ──────────────────────────────────────────────────────

    def select_square(self, sq: Square) -> bool:
        """Handle a tap on *sq*. Returns True if a move was played."""
        if not self._accepts_human_input():
            return False

        piece = self._state.position.board[sq]
        own_piece = piece is not None and piece.color == self._state.side_to_move

        if self._selected is None:
            if own_piece:
                self._selected = sq
                self._emit_changed()
            return False

        gen = MoveGenerator(self._state.position)
        candidates = [m for m in gen.legal_moves_from(self._selected) if m.to_sq == sq]
        if candidates:
            move = candidates[0]
            if len(candidates) > 1:
                move = self._choose_promotion(candidates)
            return self.submit_move(move)

        self._selected = sq if own_piece else None
        self._emit_changed()
        return False

    def submit_move(self, move: Move) -> bool:
        """Apply a human move. Returns True if legal and applied."""
        if not self._accepts_human_input():
            _LOGGER.debug("Move %s rejected: not the human's turn", move)
            return False
        if not self._apply(move):
            return False
        self._maybe_start_opponent_turn()
        return True

    # ── Session commands ─────────────────────────────────────────────────

    def reset(self) -> None:
        self._cancel_pending()
        self._selected = None
        self._state.reset()
        self._emit_changed()

    def undo(self) -> bool:
        """Undo one human turn (see :meth:`GameState.undo_smart`)."""
        self._cancel_pending()
        self._selected = None
        undone = self._state.undo_smart()
        self._emit_changed()
        return undone > 0

    def toggle_mode(self) -> GameMode:
        """Switch modes. Entering opponent mode on its turn starts that turn."""
        mode = self._state.toggle_mode()
        self._selected = None
        if mode == GameMode.PASS_AND_PLAY:
            self._cancel_pending()
        self._emit_changed()
        if mode == GameMode.HUMAN_VS_OPPONENT:
            self._maybe_start_opponent_turn()
        return mode

    def flip_board(self) -> None:
        self._state.flip_board()
        self._emit_changed()

    def force_opponent_move(self) -> bool:
        """Let the opponent move now if it is its turn."""
        if self._phase != SessionPhase.AWAITING_MOVE:
            return False
        return self._maybe_start_opponent_turn()

    # ── Opponent turn ────────────────────────────────────────────────────

    def deliver_opponent_move(self, request_id: int, move: Move | None) -> bool:
        """Accept the reply to request *request_id*. Stale replies are dropped."""
        if request_id != self.pending_request_id:
            _LOGGER.debug("Discarding stale opponent reply for request %d", request_id)
            return False

        self._set_phase(SessionPhase.AWAITING_MOVE)
        if move is None:
            _LOGGER.info("Opponent has no move (request %d)", request_id)
            self._emit_changed()
            return False
        if not self._apply(move):
            _LOGGER.warning("Opponent returned illegal move %s", move)
            self._emit_changed()
            return False
        return True

    def opponent_failed(self, request_id: int, message: str) -> None:
        """Release the input lock after a failed opponent request."""
        if request_id != self.pending_request_id:
            return
        _LOGGER.warning("Opponent request %d failed: %s", request_id, message)
        self._set_phase(SessionPhase.AWAITING_MOVE)
        self._emit_changed()

    # ── View state ───────────────────────────────────────────────────────

    def highlight(self) -> Highlight:
        position = self._state.position
        targets: tuple[Square, ...] = ()
        if self._selected is not None:
            gen = MoveGenerator(position)
            targets = tuple(
                dict.fromkeys(m.to_sq for m in gen.legal_moves_from(self._selected))
            )
        last = self._state.last_move
        return Highlight(
            selected=self._selected,
            legal_targets=targets,
            last_move=(last.from_sq, last.to_sq) if last is not None else None,
            king_in_check=Rules.checked_king_square(position),
        )

    # ── Internal helpers ─────────────────────────────────────────────────

    def _accepts_human_input(self) -> bool:
        return (
            self._phase == SessionPhase.AWAITING_MOVE
            and not self._state.is_opponent_turn
        )

    def _apply(self, move: Move) -> bool:
        entry = self._state.apply_move(move)
        if entry is None:
            return False
        self._selected = None
        san = self._state.sans[-1]
        for cb in self.events.on_move:
            cb(move, san)
        self._emit_changed()
        return True

    def _maybe_start_opponent_turn(self) -> bool:
        if not self._state.is_opponent_turn:
            return False

        self._request_id += 1
        request_id = self._request_id
        snapshot = self._state.position.copy()
        self._set_phase(SessionPhase.AWAITING_OPPONENT)

        if self._request_opponent is not None:
            self._request_opponent(snapshot, request_id)
        else:
            self.deliver_opponent_move(request_id, self._opponent.choose_move(snapshot))
        return True

    def _cancel_pending(self) -> None:
        if self._phase != SessionPhase.AWAITING_OPPONENT:
            return
        _LOGGER.debug("Cancelling opponent request %d", self._request_id)
        self._request_id += 1
        if self._cancel_opponent is not None:
            self._cancel_opponent()
        self._set_phase(SessionPhase.AWAITING_MOVE)

    def _set_phase(self, phase: SessionPhase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_changed(self) -> None:
        for cb in self.events.on_changed:
            cb()
