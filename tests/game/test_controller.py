"""Tests for GameController."""

import random

from pocketchess.core.enums import Color, GameStatus, PieceType
from pocketchess.core.move import Move
from pocketchess.core.notation import (
    STARTING_FEN,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from pocketchess.core.piece import Piece
from pocketchess.core.position import Position
from pocketchess.core.rules import Rules
from pocketchess.core.types import (
    A7, A8, D8, E1, E2, E3, E4, E5, E7, G1, H4,
)
from pocketchess.game.controller import GameController
from pocketchess.game.interfaces import GameMode, SessionPhase, SessionSettings
from pocketchess.game.state import GameState
from pocketchess.opponent.base import RandomOpponent

E4_MOVE = Move(E2, E4)
E5_MOVE = Move(E7, E5)

PROMOTION_FEN = "8/P7/8/8/8/8/8/k6K w - - 0 1"


class _DeferredOpponent:
    """Records opponent requests so tests decide when (and whether) to reply."""

    def __init__(self) -> None:
        self.requests: list[tuple[Position, int]] = []
        self.cancels = 0

    def request(self, position: Position, request_id: int) -> None:
        self.requests.append((position, request_id))

    def cancel(self) -> None:
        self.cancels += 1

    @property
    def last_id(self) -> int:
        return self.requests[-1][1]


def _deferred_controller() -> tuple[GameController, _DeferredOpponent]:
    opp = _DeferredOpponent()
    ctrl = GameController(request_opponent=opp.request, cancel_opponent=opp.cancel)
    return ctrl, opp


def _pass_and_play() -> GameController:
    return GameController(GameState(SessionSettings(mode=GameMode.PASS_AND_PLAY)))


def _san(ctrl: GameController, san: str) -> Move:
    return parse_san(ctrl.state.position, san)


class TestSynchronousOpponent:
    def test_opponent_replies_immediately(self) -> None:
        ctrl = GameController(opponent=RandomOpponent(random.Random(7)))
        assert ctrl.select_square(E2) is False
        assert ctrl.select_square(E4) is True
        assert ctrl.state.ply_count == 2
        assert ctrl.state.side_to_move == Color.WHITE
        assert ctrl.phase == SessionPhase.AWAITING_MOVE

    def test_undo_returns_to_start(self) -> None:
        ctrl = GameController(opponent=RandomOpponent(random.Random(7)))
        ctrl.submit_move(E4_MOVE)
        assert ctrl.undo() is True
        assert position_to_fen(ctrl.state.position) == STARTING_FEN
        assert ctrl.state.ply_count == 0

    def test_opponent_without_moves(self) -> None:
        ctrl = GameController(GameState(SessionSettings(human_color=Color.BLACK)))
        ctrl.state.position = position_from_fen(
            "rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq g3 0 2"
        )
        assert ctrl.submit_move(Move(D8, H4)) is True
        assert ctrl.phase == SessionPhase.AWAITING_MOVE
        assert ctrl.state.ply_count == 1
        assert Rules.status(ctrl.state.position) == GameStatus.CHECKMATE

    def test_force_opponent_move_for_human_black(self) -> None:
        ctrl = GameController(
            GameState(SessionSettings(human_color=Color.BLACK)),
            opponent=RandomOpponent(random.Random(1)),
        )
        assert ctrl.force_opponent_move() is True
        assert ctrl.state.ply_count == 1
        assert ctrl.state.side_to_move == Color.BLACK

    def test_force_opponent_move_on_human_turn(self) -> None:
        ctrl = GameController()
        assert ctrl.force_opponent_move() is False
        assert ctrl.state.ply_count == 0


class TestDeferredOpponent:
    def test_request_carries_snapshot(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        assert ctrl.phase == SessionPhase.AWAITING_OPPONENT
        assert len(opp.requests) == 1
        snapshot, request_id = opp.requests[0]
        assert snapshot == ctrl.state.position
        assert snapshot is not ctrl.state.position
        assert ctrl.pending_request_id == request_id

    def test_human_input_rejected_while_waiting(self) -> None:
        ctrl, _ = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        assert ctrl.submit_move(E5_MOVE) is False
        assert ctrl.select_square(E7) is False
        assert ctrl.selected is None
        assert ctrl.force_opponent_move() is False
        assert ctrl.state.ply_count == 1

    def test_reply_applied(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        assert ctrl.deliver_opponent_move(opp.last_id, E5_MOVE) is True
        assert ctrl.phase == SessionPhase.AWAITING_MOVE
        assert ctrl.pending_request_id is None
        assert ctrl.state.sans == ["e4", "e5"]

    def test_stale_reply_after_reset(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        stale = opp.last_id
        ctrl.reset()
        assert opp.cancels == 1
        assert ctrl.phase == SessionPhase.AWAITING_MOVE
        assert ctrl.deliver_opponent_move(stale, E5_MOVE) is False
        assert ctrl.state.ply_count == 0

    def test_stale_reply_after_undo(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        stale = opp.last_id
        assert ctrl.undo() is True
        assert opp.cancels == 1
        assert ctrl.state.ply_count == 0
        assert ctrl.deliver_opponent_move(stale, E5_MOVE) is False
        assert position_to_fen(ctrl.state.position) == STARTING_FEN

    def test_new_request_gets_new_id(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        first = opp.last_id
        ctrl.reset()
        ctrl.submit_move(E4_MOVE)
        assert opp.last_id != first
        assert ctrl.deliver_opponent_move(first, E5_MOVE) is False
        assert ctrl.deliver_opponent_move(opp.last_id, E5_MOVE) is True

    def test_switch_to_pass_and_play_cancels(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        stale = opp.last_id
        assert ctrl.toggle_mode() == GameMode.PASS_AND_PLAY
        assert opp.cancels == 1
        assert ctrl.phase == SessionPhase.AWAITING_MOVE
        assert ctrl.deliver_opponent_move(stale, E5_MOVE) is False
        # Black is now moved by hand.
        assert ctrl.submit_move(E5_MOVE) is True
        assert len(opp.requests) == 1

    def test_failure_releases_lock(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        ctrl.opponent_failed(opp.last_id, "boom")
        assert ctrl.phase == SessionPhase.AWAITING_MOVE
        assert ctrl.state.ply_count == 1
        assert ctrl.force_opponent_move() is True
        assert len(opp.requests) == 2

    def test_stale_failure_ignored(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        ctrl.opponent_failed(opp.last_id + 5, "late")
        assert ctrl.phase == SessionPhase.AWAITING_OPPONENT

    def test_no_move_reply(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        assert ctrl.deliver_opponent_move(opp.last_id, None) is False
        assert ctrl.phase == SessionPhase.AWAITING_MOVE

    def test_illegal_reply_rejected(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        assert ctrl.deliver_opponent_move(opp.last_id, Move(E7, E4)) is False
        assert ctrl.phase == SessionPhase.AWAITING_MOVE
        assert ctrl.state.ply_count == 1


class TestSelection:
    def test_empty_square_ignored(self) -> None:
        ctrl = _pass_and_play()
        ctrl.select_square(E4)
        assert ctrl.selected is None

    def test_enemy_piece_ignored(self) -> None:
        ctrl = _pass_and_play()
        ctrl.select_square(E7)
        assert ctrl.selected is None

    def test_select_and_reselect(self) -> None:
        ctrl = _pass_and_play()
        ctrl.select_square(E2)
        assert ctrl.selected == E2
        ctrl.select_square(G1)
        assert ctrl.selected == G1

    def test_non_target_clears(self) -> None:
        ctrl = _pass_and_play()
        ctrl.select_square(E2)
        assert ctrl.select_square(E5) is False
        assert ctrl.selected is None
        assert ctrl.state.ply_count == 0

    def test_human_black_cannot_move_white(self) -> None:
        ctrl = GameController(GameState(SessionSettings(human_color=Color.BLACK)))
        assert ctrl.select_square(E2) is False
        assert ctrl.selected is None
        assert ctrl.select_square(E4) is False
        assert ctrl.submit_move(E4_MOVE) is False
        assert ctrl.state.ply_count == 0
        assert ctrl.state.side_to_move == Color.WHITE

    def test_toggle_into_opponent_mode_starts_its_turn(self) -> None:
        opp = _DeferredOpponent()
        ctrl = GameController(
            GameState(SessionSettings(mode=GameMode.PASS_AND_PLAY)),
            request_opponent=opp.request,
            cancel_opponent=opp.cancel,
        )
        ctrl.submit_move(E4_MOVE)
        ctrl.select_square(E7)
        assert ctrl.toggle_mode() == GameMode.HUMAN_VS_OPPONENT
        assert ctrl.selected is None
        assert ctrl.phase == SessionPhase.AWAITING_OPPONENT
        assert len(opp.requests) == 1
        assert ctrl.select_square(E7) is False
        assert ctrl.submit_move(E5_MOVE) is False
        assert ctrl.state.sans == ["e4"]

    def test_opponent_move_left_after_failure_is_not_playable(self) -> None:
        ctrl, opp = _deferred_controller()
        ctrl.submit_move(E4_MOVE)
        ctrl.opponent_failed(opp.last_id, "boom")
        assert ctrl.phase == SessionPhase.AWAITING_MOVE
        assert ctrl.select_square(E7) is False
        assert ctrl.selected is None
        assert ctrl.submit_move(E5_MOVE) is False
        assert ctrl.state.ply_count == 1

    def test_target_plays_move(self) -> None:
        ctrl = _pass_and_play()
        ctrl.select_square(E2)
        assert ctrl.select_square(E4) is True
        assert ctrl.selected is None
        assert ctrl.state.last_move == E4_MOVE

    def test_promotion_defaults_to_queen(self) -> None:
        ctrl = _pass_and_play()
        ctrl.state.position = position_from_fen(PROMOTION_FEN)
        ctrl.select_square(A7)
        assert ctrl.select_square(A8) is True
        assert ctrl.state.position.board[A8] == Piece(Color.WHITE, PieceType.QUEEN)
        assert ctrl.state.sans == ["a8=Q+"]

    def test_promotion_chooser(self) -> None:
        seen: list[int] = []

        def choose(candidates: list[Move]) -> Move:
            seen.append(len(candidates))
            return next(m for m in candidates if m.promotion == PieceType.KNIGHT)

        ctrl = GameController(
            GameState(SessionSettings(mode=GameMode.PASS_AND_PLAY)),
            choose_promotion=choose,
        )
        ctrl.state.position = position_from_fen(PROMOTION_FEN)
        ctrl.select_square(A7)
        ctrl.select_square(A8)
        assert seen == [4]
        assert ctrl.state.position.board[A8] == Piece(Color.WHITE, PieceType.KNIGHT)


class TestHighlight:
    def test_empty(self) -> None:
        hl = GameController().highlight()
        assert hl.selected is None
        assert hl.legal_targets == ()
        assert hl.last_move is None
        assert hl.king_in_check is None

    def test_targets_of_selection(self) -> None:
        ctrl = _pass_and_play()
        ctrl.select_square(E2)
        hl = ctrl.highlight()
        assert hl.selected == E2
        assert set(hl.legal_targets) == {E3, E4}

    def test_promotion_target_listed_once(self) -> None:
        ctrl = _pass_and_play()
        ctrl.state.position = position_from_fen(PROMOTION_FEN)
        ctrl.select_square(A7)
        assert ctrl.highlight().legal_targets == (A8,)

    def test_last_move_and_check(self) -> None:
        ctrl = _pass_and_play()
        for move in ["f3", "e5", "g4"]:
            ctrl.submit_move(_san(ctrl, move))
        ctrl.submit_move(Move(D8, H4))
        hl = ctrl.highlight()
        assert hl.last_move == (D8, H4)
        assert hl.king_in_check == E1


class TestEvents:
    def test_move_and_changed_events(self) -> None:
        ctrl = _pass_and_play()
        moves: list[tuple[Move, str]] = []
        changes: list[None] = []
        ctrl.events.on_move.append(lambda m, san: moves.append((m, san)))
        ctrl.events.on_changed.append(lambda: changes.append(None))
        ctrl.submit_move(E4_MOVE)
        assert moves == [(E4_MOVE, "e4")]
        assert changes

    def test_phase_events(self) -> None:
        ctrl, opp = _deferred_controller()
        phases: list[SessionPhase] = []
        ctrl.events.on_phase_changed.append(phases.append)
        ctrl.submit_move(E4_MOVE)
        ctrl.deliver_opponent_move(opp.last_id, E5_MOVE)
        assert phases == [SessionPhase.AWAITING_OPPONENT, SessionPhase.AWAITING_MOVE]

    def test_flip_board_notifies(self) -> None:
        ctrl = GameController()
        changes: list[None] = []
        ctrl.events.on_changed.append(lambda: changes.append(None))
        ctrl.flip_board()
        assert ctrl.state.settings.white_at_bottom is False
        assert len(changes) == 1
