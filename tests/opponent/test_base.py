"""Tests for the random opponent."""

import random

from pocketchess.core.move_generator import MoveGenerator
from pocketchess.core.notation import position_from_fen
from pocketchess.core.position import Position
from pocketchess.opponent.base import IOpponent, RandomOpponent

MATED_FEN = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class TestRandomOpponent:
    def test_returns_legal_move(self) -> None:
        pos = Position.initial()
        move = RandomOpponent(random.Random(0)).choose_move(pos)
        assert move in MoveGenerator(pos).generate_legal_moves()

    def test_seeded_choice_is_repeatable(self) -> None:
        pos = Position.initial()
        first = RandomOpponent(random.Random(42)).choose_move(pos)
        second = RandomOpponent(random.Random(42)).choose_move(pos)
        assert first == second

    def test_no_move_when_mated(self) -> None:
        pos = position_from_fen(MATED_FEN)
        assert RandomOpponent().choose_move(pos) is None

    def test_leaves_position_untouched(self) -> None:
        pos = position_from_fen(
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
        )
        before = pos.copy()
        RandomOpponent(random.Random(5)).choose_move(pos)
        assert pos == before

    def test_satisfies_protocol(self) -> None:
        opponent: IOpponent = RandomOpponent()
        assert opponent.choose_move(Position.initial()) is not None
