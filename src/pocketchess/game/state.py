"""Live position, move/undo history and session flags."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pocketchess.core.enums import Color
from pocketchess.core.move_generator import MoveGenerator
from pocketchess.core.notation import move_to_san
from pocketchess.core.position import Position
from pocketchess.game.interfaces import GameMode, SessionSettings

if TYPE_CHECKING:
    from pocketchess.core.move import Move, UndoInfo

_LOGGER = logging.getLogger(__name__)

HistoryRow = tuple[int, str, "str | None"]


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A single applied move together with what is needed to take it back."""

    move: Move
    undo: UndoInfo


@dataclass
class GameState:
    """Owns the live position and a linear, undoable history.

    ``entries`` and ``sans`` only change together, so they always have the
    same length.  Pure data and logic, no threading or UI.
    """

    settings: SessionSettings = field(default_factory=SessionSettings)
    position: Position = field(default_factory=Position.initial, init=False)
    entries: list[HistoryEntry] = field(default_factory=list, init=False)
    sans: list[str] = field(default_factory=list, init=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def reset(self) -> None:
        """Back to the standard starting position with empty history.

        The position object is reset in place, so references to it stay valid.
        """
        self.position.reset()
        self.entries.clear()
        self.sans.clear()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> HistoryEntry | None:
        """Apply *move* if it is legal from its source square.

        Returns the new history entry, or ``None`` when the move was ignored.
        """
        gen = MoveGenerator(self.position)
        if move not in gen.legal_moves_from(move.from_sq):
            _LOGGER.debug("Ignoring illegal move %s", move)
            return None

        san = move_to_san(self.position, move)
        undo = self.position.apply_move(move)
        entry = HistoryEntry(move, undo)
        self.entries.append(entry)
        self.sans.append(san)
        return entry

    def undo_one(self) -> bool:
        """Take back the last move. Returns ``False`` if there was none."""
        if not self.entries:
            return False
        entry = self.entries.pop()
        self.sans.pop()
        self.position.unapply_move(entry.move, entry.undo)
        return True

    def undo_smart(self) -> int:
        """Take back one full turn of the human player.

        Against an opponent, a second ply is taken back when the first one
        leaves the opponent to move.  Returns the number of plies undone.
        """
        if not self.undo_one():
            return 0
        if (
            self.settings.mode == GameMode.HUMAN_VS_OPPONENT
            and self.side_to_move != self.settings.human_color
            and self.undo_one()
        ):
            return 2
        return 1

    # ── Session flags ────────────────────────────────────────────────────

    @property
    def mode(self) -> GameMode:
        return self.settings.mode

    def toggle_mode(self) -> GameMode:
        self.settings.mode = (
            GameMode.PASS_AND_PLAY
            if self.settings.mode == GameMode.HUMAN_VS_OPPONENT
            else GameMode.HUMAN_VS_OPPONENT
        )
        return self.settings.mode

    def flip_board(self) -> bool:
        self.settings.white_at_bottom = not self.settings.white_at_bottom
        return self.settings.white_at_bottom

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def human_color(self) -> Color:
        return self.settings.human_color

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_opponent_turn(self) -> bool:
        return (
            self.settings.mode == GameMode.HUMAN_VS_OPPONENT
            and self.side_to_move != self.settings.human_color
        )

    @property
    def can_undo(self) -> bool:
        return bool(self.entries)

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.entries)

    @property
    def last_move(self) -> Move | None:
        return self.entries[-1].move if self.entries else None

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        return MoveGenerator(self.position).generate_legal_moves()

    def history_pairs(self) -> list[HistoryRow]:
        """SAN history grouped as ``(move number, white, black or None)``."""
        rows: list[HistoryRow] = []
        for idx in range(0, len(self.sans), 2):
            black = self.sans[idx + 1] if idx + 1 < len(self.sans) else None
            rows.append((idx // 2 + 1, self.sans[idx], black))
        return rows
