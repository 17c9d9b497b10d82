"""Turn and session state machine for a single tic-tac-toe play-through."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple
import logging

from .ai import MinimaxAI
from .game import BOARD_SIZE, Board, Outcome, Player, evaluate, other

logger = logging.getLogger(__name__)

AWAITING_MODE = "awaiting_mode"


@dataclass
class GameSession:
    """One game from mode selection through a win, a draw or a reset.

    Invalid input (occupied cell, move while finished, move while the AI
    reply is pending) is ignored rather than raised, so a stray click never
    breaks the game. In AI mode the human always plays X and the AI plays O.
    """

    board: Board = field(default_factory=Board)
    vs_ai: Optional[bool] = None
    current_player: Player = "X"
    active: bool = False
    outcome: Outcome = field(default_factory=Outcome)
    ai: MinimaxAI = field(default_factory=lambda: MinimaxAI(player="O"), repr=False)
    ai_pending: bool = False

    # ---- observers ----

    @property
    def status(self) -> str:
        if self.vs_ai is None:
            return AWAITING_MODE
        return self.outcome.status

    @property
    def winner(self) -> Optional[Player]:
        return self.outcome.winner

    @property
    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return self.outcome.line

    @property
    def turn(self) -> Player:
        """Mark expected to move next."""
        if self.ai_pending:
            return self.ai.player
        return self.current_player

    # ---- transitions ----

    def select_mode(self, vs_ai: bool) -> None:
        if self.vs_ai is not None:
            logger.debug("Mode already selected (vs_ai=%s); ignoring", self.vs_ai)
            return
        self.vs_ai = vs_ai
        self.reset()
        logger.info("New game started (%s)", "vs AI" if vs_ai else "two players")

    def attempt_move(self, index: int, defer_ai: bool = False) -> bool:
        """Play ``index`` for the current player; return False when ignored.

        In AI mode a successful move leaves the AI reply pending. It runs at
        once unless ``defer_ai`` is set, in which case the caller must invoke
        :meth:`play_ai_move` later.
        """
        if self.vs_ai is None or not self.active or self.ai_pending:
            logger.debug("Move %r ignored: session not accepting moves", index)
            return False
        if not 0 <= index < BOARD_SIZE or not self.board.place(
            index, self.current_player
        ):
            logger.debug("Move %r ignored: cell unavailable", index)
            return False

        logger.debug("%s plays cell %d", self.current_player, index)
        if self._update_outcome():
            return True

        if not self.vs_ai:
            self.current_player = other(self.current_player)
            return True

        self.ai_pending = True
        if not defer_ai:
            self.play_ai_move()
        return True

    def play_ai_move(self) -> Optional[int]:
        """Apply the pending AI reply and return its cell, if one is pending."""
        if not self.ai_pending or not self.active:
            return None
        try:
            index = self.ai.choose(self.board)
            self.board.place(index, self.ai.player)
            logger.debug("%s plays cell %d", self.ai.player, index)
            self._update_outcome()
        finally:
            self.ai_pending = False
        return index

    def reset(self) -> None:
        self.board.reset()
        self.current_player = "X"
        self.active = True
        self.outcome = Outcome()
        self.ai_pending = False

    # ---- helpers ----

    def _update_outcome(self) -> bool:
        self.outcome = evaluate(self.board)
        if not self.outcome.is_terminal:
            return False
        self.active = False
        if self.outcome.winner:
            logger.info(
                "Player %s wins on line %s", self.outcome.winner, self.outcome.line
            )
        else:
            logger.info("Game drawn")
        return True
