"""Full-depth Minimax AI with a transposition table for tic-tac-toe."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
import logging
import math

from .game import DRAW, WIN, Board, Player, evaluate, other

logger = logging.getLogger(__name__)


@dataclass
class MinimaxAI:
    """AI player that searches the whole remaining game tree.

    Leaves score +1 for a line completed by ``player``, -1 for a line
    completed by the opponent and 0 for a full board. Scores are not
    discounted by depth, so ties between equally good cells go to the
    lowest index.
    """

    player: Player = "O"
    _tt: Dict[Tuple[Tuple[str, ...], bool], int] = field(
        default_factory=dict, repr=False
    )

    # ---- public API ----

    def choose(self, board: Board) -> int:
        moves = board.empty_cells()
        if not moves or evaluate(board).is_terminal:
            raise RuntimeError("No valid moves available")

        best_score = -math.inf
        best_move: Optional[int] = None
        for move in moves:
            child = board.clone()
            child.place(move, self.player)
            score = self._minimax(child, False)
            if score > best_score:
                best_score, best_move = score, move

        assert best_move is not None
        logger.debug(
            "AI %s picks cell %d (score %d, %d positions cached)",
            self.player,
            best_move,
            best_score,
            len(self._tt),
        )
        return best_move

    # ---- core search ----

    def _minimax(self, board: Board, maximizing: bool) -> int:
        outcome = evaluate(board)
        if outcome.status == WIN:
            return 1 if outcome.winner == self.player else -1
        if outcome.status == DRAW:
            return 0

        key = (tuple(board.cells), maximizing)
        cached = self._tt.get(key)
        if cached is not None:
            return cached

        mark = self.player if maximizing else other(self.player)
        results = []
        for move in board.empty_cells():
            child = board.clone()
            child.place(move, mark)
            results.append(self._minimax(child, not maximizing))

        value = max(results) if maximizing else min(results)
        self._tt[key] = value
        return value
