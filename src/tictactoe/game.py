"""Core rules for tic-tac-toe: the board, winning lines and outcome detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Player = str  # "X" or "O"

# Server-internal: 'X', 'O', or ' ' (space) for empty
EMPTY = " "
BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

IN_PROGRESS = "in_progress"
WIN = "win"
DRAW = "draw"


def other(player: Player) -> Player:
    return "O" if player == "X" else "X"


@dataclass(frozen=True)
class Outcome:
    """Classification of a board: still playing, won by a mark, or drawn."""

    status: str = IN_PROGRESS
    winner: Optional[Player] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != IN_PROGRESS


@dataclass
class Board:
    cells: List[str] = field(default_factory=lambda: [EMPTY] * BOARD_SIZE)

    def is_cell_empty(self, index: int) -> bool:
        if not 0 <= index < BOARD_SIZE:
            raise IndexError(f"Cell index {index} is outside 0..{BOARD_SIZE - 1}")
        return self.cells[index] == EMPTY

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self.cells) if c == EMPTY]

    def is_full(self) -> bool:
        return all(c != EMPTY for c in self.cells)

    def place(self, index: int, player: Player) -> bool:
        """Mark an empty cell; an occupied cell leaves the board untouched."""
        if not self.is_cell_empty(index):
            return False
        self.cells[index] = player
        return True

    def reset(self) -> None:
        self.cells[:] = [EMPTY] * BOARD_SIZE

    def clone(self) -> "Board":
        return Board(cells=self.cells.copy())

    def evaluate(self) -> Outcome:
        return evaluate(self)


def evaluate(board: Board) -> Outcome:
    """Return the first completed line's winner, else draw when full."""
    cells = board.cells
    for a, b, c in WINNING_LINES:
        v = cells[a]
        if v != EMPTY and v == cells[b] == cells[c]:
            return Outcome(status=WIN, winner=v, line=(a, b, c))
    if board.is_full():
        return Outcome(status=DRAW)
    return Outcome()
