"""Tests for the tic-tac-toe minimax AI."""

import pytest

from tictactoe.ai import MinimaxAI
from tictactoe.game import DRAW, EMPTY, WIN, Board, evaluate


def make_board(layout: str) -> Board:
    return Board(cells=[EMPTY if c == "." else c for c in layout])


def test_ai_takes_immediate_win():
    # O wins on 8; every other cell lets X complete 0-3-6 or 0-4-8.
    board = make_board("X.OXXO...")
    assert MinimaxAI(player="O").choose(board) == 8


def test_ai_blocks_threat():
    board = make_board("..X.OX...")
    assert MinimaxAI(player="O").choose(board) == 8


def test_ai_blocks_row_threat():
    board = make_board("XX..O....")
    assert MinimaxAI(player="O").choose(board) == 2


def test_ai_prefers_lowest_index_among_equal_scores():
    board = make_board("XX.OO....")
    assert MinimaxAI(player="O").choose(board) == 2


def test_ai_returns_empty_cell_and_leaves_board_untouched():
    board = make_board("X...O...X")
    before = list(board.cells)
    move = MinimaxAI(player="O").choose(board)
    assert board.cells == before
    assert board.is_cell_empty(move)


def test_ai_is_deterministic():
    board = make_board("....X....")
    assert MinimaxAI().choose(board) == MinimaxAI().choose(board)


def test_ai_rejects_full_board():
    with pytest.raises(RuntimeError):
        MinimaxAI().choose(make_board("XOXXOOOXX"))


def test_ai_rejects_finished_board():
    with pytest.raises(RuntimeError):
        MinimaxAI().choose(make_board("XXXOO...."))


def test_perfect_play_ends_in_draw():
    board = Board()
    players = {"X": MinimaxAI(player="X"), "O": MinimaxAI(player="O")}
    mark = "X"
    while not evaluate(board).is_terminal:
        board.place(players[mark].choose(board), mark)
        mark = "O" if mark == "X" else "X"
    assert evaluate(board).status == DRAW


def test_ai_never_loses_against_any_opponent():
    ai = MinimaxAI(player="O")
    results = set()

    def explore(board: Board) -> None:
        for move in board.empty_cells():
            child = board.clone()
            child.place(move, "X")
            outcome = evaluate(child)
            if not outcome.is_terminal:
                child.place(ai.choose(child), "O")
                outcome = evaluate(child)
            if outcome.is_terminal:
                results.add(outcome.winner)
                continue
            explore(child)

    explore(Board())
    assert "X" not in results
    assert "O" in results


def test_ai_as_x_converts_forced_win():
    board = make_board("XX.OO....")
    move = MinimaxAI(player="X").choose(board)
    board.place(move, "X")
    assert evaluate(board).status == WIN
