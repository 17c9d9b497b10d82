"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import os
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import DRAW, EMPTY
from .session import GameSession

logger = logging.getLogger(__name__)


@dataclass
class ActiveGame:
    """Registry entry pairing a game session with the lock guarding it."""

    session: GameSession
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


GAMES: Dict[str, ActiveGame] = {}
app = FastAPI(title="Tic-Tac-Toe", description="Tic-tac-toe played in the browser")

AI_THINK_DELAY: float = float(os.environ.get("TICTACTOE_AI_DELAY", "0.5"))


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    vs_ai: bool = Field(
        default=True,
        alias="vsAi",
        description="Play against the minimax AI instead of a second human",
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_game(vs_ai: bool) -> Tuple[str, ActiveGame]:
    """Create a new game, select its mode and register it for later access."""

    session = GameSession()
    session.select_mode(vs_ai)
    entry = ActiveGame(session=session)
    game_id = uuid.uuid4().hex
    GAMES[game_id] = entry
    return game_id, entry


def _get_game(game_id: str) -> ActiveGame:
    try:
        return GAMES[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    entry = GAMES.get(game_id)
    if not entry:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with entry.lock:
        index = entry.session.play_ai_move()
    if index is None:
        logger.debug("AI reply for game %s no longer pending", game_id)


def _status_message(session: GameSession) -> str:
    if session.winner:
        return f"Player {session.winner} Wins!"
    if session.outcome.status == DRAW:
        return "It's a Draw!"
    return "Tic-Tac-Toe"


def _serialize_game(game_id: str, entry: ActiveGame) -> Dict[str, object]:
    with entry.lock:
        session = entry.session
        winning_line = session.winning_line
        return {
            "id": game_id,
            "vsAi": session.vs_ai,
            "status": session.status,
            "active": session.active,
            "currentPlayer": session.turn,
            "cells": [c if c != EMPTY else "" for c in session.board.cells],
            "winner": session.winner,
            "winningLine": list(winning_line) if winning_line else None,
            "message": _status_message(session),
            "aiPending": session.ai_pending,
        }


def _apply_player_move(
    game_id: str,
    entry: ActiveGame,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    with entry.lock:
        session = entry.session
        accepted = session.attempt_move(cell_index, defer_ai=True)
        should_schedule_ai = accepted and session.ai_pending

    if not accepted:
        logger.debug("Game %s ignored move on cell %d", game_id, cell_index)
    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, entry = _create_game(request.vs_ai)
    return _serialize_game(game_id, entry)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    entry = _get_game(game_id)
    return _serialize_game(game_id, entry)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    entry = _get_game(game_id)
    _apply_player_move(game_id, entry, request.cell_index, background_tasks)
    return _serialize_game(game_id, entry)


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    entry = _get_game(game_id)
    with entry.lock:
        entry.session.reset()
    return _serialize_game(game_id, entry)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic-Tac-Toe</title>
    <style>
      body {
        font-family: sans-serif;
        display: flex;
        flex-direction: column;
        align-items: center;
        margin-top: 3rem;
        background: #f4f4f8;
      }
      .hidden {
        display: none !important;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 100px);
        gap: 6px;
        margin: 1.5rem 0;
      }
      .cell {
        width: 100px;
        height: 100px;
        font-size: 3rem;
        border: none;
        border-radius: 8px;
        background: #fff;
        cursor: pointer;
      }
      .cell.win {
        background: #9be39b;
      }
      button.action {
        padding: 0.6rem 1.4rem;
        margin: 0 0.4rem;
        font-size: 1rem;
        cursor: pointer;
      }
    </style>
  </head>
  <body>
    <h1 id=\"status\">Tic-Tac-Toe</h1>
    <div id=\"mode-selection\">
      <button class=\"action\" id=\"multiplayer-btn\">Two players</button>
      <button class=\"action\" id=\"ai-btn\">Play vs AI</button>
    </div>
    <div id=\"game-container\" class=\"hidden\">
      <div id=\"board\"></div>
      <button class=\"action\" id=\"reset\">Reset</button>
    </div>
    <script>
      const statusText = document.getElementById("status");
      const boardEl = document.getElementById("board");
      const cells = [];
      let gameId = null;
      let pollTimer = null;

      for (let i = 0; i < 9; i++) {
        const cell = document.createElement("button");
        cell.className = "cell";
        cell.addEventListener("click", () => post(`/api/game/${gameId}/move`, { cellIndex: i }));
        boardEl.appendChild(cell);
        cells.push(cell);
      }

      function render(state) {
        gameId = state.id;
        statusText.textContent = state.message;
        const line = state.winningLine || [];
        state.cells.forEach((mark, i) => {
          cells[i].textContent = mark;
          cells[i].classList.toggle("win", line.includes(i));
        });
        clearTimeout(pollTimer);
        if (state.aiPending) {
          pollTimer = setTimeout(refresh, 250);
        }
      }

      async function post(url, body) {
        const response = await fetch(url, {
          method: "POST",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify(body || {}),
        });
        if (response.ok) {
          render(await response.json());
        }
      }

      async function refresh() {
        const response = await fetch(`/api/game/${gameId}`);
        if (response.ok) {
          render(await response.json());
        }
      }

      function startGame(vsAi) {
        document.getElementById("mode-selection").classList.add("hidden");
        document.getElementById("game-container").classList.remove("hidden");
        post("/api/game", { vsAi });
      }

      document.getElementById("multiplayer-btn").addEventListener("click", () => startGame(false));
      document.getElementById("ai-btn").addEventListener("click", () => startGame(true));
      document.getElementById("reset").addEventListener("click", () => post(`/api/game/${gameId}/reset`));
    </script>
  </body>
</html>
"""
