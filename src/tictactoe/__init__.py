"""Tic-tac-toe package exposing game logic, the minimax AI, and the web application."""

from .ai import MinimaxAI
from .game import Board, Outcome, evaluate
from .session import GameSession
from .ui import app

__all__ = ["Board", "GameSession", "MinimaxAI", "Outcome", "app", "evaluate"]
