"""TicTacTree package exposing tic-tac-toe rules, the search engine, and the web application."""

from .ai import MinimaxAI, SearchNode, compute_best_response, search, select_reply
from .game import Position, TicTacToeGame, evaluate, successors
from .ui import app

__all__ = [
    "MinimaxAI",
    "Position",
    "SearchNode",
    "TicTacToeGame",
    "app",
    "compute_best_response",
    "evaluate",
    "search",
    "select_reply",
    "successors",
]
