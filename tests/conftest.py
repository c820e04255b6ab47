"""Shared fixtures for TicTacTree tests."""

import pytest

from tictactree.game import AI, HUMAN, Position

CELL_VALUES = {"X": AI, "O": HUMAN, "-": 0}


@pytest.fixture
def board():
    """Build a position from row strings like ``"XO-"``."""

    def build(*rows: str) -> Position:
        return Position.from_rows([[CELL_VALUES[c] for c in row] for row in rows])

    return build
