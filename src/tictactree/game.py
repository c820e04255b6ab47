"""Core rules for 3x3 tic-tac-toe: positions, terminal scoring and successors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

Player = int  # +1 (AI, "X") or -1 (human, "O")
Move = Tuple[int, int]
Rows = Tuple[Tuple[int, int, int], Tuple[int, int, int], Tuple[int, int, int]]

EMPTY = 0
AI = 1
HUMAN = -1

BOARD_SIZE = 3

# Root of a search: no move was taken to reach it
NO_MOVE: Move = (-1, -1)

WINNING_LINES: Tuple[Tuple[Move, Move, Move], ...] = (
    # Rows
    ((0, 0), (0, 1), (0, 2)),
    ((1, 0), (1, 1), (1, 2)),
    ((2, 0), (2, 1), (2, 2)),
    # Columns
    ((0, 0), (1, 0), (2, 0)),
    ((0, 1), (1, 1), (2, 1)),
    ((0, 2), (1, 2), (2, 2)),
    # Diagonals
    ((0, 0), (1, 1), (2, 2)),
    ((0, 2), (1, 1), (2, 0)),
)

SYMBOLS = {EMPTY: "-", AI: "X", HUMAN: "O"}


def symbol(value: int) -> str:
    return SYMBOLS[value]


# ---------- Position ----------


@dataclass(frozen=True)
class Position:
    # Cell values: EMPTY, AI or HUMAN
    rows: Rows = ((0, 0, 0), (0, 0, 0), (0, 0, 0))

    @classmethod
    def empty(cls) -> "Position":
        return cls()

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Position":
        """Build a position from any nested sequence of cell values."""
        return cls(rows=tuple(tuple(int(c) for c in row) for row in rows))  # type: ignore[arg-type]

    def cell(self, row: int, col: int) -> int:
        return self.rows[row][col]

    def place(self, move: Move, value: Player) -> "Position":
        """Return a copy of this position with ``move`` filled by ``value``."""
        i, j = move
        rows = [list(r) for r in self.rows]
        rows[i][j] = value
        return Position.from_rows(rows)

    def empty_cells(self) -> List[Move]:
        """Empty cells in row-major order."""
        return [
            (i, j)
            for i in range(BOARD_SIZE)
            for j in range(BOARD_SIZE)
            if self.rows[i][j] == EMPTY
        ]

    def is_full(self) -> bool:
        return all(c != EMPTY for row in self.rows for c in row)

    def render(self) -> str:
        return "\n".join(" ".join(symbol(c) for c in row) for row in self.rows)


# ---------- Terminal scoring ----------


def _has_line(position: Position, value: Player) -> bool:
    for line in WINNING_LINES:
        if all(position.cell(i, j) == value for i, j in line):
            return True
    return False


def evaluate(position: Position) -> int:
    """Score a position from the AI's point of view.

    Returns +1 if the AI owns a complete line, -1 if the human does and 0
    otherwise. A zero does not mean the game is drawn: the board may still
    have empty cells, and callers check fullness themselves.
    """
    if _has_line(position, AI):
        return 1
    if _has_line(position, HUMAN):
        return -1
    return 0


def successors(position: Position, mover: Player) -> Iterator[Tuple[Move, Position]]:
    """Lazily yield ``(move, position)`` pairs reachable by ``mover``.

    A won position has no successors. Empty cells are visited in row-major
    order.
    """
    if evaluate(position):
        return
    for move in position.empty_cells():
        yield move, position.place(move, mover)


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    """A live game between the human (moves first) and the AI."""

    position: Position = field(default_factory=Position.empty)
    current_player: Player = HUMAN
    winner: Optional[Player] = None
    drawn: bool = False

    def __post_init__(self) -> None:
        self._update_state()

    @property
    def finished(self) -> bool:
        return self.winner is not None or self.drawn

    def available_moves(self) -> List[Move]:
        if self.finished:
            return []
        return self.position.empty_cells()

    def check_move(self, row: int, col: int) -> None:
        if self.finished:
            raise ValueError("Game already finished")
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            raise ValueError("Cell is outside the board")
        if self.position.cell(row, col) != EMPTY:
            raise ValueError("Cell already occupied")

    def play_move(self, row: int, col: int) -> None:
        """Apply a legal move for the current player and switch turns."""
        self.check_move(row, col)
        self.position = self.position.place((row, col), self.current_player)
        self._update_state()
        self.current_player = -self.current_player

    def clone(self) -> "TicTacToeGame":
        return TicTacToeGame(
            position=self.position,
            current_player=self.current_player,
        )

    # ---- helpers ----

    def _update_state(self) -> None:
        result = evaluate(self.position)
        if result:
            self.winner = result
            self.drawn = False
            return
        # No line and nowhere left to play
        self.winner = None
        self.drawn = self.position.is_full()
