"""Minimax with alpha-beta pruning that keeps the explored tree for inspection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple
import logging
import math

from .game import (
    AI,
    NO_MOVE,
    Move,
    Player,
    Position,
    TicTacToeGame,
    evaluate,
    successors,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchNode:
    """One explored position of the search tree.

    ``mover`` is the player who made ``move`` to reach ``position`` (the AI at
    the root, where ``move`` is ``NO_MOVE``). ``alpha`` and ``beta`` are the
    bounds the node finished with. ``children`` only holds the successors
    explored before a cutoff, in row-major order of their moves.
    """

    position: Position
    move: Move
    mover: Player
    utility: int
    alpha: float = -math.inf
    beta: float = math.inf
    children: Tuple["SearchNode", ...] = field(default=(), repr=False)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["SearchNode"]:
        """Pre-order iteration over this node and all of its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def size(self) -> int:
        return sum(1 for _ in self.walk())

    @property
    def depth(self) -> int:
        if not self.children:
            return 0
        return 1 + max(child.depth for child in self.children)


# ---- core search ----


def search(
    position: Position,
    mover: Player,
    alpha: float = -math.inf,
    beta: float = math.inf,
    move: Move = NO_MOVE,
    played_by: Optional[Player] = None,
) -> SearchNode:
    """Search ``position`` with ``mover`` to play and return the explored tree.

    The AI (+1) maximizes and the human (-1) minimizes. A node without
    successors scores ``evaluate(position)``; otherwise it scores its final
    bound, ``alpha`` for the AI and ``beta`` for the human.
    """
    children: List[SearchNode] = []

    for child_move, child_position in successors(position, mover):
        child = search(child_position, -mover, alpha, beta, child_move, mover)
        v = child.utility
        children.append(child)
        if mover == AI:
            alpha = max(alpha, v)
        else:
            beta = min(beta, v)
        if alpha >= beta:
            break

    if not children:
        utility = evaluate(position)
    else:
        utility = int(alpha if mover == AI else beta)
    return SearchNode(
        position=position,
        move=move,
        mover=mover if played_by is None else played_by,
        utility=utility,
        alpha=alpha,
        beta=beta,
        children=tuple(children),
    )


def compute_best_response(position: Position) -> SearchNode:
    """Search ``position`` for the AI with an open window."""
    root = search(position, AI, -math.inf, math.inf, NO_MOVE)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Searched %d nodes, root utility %d", root.size, root.utility
        )
    return root


def select_reply(root: SearchNode) -> SearchNode:
    """Pick the AI's reply from a searched root.

    A forced win beats a forced draw; ties go to the first child in
    row-major order. When every reply loses, the first one is taken.
    """
    if not root.children:
        raise RuntimeError("No valid moves available")
    for wanted in (1, 0):
        for child in root.children:
            if child.utility == wanted:
                return child
    return root.children[0]


@dataclass
class MinimaxAI:
    """AI player for the ``X`` side. Keeps the tree behind its last reply."""

    last_tree: Optional[SearchNode] = field(default=None, repr=False)

    def choose(self, game: TicTacToeGame) -> SearchNode:
        if game.current_player != AI:
            raise ValueError("It is not the AI's turn")
        root = compute_best_response(game.position)
        self.last_tree = root
        return select_reply(root)

    def play(self, game: TicTacToeGame) -> Move:
        """Choose a reply and apply it to ``game``."""
        reply = self.choose(game)
        game.play_move(*reply.move)
        return reply.move

    def propose(self, game: TicTacToeGame, row: int, col: int) -> SearchNode:
        """Tree the AI would build if the human played ``(row, col)`` now.

        ``game`` itself is left untouched.
        """
        if game.current_player == AI:
            raise ValueError("It is not the human player's turn")
        preview = game.clone()
        preview.play_move(row, col)
        return compute_best_response(preview.position)
