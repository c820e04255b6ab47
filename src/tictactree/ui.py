"""FastAPI-powered web UI for playing against the engine and inspecting its search."""

from __future__ import annotations

import logging
import math
import random
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import threading

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from .ai import MinimaxAI, SearchNode
from .game import AI, EMPTY, HUMAN, Move, Position, TicTacToeGame, symbol

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game, the AI opponent and the human's proposal."""

    game: TicTacToeGame
    ai: MinimaxAI
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    proposal: Optional[Move] = None
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="TicTacTree",
    description="Tic-tac-toe against alpha-beta minimax, with the search tree on display",
)


AI_THINK_DELAY: Tuple[float, float] = (0.5, 1.0)

UTILITY_LABELS = {1: "AI wins", 0: "Draw", -1: "You win"}


class MoveRequest(BaseModel):
    """Request payload for proposing or committing a move."""

    row: int = Field(ge=0, le=2)
    col: int = Field(ge=0, le=2)


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(game=TicTacToeGame(), ai=MinimaxAI())
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info("Created game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            game = session.game
            if game.finished or game.current_player != AI:
                return
            row, col = session.ai.play(game)
            session.move_log.append(
                {"player": symbol(AI), "row": row, "col": col}
            )
            logger.info("Game %s: AI played (%d, %d)", game_id, row, col)
        finally:
            session.ai_pending = False


def _bound(value: float) -> Optional[float]:
    return None if math.isinf(value) else value


def serialize_tree(node: SearchNode) -> Dict[str, object]:
    """JSON-friendly view of a search tree, children included."""

    return {
        "board": _serialize_board(node.position),
        "move": None if node.move[0] < 0 else list(node.move),
        "mover": symbol(node.mover),
        "utility": node.utility,
        "label": UTILITY_LABELS[node.utility],
        "alpha": _bound(node.alpha),
        "beta": _bound(node.beta),
        "children": [serialize_tree(child) for child in node.children],
    }


def _serialize_board(position: Position) -> List[List[str]]:
    return [[symbol(c) if c != EMPTY else "" for c in row] for row in position.rows]


def _result_text(game: TicTacToeGame) -> Optional[str]:
    if game.winner == AI:
        return "The AI won!"
    if game.winner == HUMAN:
        return "You won!"
    if game.drawn:
        return "Game ended in a draw"
    return None


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        state: Dict[str, object] = {
            "id": game_id,
            "board": _serialize_board(game.position),
            "currentPlayer": symbol(game.current_player),
            "winner": symbol(game.winner) if game.winner is not None else None,
            "drawn": game.drawn,
            "result": _result_text(game),
            "availableMoves": [list(m) for m in game.available_moves()],
            "moveLog": list(session.move_log),
            "proposal": list(session.proposal) if session.proposal else None,
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _check_human_turn(session: GameSession) -> None:
    game = session.game
    if game.finished:
        raise HTTPException(status_code=400, detail="Game already finished")
    if session.ai_pending or game.current_player != HUMAN:
        raise HTTPException(status_code=400, detail="AI is completing its move")


def _propose_move(session: GameSession, row: int, col: int) -> SearchNode:
    with session.lock:
        _check_human_turn(session)
        try:
            tree = session.ai.propose(session.game, row, col)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        session.proposal = (row, col)
        return tree


def _apply_player_move(
    game_id: str,
    session: GameSession,
    row: int,
    col: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        _check_human_turn(session)
        game = session.game
        try:
            game.play_move(row, col)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": symbol(HUMAN), "row": row, "col": col})
        session.proposal = None

        should_schedule_ai = not game.finished and game.current_player == AI
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/proposal")
def propose_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    tree = _propose_move(session, request.row, request.col)
    state = _serialize_session(game_id, session)
    state["tree"] = serialize_tree(tree)
    return state


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.row, request.col, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}/tree")
def last_tree(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        tree = session.ai.last_tree
    if tree is None:
        raise HTTPException(status_code=404, detail="The AI has not moved yet")
    return serialize_tree(tree)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>TicTacTree</title>
    <style>
      :root {
        color-scheme: light;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      body {
        margin: 0;
        background: #f2f5ff;
        color: #13203a;
        padding: 2rem 1rem;
      }
      main {
        display: flex;
        flex-wrap: wrap;
        gap: 2rem;
        justify-content: center;
      }
      section {
        background: white;
        border-radius: 14px;
        box-shadow: 0 12px 28px rgba(34, 47, 79, 0.12);
        padding: 1.5rem;
      }
      #inspector {
        max-width: 60vw;
        overflow-x: auto;
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 4rem);
        gap: 4px;
      }
      .board button {
        width: 4rem;
        height: 4rem;
        font-size: 1.8rem;
        font-weight: 600;
        border: 1px solid rgba(60, 70, 120, 0.25);
        border-radius: 8px;
        background: white;
        cursor: pointer;
      }
      .board--small {
        grid-template-columns: repeat(3, 1.5rem);
        gap: 2px;
      }
      .board--small button {
        width: 1.5rem;
        height: 1.5rem;
        font-size: 0.8rem;
        border-radius: 3px;
      }
      .board button.proposed {
        background: #dce6ff;
        color: #3a66ff;
      }
      .board button:disabled {
        cursor: default;
      }
      .inspector__node {
        display: inline-block;
        vertical-align: top;
        margin: 0.4rem;
        padding: 0.4rem;
        border: 1px solid rgba(60, 70, 120, 0.15);
        border-radius: 6px;
        font-size: 0.8rem;
      }
      .inspector__children {
        white-space: nowrap;
      }
      #commit {
        margin-top: 1rem;
        padding: 0.5rem 1rem;
        border-radius: 999px;
      }
    </style>
  </head>
  <body>
    <main>
      <section id=\"arena\">
        <h3>How to play</h3>
        <ol>
          <li>Click on a box to propose a move</li>
          <li>Peek the AI's next move</li>
          <li>Commit your move once happy with it</li>
          <li>Watch the AI make its move and proceed to your next</li>
        </ol>
        <h3 id=\"status\">Your turn (O)</h3>
        <div id=\"board\" class=\"board\"></div>
        <button id=\"commit\" disabled>Commit move</button>
        <p id=\"message\"></p>
      </section>
      <section id=\"inspector\">
        <h3>Decision tree visualiser</h3>
        <div id=\"tree\"><p>Make a move for the AI to react</p></div>
      </section>
    </main>
    <script>
      const boardEl = document.getElementById('board');
      const treeEl = document.getElementById('tree');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const commitButton = document.getElementById('commit');
      let gameId = null;
      let gameState = null;

      function sameMove(a, b) {
        return !!a && !!b && a[0] === b[0] && a[1] === b[1];
      }

      function renderBoard(container, board, proposed, proposer, onPropose) {
        container.innerHTML = '';
        board.forEach((row, i) => row.forEach((cell, j) => {
          const button = document.createElement('button');
          const isProposed = sameMove(proposed, [i, j]);
          button.textContent = isProposed ? proposer : (cell || '-');
          if (isProposed) button.classList.add('proposed');
          button.disabled = !onPropose || !!cell;
          if (onPropose) button.addEventListener('click', () => onPropose(i, j));
          container.appendChild(button);
        }));
      }

      function renderNode(node) {
        const wrapper = document.createElement('div');
        wrapper.className = 'inspector__node';
        const board = document.createElement('div');
        board.className = 'board board--small';
        renderBoard(board, node.board.map(r => r.slice()), node.move, node.mover, null);
        wrapper.appendChild(board);
        wrapper.appendChild(document.createTextNode(node.label));
        if (node.children.length) {
          const toggle = document.createElement('button');
          const children = document.createElement('div');
          children.className = 'inspector__children';
          let open = false;
          toggle.textContent = 'Expand';
          toggle.addEventListener('click', () => {
            open = !open;
            toggle.textContent = open ? 'Collapse' : 'Expand';
            if (open && !children.childElementCount) {
              node.children.forEach(child => children.appendChild(renderNode(child)));
            }
            children.style.display = open ? 'block' : 'none';
          });
          wrapper.appendChild(document.createElement('br'));
          wrapper.appendChild(toggle);
          wrapper.appendChild(children);
        }
        return wrapper;
      }

      function setState(data) {
        gameState = data;
        gameId = data.id;
        const humanTurn = !data.aiPending && !data.result && data.currentPlayer === 'O';
        statusEl.textContent = data.result || (humanTurn ? 'Your turn (O)' : "Computer's turn (X)");
        renderBoard(boardEl, data.board, data.proposal, 'O', humanTurn ? propose : null);
        commitButton.disabled = !data.proposal || !humanTurn;
        if (data.aiPending) {
          setTimeout(poll, 300);
        }
      }

      async function request(url, options) {
        const response = await fetch(url, options);
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          throw new Error(payload?.detail || 'Request failed');
        }
        return payload;
      }

      function post(url, body) {
        return request(url, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body || {}),
        });
      }

      async function propose(row, col) {
        messageEl.textContent = '';
        try {
          const data = await post(`/api/game/${gameId}/proposal`, { row, col });
          setState(data);
          treeEl.innerHTML = '';
          treeEl.appendChild(renderNode(data.tree));
        } catch (error) {
          messageEl.textContent = error.message;
        }
      }

      async function commit() {
        if (!gameState || !gameState.proposal) return;
        const [row, col] = gameState.proposal;
        try {
          setState(await post(`/api/game/${gameId}/move`, { row, col }));
        } catch (error) {
          messageEl.textContent = error.message;
        }
      }

      async function poll() {
        try {
          setState(await request(`/api/game/${gameId}`));
        } catch (error) {
          messageEl.textContent = error.message;
        }
      }

      async function newGame() {
        setState(await post('/api/game'));
        treeEl.innerHTML = '<p>Make a move for the AI to react</p>';
      }

      commitButton.addEventListener('click', commit);
      newGame();
    </script>
  </body>
</html>
"""
