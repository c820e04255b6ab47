"""Unit tests for tic-tac-toe positions, terminal scoring and game flow."""

import dataclasses

import pytest

from tictactree.game import (
    AI,
    HUMAN,
    Position,
    TicTacToeGame,
    evaluate,
    successors,
)


def test_empty_board_scores_zero():
    assert evaluate(Position.empty()) == 0


def test_ai_row_wins(board):
    assert evaluate(board("XXX", "OO-", "---")) == 1


def test_human_column_loses(board):
    assert evaluate(board("OX-", "OX-", "O--")) == -1


def test_diagonals_are_lines(board):
    assert evaluate(board("X--", "OX-", "O-X")) == 1
    assert evaluate(board("X-O", "XO-", "O--")) == -1


def test_ai_line_takes_precedence(board):
    assert evaluate(board("XXX", "OOO", "---")) == 1


def test_full_board_without_line_scores_zero(board):
    assert evaluate(board("XOX", "XOO", "OXX")) == 0


def test_place_returns_new_position():
    empty = Position.empty()
    moved = empty.place((1, 1), AI)
    assert moved.cell(1, 1) == AI
    assert empty.cell(1, 1) == 0
    with pytest.raises(dataclasses.FrozenInstanceError):
        empty.rows = moved.rows


def test_render_uses_symbols(board):
    assert board("X--", "-O-", "---").render() == "X - -\n- O -\n- - -"


def test_successors_in_row_major_order():
    generated = list(successors(Position.empty(), HUMAN))
    assert [move for move, _ in generated] == [
        (i, j) for i in range(3) for j in range(3)
    ]
    for (i, j), child in generated:
        assert child.cell(i, j) == HUMAN
        assert sum(c != 0 for row in child.rows for c in row) == 1


def test_successors_are_lazy():
    stream = successors(Position.empty(), AI)
    move, _ = next(stream)
    assert move == (0, 0)


def test_no_successors_after_a_win(board):
    assert list(successors(board("OOO", "XX-", "X--"), AI)) == []


def test_single_empty_cell_has_one_successor(board):
    generated = list(successors(board("XOX", "XOO", "OX-"), AI))
    assert len(generated) == 1
    move, child = generated[0]
    assert move == (2, 2)
    assert child == board("XOX", "XOO", "OXX")


def test_full_board_has_no_successors(board):
    assert list(successors(board("XOX", "XOO", "OXX"), HUMAN)) == []


def test_human_moves_first_and_turns_alternate():
    game = TicTacToeGame()
    assert game.current_player == HUMAN
    game.play_move(1, 1)
    assert game.position.cell(1, 1) == HUMAN
    assert game.current_player == AI
    assert (1, 1) not in game.available_moves()


def test_occupied_cell_rejected():
    game = TicTacToeGame()
    game.play_move(0, 0)
    with pytest.raises(ValueError):
        game.play_move(0, 0)


def test_out_of_range_cell_rejected():
    with pytest.raises(ValueError):
        TicTacToeGame().play_move(3, 0)


def test_win_detection():
    game = TicTacToeGame()
    for move in [(0, 0), (1, 1), (0, 1), (2, 2), (0, 2)]:
        game.play_move(*move)
    assert game.winner == HUMAN
    assert not game.drawn
    assert game.available_moves() == []
    with pytest.raises(ValueError):
        game.play_move(2, 0)


def test_draw_detection():
    game = TicTacToeGame()
    sequence = [
        (0, 0), (0, 1), (0, 2), (1, 1), (1, 0),
        (1, 2), (2, 1), (2, 0), (2, 2),
    ]
    for move in sequence:
        assert not game.finished
        game.play_move(*move)
    assert game.winner is None
    assert game.drawn


def test_clone_is_independent():
    game = TicTacToeGame()
    copy = game.clone()
    copy.play_move(0, 0)
    assert game.position == Position.empty()
    assert game.current_player == HUMAN
