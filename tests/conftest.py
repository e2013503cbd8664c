"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines the boards and engines shared by several test modules.
"""

import random

import pytest

from othello.api import Engine
from othello.board import BLACK, WHITE, Board, Position
from othello.moves import apply_move, legal_moves


def board_from(*placements: tuple[int, int, int]) -> Board:
    """Blank board with the given (r, c, player) pieces"""
    board = Board.blank()
    for r, c, player in placements:
        board.place(Position(r, c), player)
    return board


def play_out(seed: int, plies: int) -> tuple[Board, int]:
    """Random legal play from the opening. Returns the board and the player to move."""
    rng = random.Random(seed)
    board = Board()
    player = BLACK
    for _ in range(plies):
        moves = legal_moves(board, player)
        if not moves:
            player = -player
            moves = legal_moves(board, player)
            if not moves:
                break
        apply_move(board, rng.choice(moves))
        player = -player
    return board, player


@pytest.fixture
def start_board() -> Board:
    return Board()


@pytest.fixture
def black_blocked_board() -> Board:
    """Black cannot bracket the corner piece, White can capture along the top edge."""
    return board_from((0, 0, WHITE), (0, 1, BLACK))


@pytest.fixture
def corner_choice_board() -> Board:
    """White can take the top-left corner or play the X-square diagonal."""
    return board_from((0, 2, WHITE), (0, 1, BLACK), (1, 1, BLACK))


@pytest.fixture
def midgame() -> tuple[Board, int]:
    return play_out(seed=7, plies=14)


@pytest.fixture
def engine() -> Engine:
    return Engine()
