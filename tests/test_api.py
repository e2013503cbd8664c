"""Unit tests for othello/api.py"""

import random

import pytest

from othello.api import Engine, to_position
from othello.board import BLACK, WHITE, Board, Position
from othello.config import Difficulty, SearchLimits, Settings
from othello.errors import GameOverError, IllegalMoveError, InvalidBoardError, NoLegalMoveError, OutOfRangeError
from othello.game import GameResult
from othello.moves import legal_moves
from othello.schemas import BoardSnapshot, GameState

from conftest import board_from, play_out


def test_new_game_state(engine: Engine) -> None:
    state = engine.new_game()
    assert isinstance(state, GameState)
    assert state.to_move is BLACK
    assert (state.black, state.white) == (2, 2)
    assert {(m.r, m.c) for m in state.legal} == {(2, 3), (3, 2), (4, 5), (5, 4)}
    assert not state.terminal
    assert state.winner is None
    assert state.move_count == 0
    assert state.last_move is None


def test_play_opening_by_notation(engine: Engine) -> None:
    state = engine.play("d3")
    assert (state.black, state.white) == (4, 1)
    assert state.to_move is WHITE
    assert state.last_move.notation == "d3"
    assert state.last_move.flips == [[3, 3]]
    assert state.grid[3][3] == 1


@pytest.mark.parametrize("pos", [(2, 3), Position(2, 3), "D3"])
def test_play_accepts_positions(engine: Engine, pos) -> None:
    assert engine.play(pos).black == 4


@pytest.mark.parametrize("pos", [(8, 0), (0, -1), (3,), "z9", (1.5, 2), None, (True, 2)])
def test_play_rejects_out_of_range(engine: Engine, pos) -> None:
    with pytest.raises(OutOfRangeError):
        engine.play(pos)
    assert engine.get_state().move_count == 0


def test_to_position() -> None:
    assert to_position((7, 7)) == Position(7, 7)
    assert to_position("h8") == Position(7, 7)


def test_illegal_move_keeps_state(engine: Engine) -> None:
    before = engine.get_state()
    with pytest.raises(IllegalMoveError):
        engine.play((0, 0))
    assert engine.get_state() == before


def test_legal_moves(engine: Engine) -> None:
    assert engine.legal_moves() == legal_moves(Board(), BLACK)


def test_play_ai_plays_the_computer_side(engine: Engine) -> None:
    engine.play("d3")
    state = engine.play_ai(Difficulty.BEGINNER)
    assert state.move_count == 2
    assert state.to_move is BLACK
    assert state.white >= 3


def test_play_ai_default_difficulty() -> None:
    engine = Engine(Settings(default_difficulty=Difficulty.EASY))
    engine.new_game(human=WHITE)
    state = engine.play_ai()
    assert state.move_count == 1


def test_play_ai_accepts_limits(engine: Engine) -> None:
    engine.new_game(human=WHITE)
    state = engine.play_ai(SearchLimits(max_depth=2))
    # symmetric opening: first generated move
    assert state.last_move.notation == "d3"


def test_forced_pass_is_reported() -> None:
    engine = Engine()
    state = engine.new_game(board_from((0, 0, WHITE), (0, 1, BLACK)), BLACK)
    assert state.to_move is WHITE
    assert state.passed is BLACK
    with pytest.raises(IllegalMoveError):
        engine.play((0, 0))


def test_play_ai_when_game_over(engine: Engine) -> None:
    engine.new_game(board_from((0, 0, WHITE), (0, 1, BLACK)), BLACK)
    state = engine.play_ai(Difficulty.BEGINNER)
    assert state.terminal
    assert state.winner is WHITE
    assert not state.draw
    assert engine.result() == GameResult(WHITE, 0, 3)
    with pytest.raises(GameOverError):
        engine.play_ai()
    with pytest.raises(NoLegalMoveError):
        engine.play_ai()
    with pytest.raises(GameOverError):
        engine.play((5, 5))


def test_draw_state() -> None:
    engine = Engine()
    state = engine.new_game(Board.from_string("BW" * 32))
    assert state.terminal
    assert state.draw
    assert state.winner is None
    assert engine.result().is_draw


def test_reset_discards_the_game(engine: Engine) -> None:
    engine.play("d3")
    engine.play_ai(Difficulty.BEGINNER)
    state = engine.reset()
    assert state.move_count == 0
    assert engine.session.board == Board()


def test_state_is_not_an_alias(engine: Engine) -> None:
    state = engine.get_state()
    state.grid[0][0] = 1
    assert engine.get_state().grid[0][0] == 0


def test_snapshot_roundtrip_keeps_legal_moves() -> None:
    board, player = play_out(5, plies=20)
    if not legal_moves(board, player):
        player = -player
    engine = Engine()
    engine.new_game(board, player)

    payload = engine.snapshot().model_dump_json()
    restored = BoardSnapshot.model_validate_json(payload)
    assert restored.to_move == engine.session.current_player
    assert set(legal_moves(restored.to_board(), restored.to_move)) == set(engine.legal_moves())

    other = Engine()
    other.load(restored)
    assert other.get_state() == engine.get_state()


def test_full_game_against_itself() -> None:
    rng = random.Random(3)
    engine = Engine()
    state = engine.get_state()
    while not state.terminal:
        if state.to_move is BLACK:
            move = rng.choice(state.legal)
            state = engine.play((move.r, move.c))
        else:
            state = engine.play_ai(Difficulty.BEGINNER)
        assert state.black + state.white == state.move_count + 4
    result = engine.result()
    assert (result.black, result.white) == (state.black, state.white)


def test_play_rejects_the_computer_turn(engine: Engine) -> None:
    engine.new_game(human=WHITE)
    with pytest.raises(IllegalMoveError, match="computer"):
        engine.play("d3")
    assert engine.get_state().move_count == 0


def test_play_ai_rejects_the_human_turn(engine: Engine) -> None:
    before = engine.get_state()
    assert before.human is BLACK
    with pytest.raises(IllegalMoveError, match="human"):
        engine.play_ai(Difficulty.BEGINNER)
    assert engine.get_state() == before


def test_human_plays_white() -> None:
    engine = Engine()
    engine.new_game(human=WHITE)
    state = engine.play_ai(Difficulty.BEGINNER)
    assert state.to_move is WHITE
    state = engine.play((state.legal[0].r, state.legal[0].c))
    assert state.move_count == 2
    assert engine.reset().human is WHITE


def test_without_human_either_call_plays_either_side(engine: Engine) -> None:
    engine.new_game(human=None)
    engine.play_ai(Difficulty.BEGINNER)
    engine.play_ai(Difficulty.BEGINNER)
    state = engine.play((engine.legal_moves()[0].r, engine.legal_moves()[0].c))
    assert state.move_count == 3
    assert state.human is None


def test_load_rejects_malformed_snapshot(engine: Engine) -> None:
    engine.play("d3")
    with pytest.raises(InvalidBoardError):
        engine.load(BoardSnapshot(grid=[[0] * 8] * 7))
    with pytest.raises(InvalidBoardError):
        BoardSnapshot(grid=[[2] * 8] * 8).to_board()
    assert engine.get_state().move_count == 1
