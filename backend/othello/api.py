"""
The Engine is the entrypoint for a presentation layer.

It owns one GameSession at a time and answers with GameState views. Every call is
synchronous and either fully applies or raises one of the errors in othello.errors.
"""

import logging
from typing import List, Optional, Tuple, Union

from .board import BLACK, Board, Player, Position
from .config import Difficulty, SearchLimits, Settings, limits_for
from .errors import GameOverError, IllegalMoveError, OutOfRangeError
from .eval import Evaluator
from .game import GameResult, GameSession
from .moves import Move
from .schemas import BoardSnapshot, GameState, MoveView
from .search import SearchEngine

logger = logging.getLogger(__name__)

PositionLike = Union[Position, Tuple[int, int], str]


def to_position(pos: PositionLike) -> Position:
    """Reject anything that is not a square of the board"""
    if isinstance(pos, str):
        return Position.from_notation(pos)
    try:
        r, c = pos
    except (TypeError, ValueError):
        raise OutOfRangeError(f"not a board position: {pos!r}") from None
    if isinstance(r, bool) or isinstance(c, bool) or not isinstance(r, int) or not isinstance(c, int):
        raise OutOfRangeError(f"not a board position: {pos!r}")
    return Position.of(r, c)


class Engine:
    def __init__(self, settings: Optional[Settings] = None, search_engine: Optional[SearchEngine] = None):
        self.settings = settings or Settings()
        self.weights = self.settings.eval_weights()
        self.search_engine = search_engine or SearchEngine(Evaluator(self.weights))
        self.session = GameSession()
        self.human: Optional[Player] = BLACK

    # --- Session lifecycle ---
    def new_game(self, board: Optional[Board] = None, to_move: Player = BLACK,
                 human: Optional[Player] = BLACK) -> GameState:
        """Start a new game, discarding the current one. Standard opening unless a board is given.

        `human` is the side played through `play`; the engine plays the other one.
        With None either side may be played by either call.
        """
        session = GameSession() if board is None else GameSession.from_board(board, to_move)
        self.session = session
        self.human = Player(human) if human is not None else None
        logger.info("New game, %s to move, human plays %s", session.current_player, self.human or "both sides")
        return self.get_state()

    def reset(self) -> GameState:
        """Standard opening, same sides as before"""
        return self.new_game(human=self.human)

    def load(self, snapshot: BoardSnapshot, human: Optional[Player] = BLACK) -> GameState:
        return self.new_game(snapshot.to_board(), snapshot.to_move or BLACK, human)

    # --- Reads ---
    def get_state(self) -> GameState:
        session = self.session
        board = session.board
        black, white = board.count()
        result = session.result
        return GameState(
            grid=[[int(cell) for cell in row] for row in board.grid],
            to_move=session.current_player,
            black=black,
            white=white,
            legal=[MoveView.from_move(m) for m in session.legal_moves()],
            terminal=session.is_game_over,
            winner=result.winner if result else None,
            draw=bool(result and result.is_draw),
            last_move=MoveView.from_move(session.last_move) if session.last_move else None,
            passed=session.passed,
            move_count=session.move_count,
            human=self.human,
        )

    def legal_moves(self) -> List[Move]:
        return self.session.legal_moves()

    def result(self) -> Optional[GameResult]:
        return self.session.result

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot.from_board(self.session.board, self.session.current_player)

    # --- Moves ---
    def play(self, pos: PositionLike) -> GameState:
        """Human move. Raises IllegalMoveError on the computer's turn."""
        position = to_position(pos)
        player = self.session.current_player
        if self.human is not None and player is not None and player != self.human:
            raise IllegalMoveError(f"It's the turn of the computer ({player}).")
        self.session.apply_move(position)
        return self.get_state()

    def play_ai(self, difficulty: "Difficulty | str | SearchLimits | None" = None) -> GameState:
        """Let the engine choose and play the computer's move. Blocks for the search budget."""
        player = self.session.current_player
        if player is None:
            raise GameOverError("Nobody (human or not) can play, the game is over.")
        if player == self.human:
            raise IllegalMoveError(f"It's the turn of the human player ({player}).")
        limits = limits_for(difficulty or self.settings.default_difficulty, self.weights)
        move = self.search_engine.best_move(self.session.board, player, limits)
        self.session.apply_move(move.position, player)
        return self.get_state()
