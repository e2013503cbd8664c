"""
A GameSession owns one board and enforces the game workflow on it:
turn order, forced passes and the end of the game.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from .board import BLACK, WHITE, Board, Player, Position
from .errors import GameOverError, IllegalMoveError
from .moves import Move, apply_move as apply_to_board, can_move, find_move, legal_moves

logger = logging.getLogger(__name__)


class Status(Enum):
    IN_PROGRESS = auto()
    GAME_OVER = auto()


@dataclass(frozen=True)
class GameResult:
    winner: Optional[Player]  # None on a draw
    black: int
    white: int

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    @classmethod
    def from_board(cls, board: Board) -> 'GameResult':
        black, white = board.count()
        if black > white:
            winner = BLACK
        elif white > black:
            winner = WHITE
        else:
            winner = None
        return cls(winner, black, white)


class GameSession:
    def __init__(self):
        self._board = Board()
        self._to_move: Optional[Player] = BLACK  # Black moves first
        self.move_count = 0
        self.status = Status.IN_PROGRESS
        self.result: Optional[GameResult] = None
        self.last_move: Optional[Move] = None
        # Player whose turn was skipped after the last move, if any
        self.passed: Optional[Player] = None

    @classmethod
    def from_board(cls, board: Board, to_move: Player = BLACK) -> 'GameSession':
        """Start a session from an arbitrary position. A forced pass is resolved right away."""
        session = cls()
        session._board = board.copy()
        session._to_move = Player(to_move)
        if not can_move(session._board, session._to_move):
            session._advance_turn(session._to_move.opponent)
        return session

    # --- Reads ---
    @property
    def board(self) -> Board:
        """A copy: callers never get to mutate the session's board"""
        return self._board.copy()

    @property
    def current_player(self) -> Optional[Player]:
        return self._to_move

    @property
    def is_game_over(self) -> bool:
        return self.status == Status.GAME_OVER

    def legal_moves(self) -> List[Move]:
        if self._to_move is None:
            return []
        return legal_moves(self._board, self._to_move)

    def score(self, player: Player) -> int:
        return self._board.score(player)

    # --- The single mutating entry point ---
    def apply_move(self, pos: Position, player: Optional[Player] = None) -> Move:
        """
        Play at `pos` for the player to move.

        Raises GameOverError when nobody can move, IllegalMoveError when `player` is not
        the one to move or when `pos` captures nothing. Nothing changes on failure.
        """
        mover = self._to_move
        if mover is None:
            raise GameOverError("None of the players can move, the game is over.")
        if player is not None and player != mover:
            raise IllegalMoveError(f"It's the turn of {mover}, not {Player(player)}.")

        move = find_move(self._board, mover, pos)
        if move is None:
            raise IllegalMoveError(f"{Position(*pos).notation} is not a legal move for {mover}.")

        apply_to_board(self._board, move)
        self.move_count += 1
        self.last_move = move
        logger.info("Move %d: %s", self.move_count, move)

        self._advance_turn(mover)
        return move

    def _advance_turn(self, mover: Player):
        """Decide who plays next once `mover` has played (or been skipped)."""
        opponent = mover.opponent
        self.passed = None
        if can_move(self._board, opponent):
            self._to_move = opponent
        elif can_move(self._board, mover):
            # the game is not blocked, but the player does not change.
            self._to_move = mover
            self.passed = opponent
            logger.info("%s has no legal move and passes", opponent)
        else:
            self._to_move = None
            self.status = Status.GAME_OVER
            self.result = GameResult.from_board(self._board)
            logger.info(
                "Game over: Black %d - %d White, winner %s",
                self.result.black,
                self.result.white,
                self.result.winner or "none (draw)",
            )


def apply_move(session: GameSession, pos: Position) -> Move:
    return session.apply_move(pos)
