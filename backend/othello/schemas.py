"""Value types handed to the presentation layer. Plain data: no reference back into the engine."""

from typing import List, Optional

from pydantic import BaseModel

from .board import Board, Player
from .moves import Move


class BoardSnapshot(BaseModel):
    """Board plus side to move. The grid shape and cell values are checked by
    `to_board`, which raises InvalidBoardError.
    """

    grid: List[List[int]]
    to_move: Optional[Player] = None

    @classmethod
    def from_board(cls, board: Board, to_move: Optional[Player] = None) -> "BoardSnapshot":
        return cls(grid=[[int(cell) for cell in row] for row in board.grid], to_move=to_move)

    def to_board(self) -> Board:
        return Board.from_grid(self.grid)


class MoveView(BaseModel):
    r: int
    c: int
    notation: str
    flips: List[List[int]]

    @classmethod
    def from_move(cls, move: Move) -> "MoveView":
        return cls(
            r=move.r,
            c=move.c,
            notation=move.position.notation,
            flips=[[r, c] for r, c in sorted(move.flips)],
        )


class GameState(BaseModel):
    grid: List[List[int]]
    to_move: Optional[Player]
    black: int
    white: int
    legal: List[MoveView]
    terminal: bool
    winner: Optional[Player]
    draw: bool
    last_move: Optional[MoveView] = None
    passed: Optional[Player] = None
    move_count: int
    human: Optional[Player] = None  # None: both sides take `play`
