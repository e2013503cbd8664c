"""
Move generation and application.

A Move is only ever produced here, from a concrete board: it carries the squares
it captures so applying it never has to search the board again.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from .board import EMPTY, SIZE, Board, Player, Position, all_positions

DIRECTIONS = [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1)]


@dataclass(frozen=True)
class Move:
    position: Position
    player: Player
    flips: FrozenSet[Position]

    @property
    def r(self) -> int:
        return self.position.r

    @property
    def c(self) -> int:
        return self.position.c

    def __str__(self) -> str:
        return f"{self.player} {self.position.notation} (+{len(self.flips)})"


def _run_in_direction(board: Board, r: int, c: int, dr: int, dc: int, color: int) -> List[Position]:
    """Opponent pieces bracketed by (r, c) and a piece of `color` in one direction"""
    opponent = -color
    run = []
    r += dr
    c += dc
    while 0 <= r < SIZE and 0 <= c < SIZE:
        cell = board.grid[r][c]
        if cell == opponent:
            run.append(Position(r, c))
        elif cell == color:
            return run
        else:  # EMPTY
            return []
        r += dr
        c += dc
    # Reached the edge without closing the run
    return []


def captures(board: Board, player: Player, pos: Position) -> FrozenSet[Position]:
    """Squares flipped if `player` plays at `pos`; empty when the move is illegal"""
    r, c = pos
    if board.grid[r][c] != EMPTY:
        return frozenset()
    flipped: List[Position] = []
    for dr, dc in DIRECTIONS:
        flipped.extend(_run_in_direction(board, r, c, dr, dc, player))
    return frozenset(flipped)


def _is_legal(board: Board, r: int, c: int, color: int) -> bool:
    if board.grid[r][c] != EMPTY:
        return False
    opponent = -color
    for dr, dc in DIRECTIONS:
        nr, nc = r + dr, c + dc
        # Must have at least one opponent piece
        if not (0 <= nr < SIZE and 0 <= nc < SIZE) or board.grid[nr][nc] != opponent:
            continue
        while 0 <= nr < SIZE and 0 <= nc < SIZE:
            cell = board.grid[nr][nc]
            if cell == color:
                return True
            if cell == EMPTY:
                break
            nr += dr
            nc += dc
    return False


def legal_moves(board: Board, player: Player) -> List[Move]:
    """All legal moves for `player`, in row-major order. Empty means a forced pass."""
    player = Player(player)
    moves = []
    for pos in all_positions():
        flips = captures(board, player, pos)
        if flips:
            moves.append(Move(pos, player, flips))
    return moves


def find_move(board: Board, player: Player, pos: Position) -> Optional[Move]:
    flips = captures(board, player, pos)
    return Move(Position(*pos), player, flips) if flips else None


def can_move(board: Board, player: Player) -> bool:
    """Checks if a given player can move in at least one position."""
    return any(_is_legal(board, r, c, player) for r, c in all_positions())


def mobility(board: Board, player: Player) -> int:
    return sum(1 for r, c in all_positions() if _is_legal(board, r, c, player))


def apply_move(board: Board, move: Move):
    """Place the piece and flip its captures on `board`, in place."""
    board.place(move.position, move.player)
    for pos in move.flips:
        board.place(pos, move.player)
