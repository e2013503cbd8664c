import json
import logging
import math
from dataclasses import asdict, dataclass, fields
from typing import Optional

from .board import EMPTY, SIZE, Board, Player
from .moves import can_move, mobility

logger = logging.getLogger(__name__)

# PSQT (Position Square Table) - classic Othello evaluation
PSQT = [
    [100, -20,  10,   5,   5,  10, -20, 100],
    [-20, -50,  -2,  -2,  -2,  -2, -50, -20],
    [ 10,  -2,   0,   0,   0,   0,  -2,  10],
    [  5,  -2,   0,   0,   0,   0,  -2,   5],
    [  5,  -2,   0,   0,   0,   0,  -2,   5],
    [ 10,  -2,   0,   0,   0,   0,  -2,  10],
    [-20, -50,  -2,  -2,  -2,  -2, -50, -20],
    [100, -20,  10,   5,   5,  10, -20, 100]
]

# Corner positions
CORNERS = [(0, 0), (0, 7), (7, 0), (7, 7)]

# Squares touching a corner, mapped to that corner
ADJACENT_TO_CORNERS = {
    (0, 1): (0, 0), (1, 0): (0, 0), (1, 1): (0, 0),
    (0, 6): (0, 7), (1, 6): (0, 7), (1, 7): (0, 7),
    (6, 0): (7, 0), (6, 1): (7, 0), (7, 1): (7, 0),
    (6, 6): (7, 7), (6, 7): (7, 7), (7, 6): (7, 7),
}

# Terminal positions score beyond anything a heuristic can reach
WIN_SCORE = 1_000_000


@dataclass(frozen=True)
class EvalWeights:
    discs: float = 10.0
    mobility: float = 140.0
    psqt: float = 10.0
    frontier: float = 40.0
    corners: float = 800.0
    corner_closeness: float = 380.0

    @classmethod
    def load(cls, weights_file: Optional[str]) -> 'EvalWeights':
        """Load weights from a JSON file; defaults when there is no file.
        Unknown keys are ignored, NaN/Inf are replaced by 0.
        """
        if not weights_file:
            return cls()
        try:
            with open(weights_file, 'r') as f:
                raw = json.load(f)
        except FileNotFoundError:
            logger.debug("No weights file at %s, using defaults", weights_file)
            return cls()

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in raw.items():
            if key not in known:
                continue
            if not isinstance(value, (int, float)) or not math.isfinite(float(value)):
                value = 0.0
            values[key] = float(value)
        return cls(**values)

    def save(self, weights_file: str):
        with open(weights_file, 'w') as f:
            json.dump(asdict(self), f, indent=2)


class Evaluator:
    def __init__(self, weights: Optional[EvalWeights] = None):
        self.weights = weights or EvalWeights()

    def evaluate(self, board: Board, color: Player, weights: Optional[EvalWeights] = None) -> int:
        """Evaluate position for the given color (positive = good for color).

        Integer valued: the search relies on exact ties.
        """
        w = weights or self.weights
        black, white = board.count()
        disc_diff = (black - white) * color

        my_moves = mobility(board, color)
        opp_moves = mobility(board, -color)
        if my_moves == 0 and opp_moves == 0:
            if disc_diff > 0:
                return WIN_SCORE + disc_diff
            if disc_diff < 0:
                return -WIN_SCORE + disc_diff
            return 0

        psqt = corners = closeness = frontier = 0
        for r in range(SIZE):
            for c in range(SIZE):
                cell = board.grid[r][c]
                if cell == EMPTY:
                    continue
                sign = 1 if cell == color else -1
                psqt += sign * PSQT[r][c]
                if (r, c) in ADJACENT_TO_CORNERS:
                    cr, cc = ADJACENT_TO_CORNERS[(r, c)]
                    if board.grid[cr][cc] == EMPTY:
                        closeness += sign
                elif (r, c) in CORNERS:
                    corners += sign
                if self._is_frontier(board, r, c):
                    frontier += sign

        # 1 = early game, 0 = late game
        empties = 64 - black - white
        mid = max(0.0, min(1.0, (empties - 10) / 44))

        # Mid-game evaluation (mobility, PSQT, frontier)
        mid_score = (
            w.mobility * (my_moves - opp_moves) +
            w.psqt * psqt -
            w.frontier * frontier
        )
        # Stable all game long (corners and their neighbourhood)
        corner_score = w.corners * corners - w.corner_closeness * closeness
        # Discs only matter once the board fills up
        end_score = w.discs * disc_diff

        return int(round(mid * mid_score + (1 - mid) * end_score + corner_score))

    def _is_frontier(self, board: Board, r: int, c: int) -> bool:
        """Check if a disc is on the frontier (adjacent to empty squares)"""
        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                nr, nc = r + dr, c + dc
                if 0 <= nr < SIZE and 0 <= nc < SIZE and board.grid[nr][nc] == EMPTY:
                    return True
        return False


def is_terminal(board: Board) -> bool:
    return not can_move(board, Player.BLACK) and not can_move(board, Player.WHITE)
