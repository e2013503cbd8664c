import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .board import Board, Player, Position
from .config import MAX_SEARCH_DEPTH, Difficulty, SearchLimits, limits_for
from .errors import NoLegalMoveError
from .eval import WIN_SCORE, Evaluator, EvalWeights
from .moves import Move, apply_move, can_move, legal_moves

logger = logging.getLogger(__name__)

# Constants
INF = WIN_SCORE * 10
NODE_CHECK_INTERVAL = 128  # nodes between clock reads

CORNERS = {(0, 0), (0, 7), (7, 0), (7, 7)}
# X squares (diagonal to a corner) and C squares (next to a corner on the edge)
RISKY_SQUARES = {
    (1, 1): (0, 0), (1, 6): (0, 7), (6, 1): (7, 0), (6, 6): (7, 7),
    (0, 1): (0, 0), (1, 0): (0, 0), (0, 6): (0, 7), (1, 7): (0, 7),
    (7, 1): (7, 0), (6, 0): (7, 0), (6, 7): (7, 7), (7, 6): (7, 7),
}


class SearchTimeout(Exception):
    """Raised inside the search when the time or node budget is spent."""


@dataclass(frozen=True)
class SearchResult:
    move: Move
    score: int
    depth: int
    nodes: int
    elapsed_ms: float


class TranspositionTable:
    """Best move per position from earlier iterations. Only used to order moves,
    so stale entries can never change a search value.
    """

    def __init__(self, max_size: int = 200_000):
        self.table: Dict[Tuple[int, ...], Position] = {}
        self.max_size = max_size

    @staticmethod
    def _key(board: Board, color: int) -> Tuple[int, ...]:
        return board.as_tuple() + (color,)

    def get(self, board: Board, color: int) -> Optional[Position]:
        return self.table.get(self._key(board, color))

    def store(self, board: Board, color: int, best: Position):
        if len(self.table) >= self.max_size:
            # Simple replacement strategy: clear half the table
            keys = list(self.table.keys())
            for key in keys[:len(keys) // 2]:
                del self.table[key]
        self.table[self._key(board, color)] = best

    def clear(self):
        self.table.clear()


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None):
        self.evaluator = evaluator or Evaluator()
        self.tt = TranspositionTable()
        self.killers: List[List[Optional[Position]]] = []
        self.history: List[List[int]] = []
        self._reset_heuristics()
        self._weights: EvalWeights = self.evaluator.weights
        self._nodes = 0
        self._node_limit: Optional[int] = None
        self._deadline: Optional[float] = None
        self._enforce_budget = False

    def _reset_heuristics(self):
        self.tt.clear()
        self.killers = [[None, None] for _ in range(MAX_SEARCH_DEPTH + 1)]  # [depth][2 moves]
        self.history = [[0 for _ in range(8)] for _ in range(8)]  # [r][c] -> count

    def best_move(self, board: Board, player: Player,
                  difficulty: "Difficulty | str | SearchLimits" = Difficulty.MEDIUM) -> Move:
        """The move the engine plays for `player` on `board`. Raises NoLegalMoveError when there is none."""
        return self.search(board, player, difficulty).move

    def search(self, board: Board, player: Player,
               difficulty: "Difficulty | str | SearchLimits" = Difficulty.MEDIUM) -> SearchResult:
        """Iterative deepening negamax, bounded by the difficulty's depth, time and node budgets.

        The board is never modified: every line is explored on copies.
        """
        start_time = time.time()
        player = Player(player)
        legal = legal_moves(board, player)
        if not legal:
            raise NoLegalMoveError(f"{player} has no legal move.")

        limits = limits_for(difficulty, self.evaluator.weights)
        self._weights = limits.weights
        self._reset_heuristics()
        self._nodes = 0
        self._node_limit = limits.max_nodes
        self._deadline = start_time + limits.max_time_ms / 1000 if limits.max_time_ms else None

        if len(legal) == 1:
            only = legal[0]
            child = board.copy()
            apply_move(child, only)
            score = self.evaluator.evaluate(child, player, self._weights)
            return SearchResult(only, score, 0, 0, (time.time() - start_time) * 1000)

        empties = board.empty_count()
        target_depth = limits.max_depth
        if empties <= limits.endgame_empties:
            # exact solve: deep enough to reach the end of the game
            target_depth = min(max(target_depth, empties), MAX_SEARCH_DEPTH)

        best: Optional[Tuple[int, Move, int]] = None
        for depth in range(1, target_depth + 1):
            # Depth 1 always completes so there is always a move to return
            self._enforce_budget = depth > 1
            try:
                score, move = self._search_root(board, player, legal, depth, limits.use_ordering)
            except SearchTimeout:
                logger.info("Search budget spent during depth %d, keeping depth %d", depth, best[2])
                break
            best = (score, move, depth)
            logger.debug("depth %d: %s score %d nodes %d", depth, move, score, self._nodes)
            if depth >= empties:
                # nothing deeper to explore
                break

        score, move, depth = best
        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug("Best move %s (score %d, depth %d, %d nodes, %.0f ms)",
                     move, score, depth, self._nodes, elapsed_ms)
        return SearchResult(move, score, depth, self._nodes, elapsed_ms)

    def _search_root(self, board: Board, color: Player, legal: List[Move], depth: int,
                     use_ordering: bool) -> Tuple[int, Move]:
        """Search every root move; among equal values the first move in generation order wins,
        whatever order the moves were searched in.
        """
        generation_index = {move.position: i for i, move in enumerate(legal)}
        ordered = self._order_moves(board, legal, depth, color) if use_ordering else legal

        best_move: Optional[Move] = None
        best_score = -INF
        for move in ordered:
            child = board.copy()
            apply_move(child, move)
            if best_move is None:
                score = -self._negamax(child, -color, depth - 1, -INF, INF)
                best_move, best_score = move, score
            elif generation_index[move.position] < generation_index[best_move.position]:
                # Ties go to this move: widen the window by one to tell ties from worse
                score = -self._negamax(child, -color, depth - 1, -INF, -(best_score - 1))
                if score >= best_score:
                    best_move, best_score = move, score
            else:
                score = -self._negamax(child, -color, depth - 1, -INF, -best_score)
                if score > best_score:
                    best_move, best_score = move, score

        self.tt.store(board, color, best_move.position)
        return best_score, best_move

    def _negamax(self, board: Board, color: int, depth: int, alpha: int, beta: int) -> int:
        """Negamax with alpha-beta pruning (fail-soft)"""
        self._nodes += 1
        if self._enforce_budget:
            self._check_budget()

        if depth == 0:
            return self.evaluator.evaluate(board, color, self._weights)

        moves = legal_moves(board, color)
        if not moves:
            if not can_move(board, -color):
                # Terminal node
                return self.evaluator.evaluate(board, color, self._weights)
            # A forced pass is not a leaf: the opponent plays at the same depth
            return -self._negamax(board, -color, depth, -beta, -alpha)

        best_move: Optional[Move] = None
        best_score = -INF
        for move in self._order_moves(board, moves, depth, color):
            child = board.copy()
            apply_move(child, move)
            score = -self._negamax(child, -color, depth - 1, -beta, -alpha)

            if score > best_score:
                best_score = score
                best_move = move

            if score > alpha:
                alpha = score
                if alpha >= beta:
                    # Beta cutoff - update killers and history
                    self._update_killers(move.position, depth)
                    self._update_history(move.position, depth)
                    break

        self.tt.store(board, color, best_move.position)
        return best_score

    def _check_budget(self):
        if self._node_limit is not None and self._nodes > self._node_limit:
            raise SearchTimeout()
        if self._deadline is not None and self._nodes % NODE_CHECK_INTERVAL == 0:
            if time.time() > self._deadline:
                raise SearchTimeout()

    def _order_moves(self, board: Board, moves: List[Move], depth: int, color: int) -> List[Move]:
        """Order moves for better alpha-beta pruning: TT -> corners -> killers -> safe edges
        -> safe inner squares -> X/C squares next to an empty corner. History sorts each group.
        """
        tt_best = self.tt.get(board, color)
        killers = [k for k in self.killers[min(depth, MAX_SEARCH_DEPTH)] if k]

        def rank(move: Move) -> int:
            rc = (move.r, move.c)
            if move.position == tt_best:
                return 0
            if rc in CORNERS:
                return 1
            if move.position in killers:
                return 2
            if rc in RISKY_SQUARES:
                cr, cc = RISKY_SQUARES[rc]
                if board.grid[cr][cc] == 0:
                    return 5
            if move.r in (0, 7) or move.c in (0, 7):
                return 3
            return 4

        # sorted() is stable: equal keys keep generation order
        return sorted(moves, key=lambda m: (rank(m), -self.history[m.r][m.c]))

    def _update_killers(self, pos: Position, depth: int):
        """Update killer moves"""
        killers = self.killers[min(depth, MAX_SEARCH_DEPTH)]
        if pos not in killers:
            killers[1] = killers[0]
            killers[0] = pos

    def _update_history(self, pos: Position, depth: int):
        """Update history heuristic"""
        self.history[pos.r][pos.c] += depth * depth
