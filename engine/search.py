"""
Time-bounded minimax search with alpha-beta pruning and iterative deepening.

The search is a set of plain functions threaded with a ``SearchContext``; it
holds no state between calls. Every node works on a private board copy.
"""

import logging
import math
import os
import time
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from schemas.engine_config import SearchConfig

from .board import Board, Player
from .evaluation import (
    INSTANT_WIN_SCORE,
    WIN_SCORE,
    PositionEvaluator,
    apply_move,
    center_score,
    lookahead_score,
)
from .mobility_metrics import has_any_move
from .move_generator import DEFAULT_GENERATOR, LegalMoveGenerator, Move
from .pieces import FLEXIBILITY_RANK, MAX_FLEXIBILITY

logger = logging.getLogger(__name__)

SEARCH_DEBUG = bool(os.getenv("DEADBLOCK_SEARCH_DEBUG", ""))

# Positions with more shapes than this left still reward central play when ordering.
_EARLY_ORDERING_SHAPES = 8
_FLEX_ORDER_WEIGHT = 2.0
_BLOCKING_ORDER_BONUS = 10000.0


@dataclass
class SearchContext:
    """Deadline bookkeeping shared by one search invocation."""
    deadline: float  # time.perf_counter() value
    check_interval: int = 16
    nodes: int = 0
    expired: bool = False

    @classmethod
    def with_budget(cls, budget_ms: float, check_interval: int = 16) -> "SearchContext":
        return cls(deadline=time.perf_counter() + budget_ms / 1000.0, check_interval=check_interval)

    def tick(self) -> bool:
        """Count a node; sample the clock every ``check_interval`` nodes. Returns ``expired``."""
        self.nodes += 1
        if not self.expired and self.nodes % self.check_interval == 0:
            self.expired = time.perf_counter() >= self.deadline
        return self.expired

    def check_now(self) -> bool:
        """Sample the clock immediately."""
        if not self.expired:
            self.expired = time.perf_counter() >= self.deadline
        return self.expired


@dataclass
class SearchResult:
    move: Optional[Move]
    score: float
    completed_depth: int
    nodes: int
    elapsed_ms: float
    timed_out: bool
    depth_scores: Dict[int, float] = field(default_factory=dict)


def order_moves(board: Board, moves: List[Move], available_shapes: FrozenSet[str], player: Player,
                limit: int, generator: Optional[LegalMoveGenerator] = None) -> List[Move]:
    """
    Cheap ordering to improve pruning, capped at ``limit`` moves.

    Prefers spending inflexible shapes, central cells while the board is open,
    and, for the leading candidates, moves that leave the opponent no reply.
    """
    generator = generator or DEFAULT_GENERATOR
    early = len(available_shapes) > _EARLY_ORDERING_SHAPES

    def quick_score(move: Move) -> float:
        score = _FLEX_ORDER_WEIGHT * (MAX_FLEXIBILITY + 1 - FLEXIBILITY_RANK[move.shape_id])
        if early:
            score += center_score(move.cells)
        return score

    scored = sorted(((quick_score(m), i, m) for i, m in enumerate(moves)), key=lambda t: (-t[0], t[1]))
    # Blocking pre-check only on the leading slice to keep ordering cheap
    head = scored[:2 * limit]
    rescored = []
    for score, index, move in head:
        child = apply_move(board, move, player)
        if not has_any_move(child, available_shapes - {move.shape_id}, generator):
            score += _BLOCKING_ORDER_BONUS
        rescored.append((score, index, move))
    rescored.sort(key=lambda t: (-t[0], t[1]))
    return [move for _, _, move in rescored[:limit]]


def minimax(board: Board, available_shapes: FrozenSet[str], depth: int, is_maximizing: bool,
            alpha: float, beta: float, ctx: SearchContext, maximizer: Player,
            evaluator: PositionEvaluator, config: SearchConfig) -> float:
    """
    Alpha-beta minimax value of a position, from the maximizer's point of view.

    Args:
        board: Position (not mutated)
        available_shapes: Shapes still in the shared pool
        depth: Plies left before static evaluation
        is_maximizing: True if the maximizer is to move
        alpha: Lower bound already guaranteed to the maximizer
        beta: Upper bound already guaranteed to the minimizer
        ctx: Deadline and node counter
        maximizer: The searching side
        evaluator: Static evaluation at the horizon
        config: Branching limits

    Returns:
        Position value; terminal values are offset by the remaining depth so
        faster wins and slower losses score better
    """
    if ctx.tick():
        return evaluator.evaluate(board, available_shapes, perspective_is_mover=is_maximizing)

    generator = evaluator.generator
    moves = generator.enumerate_moves(board, available_shapes, dedupe=True)
    if not moves:
        return -(WIN_SCORE + depth) if is_maximizing else WIN_SCORE + depth
    if depth <= 0:
        return evaluator.evaluate(board, available_shapes, perspective_is_mover=is_maximizing)

    player = maximizer if is_maximizing else maximizer.opponent
    limit = config.branching_deep if depth >= 2 else config.branching_shallow
    ordered = order_moves(board, moves, available_shapes, player, limit, generator)

    best = -math.inf if is_maximizing else math.inf
    for move in ordered:
        child = apply_move(board, move, player)
        value = minimax(child, available_shapes - {move.shape_id}, depth - 1, not is_maximizing,
                        alpha, beta, ctx, maximizer, evaluator, config)
        if ctx.expired:
            # unwind with whatever this node has seen so far
            if math.isinf(best):
                best = value
            break
        if is_maximizing:
            best = max(best, value)
            alpha = max(alpha, value)
        else:
            best = min(best, value)
            beta = min(beta, value)
        if beta <= alpha:
            break
    return best


def iterative_deepening(board: Board, available_shapes: Iterable[str], player: Player,
                        config: Optional[SearchConfig] = None,
                        evaluator: Optional[PositionEvaluator] = None) -> SearchResult:
    """
    Pick a move for ``player`` within ``config.time_budget_ms``.

    Root moves are ranked by the 1-ply lookahead; an immediate win is returned
    at once. Otherwise the best ``root_candidates`` are searched at depth 2,
    3, ... with candidates re-ordered by the previous depth's scores. A depth
    counts once at least one root candidate finished inside the budget.

    Returns:
        SearchResult; ``move`` is None if there is no legal move or depth 2
        could not complete
    """
    config = config or SearchConfig()
    evaluator = evaluator or PositionEvaluator()
    generator = evaluator.generator
    available = frozenset(available_shapes)
    start = time.perf_counter()
    ctx = SearchContext.with_budget(config.time_budget_ms, config.check_interval)

    def finish(move: Optional[Move], score: float, depth: int, depth_scores: Dict[int, float]) -> SearchResult:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        result = SearchResult(move, score, depth, ctx.nodes, elapsed_ms, ctx.expired, depth_scores)
        message = (f"Search: move={move}, score={score:.1f}, depth={depth}, nodes={ctx.nodes}, "
                   f"elapsed_ms={elapsed_ms:.1f}, timed_out={ctx.expired}")
        if SEARCH_DEBUG:
            logger.info(message)
        else:
            logger.debug(message)
        return result

    moves = generator.enumerate_moves(board, available, dedupe=True)
    if not moves:
        return finish(None, -WIN_SCORE, 0, {})

    root: List[Tuple[float, int, Move]] = []
    for index, move in enumerate(moves):
        root.append((lookahead_score(board, move, available, player, generator), index, move))
    root.sort(key=lambda t: (-t[0], t[1]))
    if root[0][0] >= INSTANT_WIN_SCORE:
        return finish(root[0][2], WIN_SCORE, 1, {1: WIN_SCORE})

    candidates = [move for _, _, move in root[:config.root_candidates]]
    best_move: Optional[Move] = None
    best_score = -math.inf
    completed = 0
    depth_scores: Dict[int, float] = {}
    max_depth = max(2, min(config.max_depth, len(available)))

    for depth in range(2, max_depth + 1):
        scores: Dict[Move, float] = {}
        alpha = -math.inf
        for move in candidates:
            if ctx.check_now():
                break
            child = apply_move(board, move, player)
            value = minimax(child, available - {move.shape_id}, depth - 1, False,
                            alpha, math.inf, ctx, player, evaluator, config)
            if ctx.expired:
                break
            scores[move] = value
            alpha = max(alpha, value)

        if not scores:
            break

        # first candidate wins ties, which keeps the previous depth's choice
        depth_best = max(scores, key=lambda m: scores[m])
        best_move, best_score, completed = depth_best, scores[depth_best], depth
        depth_scores[depth] = best_score
        logger.debug(f"Search: depth={depth} best={best_move} score={best_score:.1f} "
                     f"searched={len(scores)}/{len(candidates)} nodes={ctx.nodes}")

        if best_score >= config.win_threshold or ctx.expired:
            break
        candidates.sort(key=lambda m: scores.get(m, -math.inf), reverse=True)

    if best_move is None:
        return finish(None, -math.inf, 0, depth_scores)
    return finish(best_move, best_score, completed, depth_scores)
