"""
Position evaluation for Deadblock.

Scores are computed for the side about to move and then oriented so that,
at every ply, higher is better for the searching (maximizing) side.
"""

from typing import Iterable, Optional, Tuple

from schemas.engine_config import EvaluationWeights

from .board import Board, Player
from .dead_space import dead_cell_count
from .mobility_metrics import compute_mobility_summary, has_any_move, placeable_shape_count
from .move_generator import DEFAULT_GENERATOR, LegalMoveGenerator, Move
from .pieces import FLEXIBILITY_RANK


# Terminal value; the search adds remaining depth on top of it.
WIN_SCORE = 100000.0
# 1-ply lookahead value for a move that leaves the opponent without a reply.
INSTANT_WIN_SCORE = 100000.0

_BOARD_CENTER = (Board.SIZE - 1) / 2.0


def center_score(cells: Iterable[Tuple[int, int]]) -> float:
    """Sum of per-cell closeness to the middle of the board."""
    score = 0.0
    for r, c in cells:
        score += (_BOARD_CENTER - abs(r - _BOARD_CENTER)) + (_BOARD_CENTER - abs(c - _BOARD_CENTER))
    return score


def apply_move(board: Board, move: Move, player: Player) -> Board:
    """Private copy of ``board`` with ``move`` placed for ``player``."""
    child = board.copy()
    child.place_piece(move.cells, player)
    return child


def lookahead_score(board: Board, move: Move, available_shapes: Iterable[str], player: Player,
                    generator: Optional[LegalMoveGenerator] = None) -> float:
    """
    Cheap 1-ply evaluation of ``move`` for ``player``.

    Simulates the move and looks at what the opponent is left with: no reply
    is an instant win, otherwise fewer placeable shapes is better. Central
    placements get a small bonus.
    """
    generator = generator or DEFAULT_GENERATOR
    child = apply_move(board, move, player)
    remaining = frozenset(available_shapes) - {move.shape_id}
    if not has_any_move(child, remaining, generator):
        return INSTANT_WIN_SCORE
    opponent_shapes = placeable_shape_count(child, remaining, generator)
    return 1000.0 - opponent_shapes * 100.0 + 2.0 * center_score(move.cells)


class PositionEvaluator:
    """
    Scalar heuristic combining mobility, blocking, dead space and reserve.

    Both sides draw from the same shape pool on the same board, so every term
    is measured for the side to move:
    - Legal placements and placeable shapes (shapes weigh more, since a raw
      placement count overstates options concentrated in one shape)
    - Blocking: available shapes that no longer fit, scaled by how flexible
      the shape normally is; the previous mover earned this
    - Dead space: empty cells no remaining shape can use (skipped in the
      opening, where it is mostly noise)
    - Reserve: late in the game, flexible shapes still placeable
    """

    def __init__(self, weights: Optional[EvaluationWeights] = None,
                 generator: Optional[LegalMoveGenerator] = None):
        self.weights = weights or EvaluationWeights()
        self.generator = generator or DEFAULT_GENERATOR

    def mover_score(self, board: Board, available_shapes: Iterable[str]) -> float:
        """Score from the side-to-move's point of view; ``-WIN_SCORE`` if it has no move."""
        available = frozenset(available_shapes)
        summary = compute_mobility_summary(board, available, self.generator)
        if summary.legal_moves == 0:
            return -WIN_SCORE

        w = self.weights
        score = w.move_weight * summary.legal_moves + w.shape_weight * summary.placeable_shapes
        score -= w.block_weight * sum(FLEXIBILITY_RANK[s] for s in summary.blocked_shapes)

        if len(available) <= w.opening_shape_threshold:
            score -= w.dead_space_weight * dead_cell_count(board, available, self.generator.cache)

        if len(available) <= w.late_game_threshold:
            reserve = sum(
                FLEXIBILITY_RANK[s] for s, count in summary.placements_by_shape.items()
                if count > 0 and FLEXIBILITY_RANK[s] >= w.reserve_min_rank
            )
            score += w.reserve_weight * reserve

        return score

    def evaluate(self, board: Board, available_shapes: Iterable[str], perspective_is_mover: bool = True) -> float:
        """
        Evaluate a position.

        Args:
            board: Position to score
            available_shapes: Shapes not yet consumed
            perspective_is_mover: Score for the side to move (True) or for the
                side that just moved (False, the negation)

        Returns:
            Deterministic score; +/-WIN_SCORE when the mover is stuck
        """
        score = self.mover_score(board, available_shapes)
        return score if perspective_is_mover else -score


_DEFAULT_EVALUATOR = PositionEvaluator()


def evaluate(board: Board, available_shapes: Iterable[str], perspective_is_mover: bool = True) -> float:
    """Evaluate with default weights."""
    return _DEFAULT_EVALUATOR.evaluate(board, available_shapes, perspective_is_mover)
