"""
Terminal and mobility queries.

``has_any_move`` is the terminal test: a side with no legal placement loses.
The counts feed the position evaluator.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional

from .board import Board
from .move_generator import DEFAULT_GENERATOR, LegalMoveGenerator
from .pieces import ordered_shapes


@dataclass
class MobilitySummary:
    legal_moves: int
    placeable_shapes: int
    blocked_shapes: FrozenSet[str]
    placements_by_shape: Dict[str, int]


def has_any_move(board: Board, available_shapes: Iterable[str],
                 generator: Optional[LegalMoveGenerator] = None) -> bool:
    """True on the first legal placement of any available shape."""
    generator = generator or DEFAULT_GENERATOR
    return any(generator.has_legal_placement(board, shape_id)
               for shape_id in ordered_shapes(available_shapes))


def placeable_shapes(board: Board, available_shapes: Iterable[str],
                     generator: Optional[LegalMoveGenerator] = None) -> FrozenSet[str]:
    """Available shapes with at least one legal placement."""
    generator = generator or DEFAULT_GENERATOR
    return frozenset(shape_id for shape_id in ordered_shapes(available_shapes)
                     if generator.has_legal_placement(board, shape_id))


def placeable_shape_count(board: Board, available_shapes: Iterable[str],
                          generator: Optional[LegalMoveGenerator] = None) -> int:
    """Number of available shapes that still fit somewhere."""
    return len(placeable_shapes(board, available_shapes, generator))


def legal_move_count(board: Board, available_shapes: Iterable[str],
                     generator: Optional[LegalMoveGenerator] = None) -> int:
    """Distinct legal placements (duplicates from symmetric shapes counted once)."""
    generator = generator or DEFAULT_GENERATOR
    return len(generator.enumerate_moves(board, available_shapes, dedupe=True))


def compute_mobility_summary(board: Board, available_shapes: Iterable[str],
                             generator: Optional[LegalMoveGenerator] = None) -> MobilitySummary:
    """
    Per-shape placement counts plus the aggregate mobility numbers.

    Args:
        board: Board to inspect
        available_shapes: Shape ids still in play

    Returns:
        MobilitySummary; ``blocked_shapes`` lists available shapes with no fit
    """
    generator = generator or DEFAULT_GENERATOR
    per_shape = {shape_id: generator.count_placements(board, shape_id, dedupe=True)
                 for shape_id in ordered_shapes(available_shapes)}
    return MobilitySummary(
        legal_moves=sum(per_shape.values()),
        placeable_shapes=sum(1 for count in per_shape.values() if count > 0),
        blocked_shapes=frozenset(shape_id for shape_id, count in per_shape.items() if count == 0),
        placements_by_shape=per_shape,
    )
