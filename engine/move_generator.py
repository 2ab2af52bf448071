"""
Legal move generator for Deadblock.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple

from .board import Board
from .errors import IllegalMoveError
from .pieces import (
    DEFAULT_CACHE,
    FLIPS,
    ROTATIONS,
    OrientationCache,
    PlacementTemplate,
    ordered_shapes,
)

logger = logging.getLogger(__name__)

# Debug flag for move generation timing (controlled via environment variable)
MOVEGEN_DEBUG = bool(os.getenv("DEADBLOCK_MOVEGEN_DEBUG", ""))

PlacementHash = Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class Move:
    """A placement of one shape; ``cells`` are the absolute (row, col) it covers."""
    shape_id: str
    anchor_row: int
    anchor_col: int
    rotation: int
    flipped: bool
    cells: Tuple[Tuple[int, int], ...]
    mask: int = field(default=0, compare=False, repr=False)

    @property
    def placement_hash(self) -> PlacementHash:
        """Canonical key for geometrically identical placements."""
        return tuple(sorted(self.cells))

    def __str__(self):
        return (f"Move(shape={self.shape_id}, rotation={self.rotation}, flipped={self.flipped}, "
                f"anchor=({self.anchor_row}, {self.anchor_col}))")


def placement_hash(cells: Iterable[Tuple[int, int]]) -> PlacementHash:
    return tuple(sorted(cells))


class LegalMoveGenerator:
    """Generates legal placements for a board and a set of available shapes."""

    def __init__(self, cache: Optional[OrientationCache] = None):
        self.cache = cache if cache is not None else DEFAULT_CACHE

    def _iter_legal(self, board: Board, shape_id: str) -> Iterator[Tuple[int, bool, PlacementTemplate]]:
        """Yield (rotation, flipped, template) for every legal placement, flip -> rotation -> row -> col."""
        occupied = board.occupied_bits
        for flipped in FLIPS:
            for rotation in ROTATIONS:
                for template in self.cache.placements(shape_id, rotation, flipped):
                    if template.mask & occupied == 0:
                        yield rotation, flipped, template

    def enumerate_moves(self, board: Board, available_shapes: Iterable[str], dedupe: bool = False) -> List[Move]:
        """
        Get every legal placement of every available shape.

        Args:
            board: Current board state
            available_shapes: Shape ids not yet consumed
            dedupe: Skip placements whose occupied cells repeat an earlier one.
                Symmetric shapes reach the same cells from several
                (rotation, flip) pairs.

        Returns:
            List of legal moves in shape -> flip -> rotation -> row -> col order
        """
        start = time.perf_counter() if MOVEGEN_DEBUG else 0.0
        moves = []
        seen = set() if dedupe else None

        for shape_id in ordered_shapes(available_shapes):
            for rotation, flipped, template in self._iter_legal(board, shape_id):
                if seen is not None:
                    # the mask is a 1:1 encoding of the sorted absolute cell set
                    if template.mask in seen:
                        continue
                    seen.add(template.mask)
                moves.append(Move(shape_id, template.anchor_row, template.anchor_col,
                                  rotation, flipped, template.cells, template.mask))

        if MOVEGEN_DEBUG:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            logger.info(f"MoveGen: legal_moves={len(moves)}, dedupe={dedupe}, elapsed_ms={elapsed_ms:.2f}")
        return moves

    def has_legal_placement(self, board: Board, shape_id: str) -> bool:
        """True as soon as one placement of ``shape_id`` fits."""
        for _ in self._iter_legal(board, shape_id):
            return True
        return False

    def count_placements(self, board: Board, shape_id: str, dedupe: bool = True) -> int:
        """Number of legal placements of a single shape."""
        if not dedupe:
            return sum(1 for _ in self._iter_legal(board, shape_id))
        return len({template.mask for _, _, template in self._iter_legal(board, shape_id)})

    def get_legal_moves_for_piece(self, board: Board, shape_id: str, dedupe: bool = False) -> List[Move]:
        """Get all legal moves for a specific shape."""
        return self.enumerate_moves(board, [shape_id], dedupe=dedupe)

    def is_move_legal(self, board: Board, move: Move, available_shapes: Iterable[str]) -> bool:
        """
        Check that the shape is still available and its cells are free.

        The cells are re-derived from the orientation, so a hand-built Move
        whose cell list disagrees with its shape is rejected.
        """
        if move.shape_id not in set(available_shapes):
            return False
        if move.rotation not in ROTATIONS:
            return False
        offsets = self.cache.orientation(move.shape_id, move.rotation, move.flipped)
        expected = tuple((move.anchor_row + y, move.anchor_col + x) for x, y in offsets)
        if placement_hash(expected) != move.placement_hash:
            return False
        return board.can_place(move.anchor_row, move.anchor_col, offsets)

    def build_move(self, board: Board, shape_id: str, anchor_row: int, anchor_col: int,
                   rotation: int = 0, flipped: bool = False) -> Move:
        """
        Materialize a Move from its parameters.

        Raises:
            IllegalMoveError: if the placement is off the board or overlaps.
        """
        offsets = self.cache.orientation(shape_id, rotation, flipped)
        if not board.can_place(anchor_row, anchor_col, offsets):
            raise IllegalMoveError(
                f"{shape_id} (rotation={rotation}, flipped={flipped}) does not fit at ({anchor_row}, {anchor_col})"
            )
        cells = tuple((anchor_row + y, anchor_col + x) for x, y in offsets)
        return Move(shape_id, anchor_row, anchor_col, rotation, flipped, cells)


DEFAULT_GENERATOR = LegalMoveGenerator()


def enumerate_moves(board: Board, available_shapes: Iterable[str], dedupe: bool = False) -> List[Move]:
    """Module-level shortcut using the shared orientation cache."""
    return DEFAULT_GENERATOR.enumerate_moves(board, available_shapes, dedupe=dedupe)
