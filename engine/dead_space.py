"""
Dead-space analysis: empty regions that no remaining shape can occupy.

A region is a 4-connected component of empty cells. Regions smaller than a
pentomino are dead outright. Larger regions are dead only if no available
shape fits entirely inside them anywhere; a region where some shape fits is
counted fully live even if parts of it can never be covered. This is a
heuristic for the evaluator, not a legality rule.
"""

from typing import Iterable, List, Optional, Tuple

import numpy as np

from .bitboard import coords_to_mask
from .board import Board
from .pieces import DEFAULT_CACHE, FLIPS, PIECE_SIZE, ROTATIONS, OrientationCache, ordered_shapes

Region = List[Tuple[int, int]]


def find_empty_regions(board: Board) -> List[Region]:
    """Flood-fill the empty cells into 4-connected components, row-major."""
    visited = set()
    regions = []

    for r in range(board.SIZE):
        for c in range(board.SIZE):
            if board.grid[r, c] != 0 or (r, c) in visited:
                continue
            # BFS over empty neighbours
            component = []
            queue = [(r, c)]
            visited.add((r, c))
            head = 0
            while head < len(queue):
                curr_r, curr_c = queue[head]
                head += 1
                component.append((curr_r, curr_c))
                for nr, nc in board.get_edge_adjacent_positions(curr_r, curr_c):
                    if board.grid[nr, nc] == 0 and (nr, nc) not in visited:
                        visited.add((nr, nc))
                        queue.append((nr, nc))
            regions.append(component)

    return regions


def region_can_host(region_mask: int, available_shapes: Iterable[str],
                    cache: Optional[OrientationCache] = None) -> bool:
    """True if some available shape fits wholly inside the region."""
    cache = cache or DEFAULT_CACHE
    for shape_id in ordered_shapes(available_shapes):
        for flipped in FLIPS:
            for rotation in ROTATIONS:
                for template in cache.placements(shape_id, rotation, flipped):
                    if template.mask & region_mask == template.mask:
                        return True
    return False


def _dead_regions(board: Board, available_shapes: Iterable[str],
                  cache: Optional[OrientationCache]) -> List[Region]:
    available = frozenset(available_shapes)
    dead = []
    for region in find_empty_regions(board):
        if len(region) < PIECE_SIZE:
            dead.append(region)
        elif not region_can_host(coords_to_mask(region), available, cache):
            dead.append(region)
    return dead


def dead_cell_count(board: Board, available_shapes: Iterable[str],
                    cache: Optional[OrientationCache] = None) -> int:
    """Total empty cells lying in regions no available shape can use."""
    return sum(len(region) for region in _dead_regions(board, available_shapes, cache))


def compute_dead_zones(board: Board, available_shapes: Iterable[str],
                       cache: Optional[OrientationCache] = None) -> np.ndarray:
    """Returns an SIZE x SIZE boolean matrix marking dead cells."""
    dead_zones = np.zeros((board.SIZE, board.SIZE), dtype=bool)
    for region in _dead_regions(board, available_shapes, cache):
        for r, c in region:
            dead_zones[r, c] = True
    return dead_zones
