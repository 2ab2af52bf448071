"""
Bitboard utilities for the Deadblock board.

Cells are numbered row-major, so (row, col) maps to bit ``row * BOARD_WIDTH + col``.
A 64-bit Python int covers the whole 8x8 board, which lets the move enumerator
test a placement against the occupancy with a single AND.
"""

from typing import Iterable, List, Tuple

BOARD_WIDTH = 8
BOARD_HEIGHT = 8
NUM_CELLS = BOARD_WIDTH * BOARD_HEIGHT
FULL_MASK = (1 << NUM_CELLS) - 1


def coord_to_index(row: int, col: int) -> int:
    """
    Convert board coordinates to a linear index.

    Args:
        row: Row coordinate (0-based)
        col: Column coordinate (0-based)

    Returns:
        Linear index in [0, NUM_CELLS)
    """
    return row * BOARD_WIDTH + col


def index_to_coord(index: int) -> Tuple[int, int]:
    """Convert a linear index back to (row, col)."""
    return divmod(index, BOARD_WIDTH)


def coord_to_bit(row: int, col: int) -> int:
    """Single-bit mask for (row, col)."""
    return 1 << coord_to_index(row, col)


def coords_to_mask(coords: Iterable[Tuple[int, int]]) -> int:
    """
    Convert a collection of coordinates to a bitmask.

    Args:
        coords: Iterable of (row, col) tuples

    Returns:
        Bitmask with bits set for each coordinate
    """
    mask = 0
    for row, col in coords:
        mask |= coord_to_bit(row, col)
    return mask


def mask_to_coords(mask: int) -> List[Tuple[int, int]]:
    """
    Convert a bitmask back into a list of coordinates, in index order.

    Useful for debugging and testing.
    """
    coords = []
    index = 0
    while mask != 0:
        if mask & 1:
            coords.append(index_to_coord(index))
        mask >>= 1
        index += 1
    return coords


def popcount(mask: int) -> int:
    """Number of set bits."""
    return bin(mask).count("1")
