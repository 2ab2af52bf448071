"""
Deadblock Board implementation: an 8x8 grid shared by two players.
"""

from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .bitboard import FULL_MASK, coord_to_bit, coords_to_mask, popcount
from .errors import IllegalMoveError, InvalidBoardDimensions


class Player(Enum):
    """Player enumeration."""
    ONE = 1
    TWO = 2

    @property
    def opponent(self) -> "Player":
        return Player.TWO if self is Player.ONE else Player.ONE


class Board:
    """
    Deadblock game board.

    The board is an 8x8 grid where:
    - 0 represents empty space
    - 1-2 represent the owning player

    ``occupied_bits`` mirrors the grid as a bitmask (bit set = non-empty) and
    is kept in sync by ``place_piece``.
    """

    SIZE = 8

    def __init__(self, grid: Optional[Sequence[Sequence[Optional[int]]]] = None):
        if grid is None:
            self.grid = np.zeros((self.SIZE, self.SIZE), dtype=int)
        else:
            self.grid = self._coerce_grid(grid)
        self.occupied_bits = self._compute_occupied_bits()

    @classmethod
    def from_grid(cls, grid: Sequence[Sequence[Optional[int]]]) -> "Board":
        """Build a board from any row-major 8x8 grid; ``None`` cells are empty."""
        return cls(grid)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Board":
        """
        Build a board from text rows, e.g. ``"..12...."``.

        ``.`` is empty, a digit is the owning player.
        """
        return cls([[0 if ch == "." else int(ch) for ch in row] for row in rows])

    @classmethod
    def _coerce_grid(cls, grid) -> np.ndarray:
        rows = list(grid)
        if len(rows) != cls.SIZE or any(len(row) != cls.SIZE for row in rows):
            raise InvalidBoardDimensions(
                (len(rows), tuple(len(row) for row in rows)), cls.SIZE
            )
        return np.array(
            [[0 if value is None else int(value) for value in row] for row in rows],
            dtype=int,
        )

    def _compute_occupied_bits(self) -> int:
        rows, cols = np.nonzero(self.grid)
        return coords_to_mask(zip(rows.tolist(), cols.tolist()))

    def is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.SIZE and 0 <= col < self.SIZE

    def get_cell(self, row: int, col: int) -> int:
        """Get the value at a position, -1 when off the board."""
        if not self.is_valid_position(row, col):
            return -1
        return int(self.grid[row, col])

    def is_empty(self, row: int, col: int) -> bool:
        return self.get_cell(row, col) == 0

    def get_player_at(self, row: int, col: int) -> Optional[Player]:
        """Get the player at a position, or None if empty."""
        value = self.get_cell(row, col)
        if value <= 0:
            return None
        return Player(value)

    def get_edge_adjacent_positions(self, row: int, col: int) -> List[Tuple[int, int]]:
        """Get positions that share an edge (not diagonal)."""
        positions = []
        for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
            nr, nc = row + dr, col + dc
            if self.is_valid_position(nr, nc):
                positions.append((nr, nc))
        return positions

    def can_place(self, anchor_row: int, anchor_col: int, offsets: Iterable[Tuple[int, int]]) -> bool:
        """
        Check that every (x, y) offset lands on an in-bounds empty cell.

        Uses direct grid access; no side effects.
        """
        size = self.SIZE
        grid = self.grid
        for dx, dy in offsets:
            r = anchor_row + dy
            c = anchor_col + dx
            if r < 0 or r >= size or c < 0 or c >= size:
                return False
            if grid[r, c] != 0:
                return False
        return True

    def cells_are_free(self, mask: int) -> bool:
        """Bitboard form of the overlap test for a precomputed placement mask."""
        return mask & self.occupied_bits == 0

    def place_piece(self, cells: Iterable[Tuple[int, int]], player: Player) -> None:
        """
        Mark ``cells`` (absolute row, col) as owned by ``player``.

        Raises:
            IllegalMoveError: if any cell is off the board or already occupied.
                The board is left unchanged in that case.
        """
        cells = list(cells)
        mask = 0
        for r, c in cells:
            if not self.is_valid_position(r, c):
                raise IllegalMoveError(f"Cell ({r}, {c}) is off the board")
            bit = coord_to_bit(r, c)
            if self.occupied_bits & bit or mask & bit:
                raise IllegalMoveError(f"Cell ({r}, {c}) is already occupied")
            mask |= bit

        player_value = player.value
        for r, c in cells:
            self.grid[r, c] = player_value
        self.occupied_bits |= mask

    def occupied_count(self) -> int:
        return popcount(self.occupied_bits)

    def empty_count(self) -> int:
        return self.SIZE * self.SIZE - self.occupied_count()

    def is_full(self) -> bool:
        return self.occupied_bits == FULL_MASK

    def copy(self) -> "Board":
        """Create a deep copy of the board."""
        new_board = Board.__new__(Board)
        new_board.grid = self.grid.copy()
        new_board.occupied_bits = self.occupied_bits
        return new_board

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.grid, other.grid)

    __hash__ = None

    def __str__(self) -> str:
        """String representation of the board."""
        result = []
        for row in range(self.SIZE):
            row_str = ""
            for col in range(self.SIZE):
                value = self.grid[row, col]
                row_str += "." if value == 0 else str(value)
            result.append(row_str)
        return "\n".join(result)


def can_place(board: Board, anchor_row: int, anchor_col: int, cell_offsets: Iterable[Tuple[int, int]]) -> bool:
    """Bounds + overlap legality test for one candidate placement."""
    return board.can_place(anchor_row, anchor_col, cell_offsets)
