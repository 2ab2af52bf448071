"""
Utility functions for building test positions.
"""

from typing import Iterable, Tuple

import numpy as np

from engine.board import Board, Player
from engine.game import DeadblockGame


def generate_random_valid_state(num_moves: int, seed: int = 0) -> DeadblockGame:
    """
    Play ``num_moves`` random legal moves from the empty board.

    Stops early if the side to move runs out of placements.

    Args:
        num_moves: Number of moves to make
        seed: Random seed for reproducibility

    Returns:
        The game after the moves were played
    """
    rng = np.random.RandomState(seed)
    game = DeadblockGame()
    for _ in range(num_moves):
        legal_moves = game.get_legal_moves()
        if not legal_moves:
            break
        game.make_move(legal_moves[rng.randint(0, len(legal_moves))])
    return game


def board_with_empty_cells(empty_cells: Iterable[Tuple[int, int]], owner: Player = Player.ONE) -> Board:
    """A board filled by ``owner`` everywhere except ``empty_cells``."""
    grid = np.full((Board.SIZE, Board.SIZE), owner.value, dtype=int)
    for r, c in empty_cells:
        grid[r, c] = 0
    return Board.from_grid(grid)


def full_board() -> Board:
    return board_with_empty_cells([])


def row_strip(row: int, start_col: int = 0, length: int = 5):
    """Cells of a horizontal strip."""
    return [(row, col) for col in range(start_col, start_col + length)]
