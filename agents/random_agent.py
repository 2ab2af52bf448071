"""
Random agent for Deadblock that picks uniformly from legal placements.
"""

from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from engine.board import Board, Player
from engine.move_generator import LegalMoveGenerator, Move


class RandomAgent:
    """
    Lowest skill tier: selects a distinct legal placement uniformly, no search.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.RandomState] = None,
                 move_generator: Optional[LegalMoveGenerator] = None):
        """
        Initialize random agent.

        Args:
            seed: Random seed for reproducible behavior
            rng: Random source to use instead of seeding a new one
            move_generator: Generator to enumerate placements with
        """
        self.rng = rng if rng is not None else np.random.RandomState(seed)
        self.move_generator = move_generator or LegalMoveGenerator()

    def select_action(self, board: Board, player: Player, available_shapes: Iterable[str],
                      legal_moves: Optional[List[Move]] = None) -> Optional[Move]:
        """
        Select a random legal move.

        Args:
            board: Current board state
            player: Player making the move
            available_shapes: Shapes not yet consumed
            legal_moves: Precomputed legal moves, enumerated if omitted

        Returns:
            Selected move, or None if no legal moves available
        """
        if legal_moves is None:
            legal_moves = self.move_generator.enumerate_moves(board, available_shapes, dedupe=True)
        if not legal_moves:
            return None

        move_idx = self.rng.randint(0, len(legal_moves))
        return legal_moves[move_idx]

    def get_action_info(self) -> Dict[str, Any]:
        """Get information about the agent."""
        return {
            "name": "RandomAgent",
            "type": "random",
            "description": "Selects moves uniformly from legal placements"
        }

    def set_seed(self, seed: int):
        """Set random seed for reproducible behavior."""
        self.rng = np.random.RandomState(seed)
