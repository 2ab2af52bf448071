"""
Heuristic agent for Deadblock: 1-ply lookahead with randomized selection.
"""

from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from engine.board import Board, Player
from engine.evaluation import lookahead_score
from engine.move_generator import LegalMoveGenerator, Move
from engine.pieces import FLEXIBILITY_RANK, TOTAL_PIECES
from schemas.engine_config import SelectorConfig


class HeuristicAgent:
    """
    Middle skill tier.

    - Opening: random pick among central placements of inflexible shapes
    - Afterwards: score every move by what it leaves the opponent (1-ply),
      add noise (more early, less late) and draw from the top few with a
      softmax over their scores
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.RandomState] = None,
                 config: Optional[SelectorConfig] = None,
                 move_generator: Optional[LegalMoveGenerator] = None):
        """
        Initialize heuristic agent.

        Args:
            seed: Random seed for reproducible behavior
            rng: Random source to use instead of seeding a new one
            config: Selector settings (noise, pool sizes, opening policy)
            move_generator: Generator to enumerate placements with
        """
        self.rng = rng if rng is not None else np.random.RandomState(seed)
        self.config = config or SelectorConfig()
        self.move_generator = move_generator or LegalMoveGenerator()

    def select_action(self, board: Board, player: Player, available_shapes: Iterable[str],
                      legal_moves: Optional[List[Move]] = None) -> Optional[Move]:
        """
        Select a move based on heuristics.

        Args:
            board: Current board state
            player: Player making the move
            available_shapes: Shapes not yet consumed
            legal_moves: Precomputed legal moves, enumerated if omitted

        Returns:
            Selected move, or None if no legal moves available
        """
        available = frozenset(available_shapes)
        if legal_moves is None:
            legal_moves = self.move_generator.enumerate_moves(board, available, dedupe=True)
        if not legal_moves:
            return None
        if len(legal_moves) == 1:
            return legal_moves[0]

        if TOTAL_PIECES - len(available) < self.config.opening_moves:
            return self.select_opening_move(board, legal_moves)
        return self.select_scored_move(board, player, available, legal_moves)

    def select_opening_move(self, board: Board, legal_moves: List[Move]) -> Move:
        """
        Pseudo-random opening: central anchors, inflexible shapes.

        Falls back to the whole move list when the preferred pool is tiny.
        """
        low, high = 1, board.SIZE - 3
        pool = [
            m for m in legal_moves
            if low <= m.anchor_row <= high and low <= m.anchor_col <= high
            and FLEXIBILITY_RANK[m.shape_id] <= self.config.opening_max_flex_rank
        ]
        if len(pool) <= 5:
            pool = legal_moves
        return pool[self.rng.randint(0, len(pool))]

    def score_moves(self, board: Board, player: Player, available_shapes: Iterable[str],
                    legal_moves: List[Move]) -> np.ndarray:
        """Lookahead score per move plus selection noise."""
        available = frozenset(available_shapes)
        early = TOTAL_PIECES - len(available) < self.config.early_game_used
        noise = self.config.early_noise if early else self.config.late_noise
        scores = np.array([
            lookahead_score(board, move, available, player, self.move_generator)
            for move in legal_moves
        ], dtype=float)
        return scores + self.rng.uniform(0.0, noise, size=len(legal_moves))

    def select_scored_move(self, board: Board, player: Player, available_shapes: Iterable[str],
                           legal_moves: List[Move]) -> Move:
        available = frozenset(available_shapes)
        scores = self.score_moves(board, player, available, legal_moves)

        early = TOTAL_PIECES - len(available) < self.config.early_game_used
        top_count = self.config.early_top if early else self.config.late_top
        top = np.argsort(-scores, kind="stable")[:top_count]

        probabilities = self._softmax(scores[top], temperature=self.config.selection_temperature)
        pick = self.rng.choice(len(top), p=probabilities)
        return legal_moves[int(top[pick])]

    def _softmax(self, x: np.ndarray, temperature: float = 1.0) -> np.ndarray:
        """
        Apply softmax with temperature to convert scores to probabilities.

        Args:
            x: Input scores
            temperature: Temperature parameter (higher = more random)

        Returns:
            Probabilities
        """
        x_scaled = x / temperature
        # Subtract max for numerical stability
        exp_x = np.exp(x_scaled - np.max(x_scaled))
        return exp_x / np.sum(exp_x)

    def get_action_info(self) -> Dict[str, Any]:
        """Get information about the agent."""
        return {
            "name": "HeuristicAgent",
            "type": "average",
            "description": "1-ply lookahead on opponent mobility with randomized top-N selection",
            "noise": {"early": self.config.early_noise, "late": self.config.late_noise},
        }

    def set_seed(self, seed: int):
        """Set random seed for reproducible behavior."""
        self.rng = np.random.RandomState(seed)
