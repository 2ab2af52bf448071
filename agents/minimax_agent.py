"""
Minimax agent for Deadblock: time-limited alpha-beta search for the top tier.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from agents.heuristic_agent import HeuristicAgent
from engine.board import Board, Player
from engine.evaluation import PositionEvaluator
from engine.move_generator import LegalMoveGenerator, Move
from engine.pieces import TOTAL_PIECES
from engine.search import SearchResult, iterative_deepening
from schemas.engine_config import SelectorConfig

logger = logging.getLogger(__name__)


class MinimaxAgent:
    """
    Top skill tier.

    Runs iterative deepening under the configured time budget. Openings come
    from the heuristic agent's opening pool, and any search that fails or
    cannot finish depth 2 falls back to the heuristic agent.
    """

    def __init__(self, seed: Optional[int] = None, rng: Optional[np.random.RandomState] = None,
                 config: Optional[SelectorConfig] = None,
                 move_generator: Optional[LegalMoveGenerator] = None):
        self.config = config or SelectorConfig()
        self.move_generator = move_generator or LegalMoveGenerator()
        self.evaluator = PositionEvaluator(self.config.weights, self.move_generator)
        self.fallback = HeuristicAgent(seed=seed, rng=rng, config=self.config,
                                       move_generator=self.move_generator)
        self.last_result: Optional[SearchResult] = None

    @property
    def rng(self) -> np.random.RandomState:
        return self.fallback.rng

    def select_action(self, board: Board, player: Player, available_shapes: Iterable[str],
                      legal_moves: Optional[List[Move]] = None) -> Optional[Move]:
        """Select action using time-limited minimax."""
        return self.think(board, player, available_shapes, legal_moves)["move"]

    def think(self, board: Board, player: Player, available_shapes: Iterable[str],
              legal_moves: Optional[List[Move]] = None,
              time_budget_ms: Optional[int] = None) -> Dict[str, Any]:
        """
        Choose a move and report how it was chosen.

        Returns:
            Dict with ``move`` and ``stats`` (source, depth, nodes, elapsed)
        """
        available = frozenset(available_shapes)
        self.last_result = None
        if legal_moves is None:
            legal_moves = self.move_generator.enumerate_moves(board, available, dedupe=True)
        if not legal_moves:
            return {"move": None, "stats": {"source": "none"}}
        if len(legal_moves) == 1:
            return {"move": legal_moves[0], "stats": {"source": "forced"}}

        if TOTAL_PIECES - len(available) < self.config.opening_moves:
            move = self.fallback.select_opening_move(board, legal_moves)
            return {"move": move, "stats": {"source": "opening"}}

        search_config = self.config.search
        if time_budget_ms is not None:
            search_config = search_config.model_copy(update={"time_budget_ms": time_budget_ms})

        try:
            result = iterative_deepening(board, available, player, search_config, self.evaluator)
        except Exception:
            logger.exception("Minimax search failed; falling back to heuristic selection")
            result = None

        if result is None or result.move is None:
            if result is not None:
                logger.warning(f"Minimax search incomplete after {result.elapsed_ms:.0f}ms "
                               f"(depth={result.completed_depth}); falling back to heuristic selection")
            move = self.fallback.select_action(board, player, available, legal_moves)
            return {"move": move, "stats": {"source": "fallback"}}

        self.last_result = result
        return {
            "move": result.move,
            "stats": {
                "source": "search",
                "score": result.score,
                "depth": result.completed_depth,
                "nodesEvaluated": result.nodes,
                "elapsedMs": result.elapsed_ms,
                "timedOut": result.timed_out,
            },
        }

    def get_action_info(self) -> Dict[str, Any]:
        """Get information about the agent."""
        return {
            "name": "MinimaxAgent",
            "type": "professional",
            "description": "Iterative-deepening alpha-beta search under a wall-clock budget",
            "time_budget_ms": self.config.search.time_budget_ms,
        }

    def set_seed(self, seed: int):
        """Set random seed for reproducible behavior."""
        self.fallback.set_seed(seed)
