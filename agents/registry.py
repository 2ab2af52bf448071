"""
Agent registry: skill tiers and the agents behind them.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Protocol, Union

import numpy as np

from agents.heuristic_agent import HeuristicAgent
from agents.minimax_agent import MinimaxAgent
from agents.random_agent import RandomAgent
from engine.board import Board, Player
from engine.move_generator import LegalMoveGenerator, Move
from schemas.engine_config import SelectorConfig


class SkillTier(str, Enum):
    """Computer opponent strength."""
    RANDOM = "random"
    AVERAGE = "average"
    PROFESSIONAL = "professional"


class AgentProtocol(Protocol):
    """Unified interface: select_action(board, player, available_shapes) -> Move or None."""

    def select_action(
        self,
        board: Board,
        player: Player,
        available_shapes: Iterable[str],
        legal_moves: Optional[List[Move]] = None,
    ) -> Optional[Move]:
        ...


def build_agent(
    tier: Union[SkillTier, str],
    seed: Optional[int] = None,
    rng: Optional[np.random.RandomState] = None,
    config: Optional[SelectorConfig] = None,
    move_generator: Optional[LegalMoveGenerator] = None,
) -> AgentProtocol:
    try:
        tier = SkillTier(tier.lower() if isinstance(tier, str) else tier)
    except ValueError:
        raise ValueError(f"Unknown skill tier: {tier}") from None

    if tier is SkillTier.RANDOM:
        return RandomAgent(seed=seed, rng=rng, move_generator=move_generator)
    if tier is SkillTier.AVERAGE:
        return HeuristicAgent(seed=seed, rng=rng, config=config, move_generator=move_generator)
    return MinimaxAgent(seed=seed, rng=rng, config=config, move_generator=move_generator)
