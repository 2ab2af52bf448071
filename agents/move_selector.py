"""
Public entry point for choosing the computer's move.
"""

import logging
from typing import Iterable, Optional, Sequence, Union

import numpy as np

from agents.registry import SkillTier, build_agent
from engine.board import Board, Player
from engine.move_generator import Move
from engine.pieces import available_from_used
from schemas.engine_config import SelectorConfig

logger = logging.getLogger(__name__)


def select_move(
    board: Union[Board, Sequence[Sequence[Optional[int]]]],
    used_shapes: Iterable[str],
    skill_tier: Union[SkillTier, str] = SkillTier.AVERAGE,
    *,
    player: Player = Player.TWO,
    config: Optional[SelectorConfig] = None,
    rng: Optional[Union[np.random.RandomState, int]] = None,
) -> Optional[Move]:
    """
    Choose a move for ``player``.

    Args:
        board: Board, or a raw 8x8 grid (None/0 empty, player ids otherwise)
        used_shapes: Shapes already consumed by either side
        skill_tier: random, average or professional
        player: Side to move; only affects the owner written into simulated cells
        config: Selector settings; defaults plus environment overrides if omitted
        rng: RandomState or integer seed for reproducible choices

    Returns:
        The chosen Move, or None when no legal move exists (the mover loses)

    Raises:
        InvalidBoardDimensions: grid is not 8x8
        UnknownShapeIdentifier: a used shape is outside the catalog
    """
    if not isinstance(board, Board):
        board = Board.from_grid(board)
    available = available_from_used(used_shapes)
    config = config or SelectorConfig.from_env()
    if isinstance(rng, (int, np.integer)):
        rng = np.random.RandomState(int(rng))

    agent = build_agent(skill_tier, rng=rng, config=config)
    move = agent.select_action(board, player, available)
    logger.debug(f"select_move: tier={skill_tier}, available={len(available)}, move={move}")
    return move
