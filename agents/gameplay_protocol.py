"""
Gameplay agent protocol for hosts that want timing stats with each move.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Protocol, Tuple

from engine.board import Board, Player
from engine.move_generator import Move


class GameplayAgentProtocol(Protocol):
    """
    Minimal gameplay contract; ``MinimaxAgent.think`` satisfies it.
    """

    def think(
        self,
        board: Board,
        player: Player,
        available_shapes: Iterable[str],
        legal_moves: Optional[list] = None,
        time_budget_ms: Optional[int] = None,
    ) -> Dict[str, Any]:
        ...


def choose_move(agent: GameplayAgentProtocol, board: Board, player: Player,
                available_shapes: Iterable[str], time_budget_ms: int) -> Tuple[Optional[Move], Dict[str, Any]]:
    """Run ``agent.think`` and split out the move and its stats."""
    result = agent.think(board, player, available_shapes, time_budget_ms=time_budget_ms)
    return result.get("move"), dict(result.get("stats") or {})
