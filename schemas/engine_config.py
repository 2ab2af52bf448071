"""
Pydantic schemas for engine configuration: evaluation weights, search limits
and move-selector behaviour.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field


class EvaluationWeights(BaseModel):
    """Weights for the scalar position heuristic."""
    move_weight: float = Field(default=1.0, ge=0.0, description="Per distinct legal placement")
    shape_weight: float = Field(default=25.0, ge=0.0, description="Per shape that still fits somewhere")
    block_weight: float = Field(default=6.0, ge=0.0, description="Per flexibility point of a blocked shape")
    dead_space_weight: float = Field(default=2.0, ge=0.0, description="Per dead empty cell")
    reserve_weight: float = Field(default=3.0, ge=0.0, description="Per flexibility point held in reserve")
    opening_shape_threshold: int = Field(
        default=9, ge=0, le=12,
        description="Positions with more available shapes than this skip the dead-space term"
    )
    late_game_threshold: int = Field(
        default=5, ge=0, le=12,
        description="Reserve bonus applies once this many or fewer shapes remain"
    )
    reserve_min_rank: int = Field(default=9, ge=1, le=12, description="Lowest flexibility rank counted as reserve")

    class Config:
        json_schema_extra = {
            "example": {
                "move_weight": 1.0,
                "shape_weight": 25.0,
                "block_weight": 6.0,
                "dead_space_weight": 2.0,
                "reserve_weight": 3.0,
            }
        }


class SearchConfig(BaseModel):
    """Limits for the time-bounded minimax search."""
    time_budget_ms: int = Field(default=1200, ge=50, le=30000, description="Wall-clock budget per decision")
    check_interval: int = Field(default=16, ge=1, description="Recursive calls between clock samples")
    max_depth: int = Field(default=6, ge=2, le=12)
    root_candidates: int = Field(default=8, ge=1, description="Root moves carried into deep search")
    branching_shallow: int = Field(default=8, ge=1, description="Top-K children when one ply remains")
    branching_deep: int = Field(default=6, ge=1, description="Top-K children when two or more plies remain")
    win_threshold: float = Field(default=50000.0, description="Stop deepening once a root move scores this high")


class SelectorConfig(BaseModel):
    """Behaviour of the move selector across skill tiers."""
    opening_moves: int = Field(default=2, ge=0, le=12, description="Moves played from the opening pool")
    opening_max_flex_rank: int = Field(default=6, ge=1, le=12)
    early_game_used: int = Field(default=6, ge=0, le=12, description="Used-shape count that ends the early game")
    early_noise: float = Field(default=400.0, ge=0.0)
    late_noise: float = Field(default=50.0, ge=0.0)
    early_top: int = Field(default=6, ge=1)
    late_top: int = Field(default=3, ge=1)
    selection_temperature: float = Field(default=50.0, gt=0.0)
    search: SearchConfig = Field(default_factory=SearchConfig)
    weights: EvaluationWeights = Field(default_factory=EvaluationWeights)

    @classmethod
    def from_env(cls, base: Optional["SelectorConfig"] = None) -> "SelectorConfig":
        """
        Apply ``DEADBLOCK_TIME_BUDGET_MS`` and ``DEADBLOCK_MAX_DEPTH`` overrides.

        Values are validated like any other field.
        """
        config = base or cls()
        search_overrides = {}
        budget = os.getenv("DEADBLOCK_TIME_BUDGET_MS")
        if budget:
            search_overrides["time_budget_ms"] = int(budget)
        depth = os.getenv("DEADBLOCK_MAX_DEPTH")
        if depth:
            search_overrides["max_depth"] = int(depth)
        if not search_overrides:
            return config
        search = SearchConfig(**{**config.search.model_dump(), **search_overrides})
        return config.model_copy(update={"search": search})
