"""
Pydantic schemas for engine configuration and serialized results.
"""

from .engine_config import EvaluationWeights, SearchConfig, SelectorConfig
from .move import MatchSummary, MoveSchema

__all__ = [
    "EvaluationWeights",
    "SearchConfig",
    "SelectorConfig",
    "MatchSummary",
    "MoveSchema",
]
