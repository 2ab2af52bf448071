"""
Pydantic schemas for moves and match results.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class MoveSchema(BaseModel):
    """Serialized placement, for hosts that exchange moves as JSON."""
    shape_id: str = Field(..., min_length=1, max_length=1, description="Catalog letter of the shape")
    anchor_row: int = Field(..., ge=0, le=7)
    anchor_col: int = Field(..., ge=0, le=7)
    rotation: int = Field(..., ge=0, le=3, description="Quarter turns applied after the flip")
    flipped: bool = False
    cells: List[Tuple[int, int]] = Field(description="Absolute (row, col) cells covered")

    class Config:
        json_schema_extra = {
            "example": {
                "shape_id": "I",
                "anchor_row": 0,
                "anchor_col": 0,
                "rotation": 0,
                "flipped": False,
                "cells": [[0, 0], [1, 0], [2, 0], [3, 0], [4, 0]]
            }
        }

    @classmethod
    def from_move(cls, move) -> "MoveSchema":
        return cls(
            shape_id=move.shape_id,
            anchor_row=move.anchor_row,
            anchor_col=move.anchor_col,
            rotation=move.rotation,
            flipped=move.flipped,
            cells=[tuple(cell) for cell in move.cells],
        )


class MatchSummary(BaseModel):
    """Aggregate result of an arena run between two skill tiers."""
    tier_one: str
    tier_two: str
    games: int = Field(..., ge=0)
    wins_one: int = Field(0, ge=0)
    wins_two: int = Field(0, ge=0)
    average_moves: float = 0.0
    seed: Optional[int] = None

    class Config:
        json_schema_extra = {
            "example": {
                "tier_one": "professional",
                "tier_two": "random",
                "games": 10,
                "wins_one": 9,
                "wins_two": 1,
                "average_moves": 8.4,
                "seed": 42
            }
        }
