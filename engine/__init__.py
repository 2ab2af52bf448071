"""
Deadblock game engine package.

This package contains the core logic for Deadblock, including:
- Board management and the pentomino catalog
- Orientation generation and legal move enumeration
- Mobility and dead-space analysis
- Position evaluation and time-bounded search
- Game sessions and puzzle generation
"""

from .board import Board, Player
from .errors import DeadblockError, IllegalMoveError, InvalidBoardDimensions, UnknownShapeIdentifier
from .evaluation import PositionEvaluator, evaluate
from .game import DeadblockGame, GameResult, play_game
from .move_generator import LegalMoveGenerator, Move, enumerate_moves
from .pieces import ALL_SHAPES, OrientationCache, Piece, orientations
from .search import SearchContext, SearchResult, iterative_deepening

__all__ = [
    'Board', 'Player',
    'Piece', 'ALL_SHAPES', 'OrientationCache', 'orientations',
    'Move', 'LegalMoveGenerator', 'enumerate_moves',
    'PositionEvaluator', 'evaluate',
    'SearchContext', 'SearchResult', 'iterative_deepening',
    'DeadblockGame', 'GameResult', 'play_game',
    'DeadblockError', 'IllegalMoveError', 'InvalidBoardDimensions', 'UnknownShapeIdentifier',
]
