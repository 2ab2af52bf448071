"""
Endgame puzzle generation.

A puzzle is the position a few moves before the end of a self-play game,
together with the moves that were actually played from there.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .board import Board, Player
from .game import DeadblockGame
from .move_generator import LegalMoveGenerator, Move

logger = logging.getLogger(__name__)

PUZZLE_MOVES_REMAINING = {
    "easy": 3,
    "medium": 5,
    "hard": 7,
}

# Self-play prefers anchors near the middle while fewer than this many shapes are down
_CENTER_PHASE_USED = 4
_CENTER_MAX_DISTANCE = 4.0
_EMPTY_LABEL = "G"


@dataclass
class Puzzle:
    """
    A puzzle position.

    Attributes:
        board: Position to solve from
        used_shapes: Shapes already on the board
        player_to_move: Side to move in ``board``
        moves_remaining: Number of moves backed out of the finished game
        solution: The backed-out moves, in play order
        difficulty: easy, medium or hard
        shape_labels: (row, col) -> shape id for every occupied cell
    """
    board: Board
    used_shapes: List[str]
    player_to_move: Player
    moves_remaining: int
    solution: List[Move] = field(default_factory=list)
    difficulty: str = "easy"
    shape_labels: Dict[Tuple[int, int], str] = field(default_factory=dict)

    def board_string(self) -> str:
        """64 characters, row-major: the shape id on occupied cells, ``G`` on empty ones."""
        return "".join(
            self.shape_labels.get((row, col), _EMPTY_LABEL)
            for row in range(Board.SIZE)
            for col in range(Board.SIZE)
        )


def _center_distance(move: Move) -> float:
    center = (Board.SIZE - 1) / 2.0
    return abs(move.anchor_row - center) + abs(move.anchor_col - center)


def select_self_play_move(legal_moves: List[Move], used_count: int,
                          rng: np.random.RandomState) -> Optional[Move]:
    """Random move, restricted to central anchors early in the game when any exist."""
    if not legal_moves:
        return None
    pool = legal_moves
    if used_count < _CENTER_PHASE_USED:
        central = [m for m in legal_moves if _center_distance(m) < _CENTER_MAX_DISTANCE]
        if central:
            pool = central
    return pool[rng.randint(0, len(pool))]


def play_self_play_game(rng: np.random.RandomState,
                        move_generator: Optional[LegalMoveGenerator] = None) -> List[Move]:
    """Play a full game with the self-play policy and return the moves in order."""
    game = DeadblockGame(move_generator=move_generator)
    moves = []
    while True:
        # non-deduped, like the enumeration the policy was tuned on
        legal = game.get_legal_moves(dedupe=False)
        move = select_self_play_move(legal, len(game.used_shapes), rng)
        if move is None:
            break
        game.make_move(move)
        moves.append(move)
    return moves


def generate_puzzle(difficulty: str = "easy", rng: Optional[np.random.RandomState] = None,
                    max_attempts: int = 10,
                    move_generator: Optional[LegalMoveGenerator] = None) -> Optional[Puzzle]:
    """
    Build a puzzle by playing a game out and backing off its last moves.

    Args:
        difficulty: easy, medium or hard (3, 5 or 7 moves backed out)
        rng: Random source; a fresh unseeded one if omitted
        max_attempts: Self-play games to try before giving up
        move_generator: Generator shared by the self-play games

    Returns:
        Puzzle, or None if no attempt produced a playable position

    Raises:
        ValueError: unknown difficulty
    """
    if difficulty not in PUZZLE_MOVES_REMAINING:
        raise ValueError(f"Unknown puzzle difficulty: {difficulty}")
    moves_remaining = PUZZLE_MOVES_REMAINING[difficulty]
    rng = rng if rng is not None else np.random.RandomState()
    move_generator = move_generator or LegalMoveGenerator()

    for attempt in range(1, max_attempts + 1):
        moves = play_self_play_game(rng, move_generator)
        if len(moves) < moves_remaining:
            logger.debug(f"Puzzle attempt {attempt}: game too short ({len(moves)} moves)")
            continue

        split = len(moves) - moves_remaining
        game = DeadblockGame(move_generator=move_generator)
        labels = {}
        for move in moves[:split]:
            game.make_move(move)
            labels.update({cell: move.shape_id for cell in move.cells})

        if game.is_game_over():
            logger.debug(f"Puzzle attempt {attempt}: no legal move in puzzle position")
            continue

        logger.info(f"Puzzle generated on attempt {attempt}: difficulty={difficulty}, "
                    f"shapes_on_board={len(game.used_shapes)}")
        return Puzzle(
            board=game.board.copy(),
            used_shapes=list(game.used_shapes),
            player_to_move=game.get_current_player(),
            moves_remaining=moves_remaining,
            solution=list(moves[split:]),
            difficulty=difficulty,
            shape_labels=labels,
        )

    logger.warning(f"Failed to generate a {difficulty} puzzle after {max_attempts} attempts")
    return None
