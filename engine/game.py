"""
Deadblock game session: turn order, shape bookkeeping and self-play.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .board import Board, Player
from .errors import IllegalMoveError
from .mobility_metrics import has_any_move
from .move_generator import LegalMoveGenerator, Move
from .pieces import ALL_SHAPES, validate_shapes

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """
    Final outcome of a game.

    Attributes:
        winner: Player who made the last legal move
        loser: Player left without a legal move
        moves_played: Number of placements made
        shapes_used: Shapes in the order they were played
    """
    winner: Player
    loser: Player
    moves_played: int
    shapes_used: List[str] = field(default_factory=list)


class DeadblockGame:
    """
    Two-player Deadblock game.

    Both players draw from one shared pool of 12 shapes. The player to move
    with no legal placement loses.
    """

    def __init__(self, board: Optional[Board] = None, used_shapes: Optional[List[str]] = None,
                 current_player: Player = Player.ONE,
                 move_generator: Optional[LegalMoveGenerator] = None):
        self.board = board.copy() if board is not None else Board()
        self.used_shapes: List[str] = list(used_shapes or [])
        validate_shapes(self.used_shapes)
        if len(set(self.used_shapes)) != len(self.used_shapes):
            raise IllegalMoveError(f"Shape used twice in {self.used_shapes}")
        self.current_player = current_player
        self.move_generator = move_generator or LegalMoveGenerator()
        self.game_history: List[Dict[str, Any]] = []

    @property
    def available_shapes(self) -> frozenset:
        return ALL_SHAPES - set(self.used_shapes)

    def get_current_player(self) -> Player:
        return self.current_player

    def get_legal_moves(self, dedupe: bool = True) -> List[Move]:
        """Legal moves for the player to move."""
        return self.move_generator.enumerate_moves(self.board, self.available_shapes, dedupe=dedupe)

    def make_move(self, move: Move) -> None:
        """
        Place ``move`` for the current player and pass the turn.

        Raises:
            IllegalMoveError: shape already used, or cells off-board/occupied
        """
        player = self.current_player
        if move.shape_id in self.used_shapes:
            raise IllegalMoveError(f"Shape {move.shape_id} has already been played")
        if not self.move_generator.is_move_legal(self.board, move, self.available_shapes):
            raise IllegalMoveError(f"{move} is not a legal placement")

        self.board.place_piece(move.cells, player)
        self.used_shapes.append(move.shape_id)
        self.game_history.append({
            'turn_number': len(self.game_history) + 1,
            'player': player.name,
            'action': {
                'shape_id': move.shape_id,
                'rotation': move.rotation,
                'flipped': move.flipped,
                'anchor_row': move.anchor_row,
                'anchor_col': move.anchor_col,
            },
            'cells': [list(cell) for cell in move.cells],
        })
        self.current_player = player.opponent
        logger.debug(f"Game: {player.name} played {move}; {len(self.available_shapes)} shapes left")

    def is_game_over(self) -> bool:
        """The player to move has no legal placement."""
        return not has_any_move(self.board, self.available_shapes, self.move_generator)

    def get_winner(self) -> Optional[Player]:
        """The player who moved last, once the game is over."""
        if not self.is_game_over():
            return None
        return self.current_player.opponent

    def get_result(self) -> Optional[GameResult]:
        winner = self.get_winner()
        if winner is None:
            return None
        return GameResult(winner=winner, loser=winner.opponent,
                          moves_played=len(self.game_history), shapes_used=list(self.used_shapes))


def play_game(agent_one, agent_two, game: Optional[DeadblockGame] = None) -> GameResult:
    """
    Play a game to completion between two agents.

    Args:
        agent_one: Agent for Player.ONE (anything with ``select_action``)
        agent_two: Agent for Player.TWO
        game: Starting position; a fresh game if omitted

    Returns:
        GameResult
    """
    game = game or DeadblockGame()
    agents = {Player.ONE: agent_one, Player.TWO: agent_two}
    start = time.perf_counter()

    while not game.is_game_over():
        player = game.get_current_player()
        move = agents[player].select_action(game.board, player, game.available_shapes)
        if move is None:
            raise IllegalMoveError(f"{player.name} agent passed while legal moves exist")
        game.make_move(move)

    result = game.get_result()
    logger.info(f"Game finished: winner={result.winner.name}, moves={result.moves_played}, "
                f"elapsed_s={time.perf_counter() - start:.2f}")
    return result
