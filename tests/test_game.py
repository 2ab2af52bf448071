"""
Tests for DeadblockGame sessions and self-play.
"""

import unittest

from agents.heuristic_agent import HeuristicAgent
from agents.random_agent import RandomAgent
from engine.board import Board, Player
from engine.errors import IllegalMoveError, UnknownShapeIdentifier
from engine.game import DeadblockGame, GameResult, play_game
from engine.move_generator import LegalMoveGenerator, Move
from engine.pieces import ALL_SHAPES

from tests.utils_game_states import board_with_empty_cells, row_strip


class TestDeadblockGame(unittest.TestCase):
    """Test turn order and move validation."""

    def setUp(self):
        self.game = DeadblockGame()
        self.generator = LegalMoveGenerator()

    def test_initial_state(self):
        self.assertIs(self.game.get_current_player(), Player.ONE)
        self.assertEqual(self.game.available_shapes, ALL_SHAPES)
        self.assertFalse(self.game.is_game_over())
        self.assertIsNone(self.game.get_winner())
        self.assertIsNone(self.game.get_result())

    def test_make_move_switches_player_and_consumes_shape(self):
        move = self.generator.build_move(self.game.board, "X", 2, 2)
        self.game.make_move(move)
        self.assertIs(self.game.get_current_player(), Player.TWO)
        self.assertNotIn("X", self.game.available_shapes)
        self.assertEqual(self.game.board.occupied_count(), 5)
        self.assertIs(self.game.board.get_player_at(3, 3), Player.ONE)
        self.assertEqual(self.game.game_history[0]['action']['shape_id'], "X")
        self.assertEqual(self.game.game_history[0]['player'], "ONE")

    def test_reused_shape_rejected(self):
        self.game.make_move(self.generator.build_move(self.game.board, "X", 0, 0))
        again = self.generator.build_move(self.game.board, "X", 4, 4)
        with self.assertRaises(IllegalMoveError):
            self.game.make_move(again)
        self.assertIs(self.game.get_current_player(), Player.TWO)

    def test_overlapping_move_rejected(self):
        self.game.make_move(self.generator.build_move(self.game.board, "I", 0, 0))
        overlap = Move("L", 0, 0, 0, False, ((0, 0), (1, 0), (2, 0), (3, 0), (3, 1)))
        before = self.game.board.copy()
        with self.assertRaises(IllegalMoveError):
            self.game.make_move(overlap)
        self.assertEqual(self.game.board, before)

    def test_constructor_validates_used_shapes(self):
        with self.assertRaises(UnknownShapeIdentifier):
            DeadblockGame(used_shapes=["Q"])
        with self.assertRaises(IllegalMoveError):
            DeadblockGame(used_shapes=["I", "I"])

    def test_game_over_when_mover_is_stuck(self):
        board = board_with_empty_cells(row_strip(0))
        game = DeadblockGame(board=board, used_shapes=[], current_player=Player.TWO)
        game.make_move(game.get_legal_moves()[0])
        self.assertTrue(game.is_game_over())
        self.assertIs(game.get_winner(), Player.TWO)
        result = game.get_result()
        self.assertIsInstance(result, GameResult)
        self.assertIs(result.loser, Player.ONE)
        self.assertEqual(result.moves_played, 1)
        self.assertEqual(result.shapes_used, ["I"])

    def test_starting_board_is_copied(self):
        board = Board()
        game = DeadblockGame(board=board)
        game.make_move(self.generator.build_move(game.board, "P", 1, 1))
        self.assertEqual(board.occupied_count(), 0)


class TestPlayGame(unittest.TestCase):
    """Test full self-play games."""

    def test_random_self_play_terminates(self):
        result = play_game(RandomAgent(seed=1), RandomAgent(seed=2))
        self.assertIn(result.winner, (Player.ONE, Player.TWO))
        self.assertIs(result.loser, result.winner.opponent)
        self.assertGreaterEqual(result.moves_played, 1)
        self.assertLessEqual(result.moves_played, 12)
        self.assertEqual(len(result.shapes_used), len(set(result.shapes_used)))
        # the player who moved last wins
        expected = Player.ONE if result.moves_played % 2 == 1 else Player.TWO
        self.assertIs(result.winner, expected)

    def test_heuristic_against_random(self):
        result = play_game(HeuristicAgent(seed=3), RandomAgent(seed=4))
        self.assertEqual(len(result.shapes_used), result.moves_played)

    def test_seeded_games_repeat(self):
        first = play_game(RandomAgent(seed=7), RandomAgent(seed=8))
        second = play_game(RandomAgent(seed=7), RandomAgent(seed=8))
        self.assertEqual(first.shapes_used, second.shapes_used)
        self.assertIs(first.winner, second.winner)


if __name__ == '__main__':
    unittest.main()
