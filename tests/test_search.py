"""
Tests for the time-bounded minimax search.
"""

import math
import time
import unittest

from engine.board import Board, Player
from engine.evaluation import WIN_SCORE, PositionEvaluator
from engine.move_generator import LegalMoveGenerator
from engine.pieces import ALL_SHAPES
from engine.search import SearchContext, iterative_deepening, minimax, order_moves
from schemas.engine_config import SearchConfig

from tests.utils_game_states import board_with_empty_cells, full_board, generate_random_valid_state, row_strip


class TestSearchContext(unittest.TestCase):
    """Test deadline bookkeeping."""

    def test_samples_clock_every_interval(self):
        ctx = SearchContext(deadline=time.perf_counter() - 1.0, check_interval=4)
        self.assertFalse(ctx.tick())
        self.assertFalse(ctx.tick())
        self.assertFalse(ctx.tick())
        self.assertTrue(ctx.tick())
        self.assertEqual(ctx.nodes, 4)

    def test_check_now(self):
        self.assertTrue(SearchContext(deadline=time.perf_counter() - 1.0).check_now())
        self.assertFalse(SearchContext.with_budget(60000).check_now())


class TestMinimax(unittest.TestCase):
    """Test the alpha-beta recursion."""

    def setUp(self):
        self.config = SearchConfig()
        self.evaluator = PositionEvaluator()

    def _ctx(self):
        return SearchContext.with_budget(60000)

    def test_stuck_maximizer_loses(self):
        value = minimax(full_board(), ALL_SHAPES, 3, True, -math.inf, math.inf,
                        self._ctx(), Player.ONE, self.evaluator, self.config)
        self.assertEqual(value, -(WIN_SCORE + 3))

    def test_stuck_minimizer_wins_for_maximizer(self):
        value = minimax(full_board(), ALL_SHAPES, 2, False, -math.inf, math.inf,
                        self._ctx(), Player.ONE, self.evaluator, self.config)
        self.assertEqual(value, WIN_SCORE + 2)

    def test_forced_sequence(self):
        # two strips and only I and L left: whoever takes the I leaves a strip
        # that L cannot use, so the side to move wins in one
        board = board_with_empty_cells(row_strip(0) + row_strip(4))
        value = minimax(board, frozenset({"I", "L"}), 2, True, -math.inf, math.inf,
                        self._ctx(), Player.ONE, self.evaluator, self.config)
        self.assertEqual(value, WIN_SCORE + 1)

    def test_expired_context_returns_static_evaluation(self):
        game = generate_random_valid_state(4, seed=1)
        ctx = SearchContext(deadline=time.perf_counter() - 1.0, check_interval=1)
        value = minimax(game.board, game.available_shapes, 4, True, -math.inf, math.inf,
                        ctx, Player.ONE, self.evaluator, self.config)
        self.assertEqual(value, self.evaluator.evaluate(game.board, game.available_shapes, True))
        self.assertEqual(ctx.nodes, 1)


class TestMoveOrdering(unittest.TestCase):

    def test_blocking_moves_come_first(self):
        # the L can take the I's only slot; no other L or I move strands the opponent
        strip_region = row_strip(0) + [(1, 4)]
        l_region = [(3, 0), (4, 0), (5, 0), (6, 0), (6, 1)]
        board = board_with_empty_cells(strip_region + l_region)
        available = frozenset({"I", "L"})
        moves = LegalMoveGenerator().enumerate_moves(board, available, dedupe=True)
        self.assertEqual(len(moves), 3)

        ordered = order_moves(board, moves, available, Player.ONE, limit=3)
        self.assertEqual(len(ordered), 3)
        self.assertEqual(ordered[0].shape_id, "L")
        self.assertIn((1, 4), ordered[0].cells)
        # flexibility ordering puts the inflexible I ahead of the remaining L
        self.assertEqual(ordered[1].shape_id, "I")

    def test_limit_caps_output(self):
        moves = LegalMoveGenerator().enumerate_moves(Board(), {"L"}, dedupe=True)
        self.assertEqual(len(order_moves(Board(), moves, frozenset({"L"}), Player.ONE, limit=5)), 5)


class TestIterativeDeepening(unittest.TestCase):
    """Test the root driver."""

    def test_no_moves(self):
        result = iterative_deepening(full_board(), ALL_SHAPES, Player.ONE)
        self.assertIsNone(result.move)
        self.assertEqual(result.completed_depth, 0)

    def test_instant_win_returned_immediately(self):
        board = board_with_empty_cells(row_strip(0) + row_strip(5))
        result = iterative_deepening(board, {"I", "X"}, Player.TWO)
        self.assertEqual(result.move.shape_id, "I")
        self.assertEqual(result.completed_depth, 1)
        self.assertEqual(result.score, WIN_SCORE)

    def test_respects_time_budget(self):
        game = generate_random_valid_state(3, seed=5)
        config = SearchConfig(time_budget_ms=200, max_depth=8)
        start = time.perf_counter()
        result = iterative_deepening(game.board, game.available_shapes, Player.TWO, config)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        self.assertLess(elapsed_ms, 200 + 500)
        self.assertGreaterEqual(result.nodes, 1)
        if result.move is not None:
            self.assertGreaterEqual(result.completed_depth, 1)

    def test_stops_deepening_once_a_forced_win_is_found(self):
        # three single-shape slots: whatever is played first, the mover also plays last
        strip = row_strip(0)
        l_region = [(2, 0), (3, 0), (4, 0), (5, 0), (5, 1)]
        plus = [(3, 4), (4, 3), (4, 4), (4, 5), (5, 4)]
        board = board_with_empty_cells(strip + l_region + plus)
        available = {"I", "L", "X", "P", "U"}
        config = SearchConfig(time_budget_ms=30000, max_depth=6)
        result = iterative_deepening(board, available, Player.ONE, config)
        self.assertFalse(result.timed_out)
        # a win one reply later than the instant-win check is first seen at depth 3
        self.assertEqual(result.completed_depth, 3)
        self.assertGreaterEqual(result.score, WIN_SCORE)
        self.assertLess(result.depth_scores[2], config.win_threshold)
        self.assertEqual(set(result.depth_scores), {2, 3})

    def test_deterministic_given_generous_budget(self):
        board = board_with_empty_cells(
            row_strip(0) + row_strip(2) + [(r, c) for r in range(5, 8) for c in range(5, 8)]
        )
        available = {"I", "X", "V", "T"}
        config = SearchConfig(time_budget_ms=30000, max_depth=4)
        first = iterative_deepening(board, available, Player.ONE, config)
        second = iterative_deepening(board, available, Player.ONE, config)
        self.assertFalse(first.timed_out)
        self.assertEqual(first.move, second.move)
        self.assertEqual(first.score, second.score)


if __name__ == '__main__':
    unittest.main()
