"""
Tests for the skill-tiered move selector and the agents behind it.
"""

import math

import numpy as np
import pytest

from agents.heuristic_agent import HeuristicAgent
from agents.minimax_agent import MinimaxAgent
from agents.move_selector import select_move
from agents.random_agent import RandomAgent
from agents.registry import SkillTier, build_agent
from agents.gameplay_protocol import choose_move
from engine.board import Board, Player
from engine.errors import InvalidBoardDimensions, UnknownShapeIdentifier
from engine.move_generator import LegalMoveGenerator
from engine.pieces import ALL_SHAPES, SHAPE_IDS
from engine.search import SearchResult
from schemas.engine_config import SearchConfig, SelectorConfig

from tests.utils_game_states import board_with_empty_cells, full_board, generate_random_valid_state, row_strip

ALL_TIERS = list(SkillTier)


def _fast_config():
    return SelectorConfig(search=SearchConfig(time_budget_ms=300, max_depth=3))


@pytest.mark.parametrize("tier", ALL_TIERS)
def test_single_legal_move_is_returned(tier):
    board = board_with_empty_cells(row_strip(3, start_col=1))
    move = select_move(board, [], tier, config=_fast_config(), rng=0)
    assert move is not None
    assert move.shape_id == "I"
    assert sorted(move.cells) == row_strip(3, start_col=1)


@pytest.mark.parametrize("tier", ALL_TIERS)
def test_no_legal_move_returns_none(tier):
    assert select_move(full_board(), [], tier, config=_fast_config(), rng=0) is None
    # every shape already used
    assert select_move(Board(), list(SHAPE_IDS), tier, config=_fast_config(), rng=0) is None


@pytest.mark.parametrize("tier", ALL_TIERS)
def test_returned_move_is_legal(tier):
    game = generate_random_valid_state(4, seed=9)
    generator = LegalMoveGenerator()
    move = select_move(game.board, game.used_shapes, tier, config=_fast_config(), rng=1)
    assert move is not None
    assert move.shape_id not in game.used_shapes
    assert generator.is_move_legal(game.board, move, game.available_shapes)


@pytest.mark.parametrize("tier", ["random", "AVERAGE", SkillTier.PROFESSIONAL])
def test_tier_accepts_strings_and_enum(tier):
    agent = build_agent(tier, seed=0, config=_fast_config())
    assert agent.select_action(full_board(), Player.ONE, ALL_SHAPES) is None


def test_unknown_tier_rejected():
    with pytest.raises(ValueError):
        build_agent("grandmaster")


def test_registry_builds_expected_agents():
    assert isinstance(build_agent(SkillTier.RANDOM, seed=0), RandomAgent)
    assert isinstance(build_agent(SkillTier.AVERAGE, seed=0), HeuristicAgent)
    assert isinstance(build_agent(SkillTier.PROFESSIONAL, seed=0), MinimaxAgent)


def test_raw_grid_input():
    grid = [[None] * 8 for _ in range(8)]
    move = select_move(grid, ["I"], SkillTier.RANDOM, rng=3)
    assert move is not None
    assert move.shape_id != "I"


def test_invalid_board_dimensions():
    with pytest.raises(InvalidBoardDimensions):
        select_move([[0] * 8 for _ in range(6)], [], SkillTier.RANDOM)


def test_unknown_used_shape():
    with pytest.raises(UnknownShapeIdentifier):
        select_move(Board(), ["I", "Q"], SkillTier.AVERAGE)


@pytest.mark.parametrize("tier", [SkillTier.RANDOM, SkillTier.AVERAGE])
def test_seeded_selection_is_reproducible(tier):
    game = generate_random_valid_state(3, seed=2)
    first = select_move(game.board, game.used_shapes, tier, rng=np.random.RandomState(42))
    second = select_move(game.board, game.used_shapes, tier, rng=42)
    assert first == second


def test_heuristic_opening_prefers_central_inflexible_shapes():
    agent = HeuristicAgent(seed=0)
    for _ in range(20):
        move = agent.select_action(Board(), Player.ONE, ALL_SHAPES)
        assert 1 <= move.anchor_row <= 5 and 1 <= move.anchor_col <= 5
        assert move.shape_id in {"X", "I", "U", "W", "V", "T"}


def test_heuristic_takes_instant_win_late():
    # strips for two I-shaped slots; taking the I leaves X nowhere to go
    board = board_with_empty_cells(row_strip(0) + row_strip(5) + [(3, 3)])
    agent = HeuristicAgent(seed=0)
    move = agent.select_action(board, Player.ONE, {"I", "X"})
    assert move.shape_id == "I"


def test_minimax_think_reports_stats():
    game = generate_random_valid_state(4, seed=6)
    agent = MinimaxAgent(seed=0, config=_fast_config())
    move, stats = choose_move(agent, game.board, Player.ONE, game.available_shapes, time_budget_ms=200)
    assert move is not None
    assert stats["source"] in {"search", "fallback"}
    if stats["source"] == "search":
        assert stats["depth"] >= 1
        assert stats["nodesEvaluated"] >= 1


def test_minimax_opening_and_forced_sources():
    agent = MinimaxAgent(seed=0, config=_fast_config())
    assert agent.think(Board(), Player.ONE, ALL_SHAPES)["stats"]["source"] == "opening"
    forced = board_with_empty_cells(row_strip(2))
    assert agent.think(forced, Player.ONE, ALL_SHAPES)["stats"]["source"] == "forced"
    assert agent.think(full_board(), Player.ONE, ALL_SHAPES)["stats"]["source"] == "none"


def test_minimax_falls_back_when_search_raises(monkeypatch):
    import agents.minimax_agent as minimax_module

    def broken_search(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(minimax_module, "iterative_deepening", broken_search)
    game = generate_random_valid_state(4, seed=6)
    agent = MinimaxAgent(seed=0, config=_fast_config())
    result = agent.think(game.board, Player.ONE, game.available_shapes)
    assert result["move"] is not None
    assert result["stats"]["source"] == "fallback"


def test_minimax_falls_back_when_depth_two_never_completes(monkeypatch):
    import agents.minimax_agent as minimax_module

    def unfinished_search(*args, **kwargs):
        return SearchResult(move=None, score=-math.inf, completed_depth=0, nodes=1,
                            elapsed_ms=50.0, timed_out=True)

    monkeypatch.setattr(minimax_module, "iterative_deepening", unfinished_search)
    game = generate_random_valid_state(4, seed=6)
    agent = MinimaxAgent(seed=0, config=_fast_config())
    result = agent.think(game.board, Player.ONE, game.available_shapes, time_budget_ms=50)
    assert result["stats"]["source"] == "fallback"
    assert agent.last_result is None
    assert LegalMoveGenerator().is_move_legal(game.board, result["move"], game.available_shapes)
