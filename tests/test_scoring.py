"""
Tests for the weighted move score.
"""

from dataclasses import replace

import pytest
from conftest import snake, world

from snake_agent.grid import CellState, Grid, build_grid
from snake_agent.scoring import (
    BALANCED,
    PERSONALITIES,
    ScoringContext,
    Weights,
    food_term,
    get_weights,
    position_term,
    score_cell,
    score_terms,
    space_term,
)
from snake_agent.threat import OpponentInfo


def ctx(**kw):
    kw.setdefault("own_length", 3)
    kw.setdefault("grid_size", 10)
    return ScoringContext(**kw)


class TestSpaceTerm:
    def test_trap_penalty_below_own_length(self):
        assert space_term(1, 3, BALANCED) == BALANCED.trap + BALANCED.space * 1

    def test_tight_and_cramped(self):
        w = BALANCED
        assert space_term(5, 3, w) == w.tight + w.space * 5
        assert space_term(7, 3, w) == w.cramped + w.space * 7
        assert space_term(50, 3, w) == w.space * 50

    def test_open_space_is_monotonic(self):
        values = [space_term(n, 3, BALANCED) for n in range(10, 100, 10)]
        assert values == sorted(values)


class TestFoodTerm:
    def test_no_food_contributes_nothing(self):
        grid = Grid(10)
        assert score_terms(grid, (5, 5), "up", ctx(), BALANCED)["food"] == 0.0

    def test_closer_food_scores_higher(self):
        c = ctx(food=frozenset({(5, 0)}))
        assert food_term(4, c, BALANCED) > food_term(6, c, BALANCED)
        assert food_term(4, c, BALANCED) == (20 - 4) * BALANCED.food

    def test_small_snake_weight(self):
        w = replace(BALANCED, food_when_small=9.0, small_length=5)
        assert food_term(0, ctx(own_length=3), w) == 20 * 9.0
        assert food_term(0, ctx(own_length=6), w) == 20 * w.food

    def test_path_distance_mode_respects_walls(self):
        grid = Grid(10)
        for x in range(10):
            if x != 9:
                grid.mark((x, 3), CellState.BLOCKED)
        w = replace(BALANCED, food_distance="path")
        c = ctx(food=frozenset({(0, 0)}))
        manhattan_terms = score_terms(grid, (0, 5), "up", c, BALANCED)
        path_terms = score_terms(grid, (0, 5), "up", c, w)
        assert path_terms["food"] < manhattan_terms["food"]

    def test_tail_chase_only_without_food(self):
        w = replace(BALANCED, tail_chase=2.0)
        grid = Grid(10)
        no_food = score_terms(grid, (5, 5), "up", ctx(own_tail=(5, 7)), w)
        assert no_food["tail"] == (10 - 2) * 2.0
        with_food = score_terms(grid, (5, 5), "up", ctx(own_tail=(5, 7), food=frozenset({(0, 0)})), w)
        assert with_food["tail"] == 0.0


class TestOpponentTerm:
    def opponent(self, prey, predicted=None, head=(5, 3), length=2):
        return OpponentInfo(id="o", head=head, length=length, predicted_next=predicted, prey=prey)

    def test_prey_prediction_on_candidate_raises_score(self):
        grid = Grid(10)
        cell = (5, 5)
        with_pred = ctx(opponents=[self.opponent(True, predicted=cell)])
        without = ctx(opponents=[self.opponent(True, predicted=None)])
        assert score_cell(grid, cell, "up", with_pred) > score_cell(grid, cell, "up", without)

    def test_threat_nearby_lowers_score(self):
        grid = Grid(10)
        near = ctx(opponents=[self.opponent(False, head=(5, 4), length=9)])
        far = ctx(opponents=[self.opponent(False, head=(0, 9), length=9)])
        assert score_cell(grid, (5, 5), "up", near) < score_cell(grid, (5, 5), "up", far)

    def test_threat_prediction_is_avoided(self):
        grid = Grid(10)
        heading_here = ctx(opponents=[self.opponent(False, head=(5, 8), predicted=(5, 5), length=9)])
        heading_away = ctx(opponents=[self.opponent(False, head=(5, 8), predicted=(5, 9), length=9)])
        assert (score_cell(grid, (5, 5), "up", heading_here)
                < score_cell(grid, (5, 5), "up", heading_away))


class TestPositionTerms:
    def test_edge_penalty(self):
        w = replace(BALANCED, centre=0.0)
        assert position_term((0, 5), 10, w) == w.edge
        assert position_term((5, 5), 10, w) == 0.0

    def test_wider_margin(self):
        w = replace(BALANCED, centre=0.0, edge_margin=2)
        assert position_term((1, 5), 10, w) == w.edge
        assert position_term((8, 5), 10, w) == w.edge
        assert position_term((2, 5), 10, w) == 0.0

    def test_corner_penalty(self):
        w = replace(BALANCED, centre=0.0, corner=-150.0)
        assert position_term((9, 9), 10, w) == w.edge + w.corner

    def test_momentum_bonus(self):
        grid = Grid(10)
        same = score_terms(grid, (5, 4), "up", ctx(last_direction="up"), BALANCED)
        turn = score_terms(grid, (5, 4), "up", ctx(last_direction="left"), BALANCED)
        assert same["momentum"] == BALANCED.momentum
        assert turn["momentum"] == 0.0

    def test_risk_cell_penalty(self):
        me = snake("me", (5, 6))
        big = snake("big", (5, 3), (5, 2), (5, 1))
        grid = build_grid(world(me, big), own_id="me")
        assert grid.state((5, 4)) is CellState.RISK
        assert score_terms(grid, (5, 4), "up", ctx(own_length=1), BALANCED)["risk"] == BALANCED.risk


class TestWeights:
    def test_personalities_share_term_set(self):
        for name, w in PERSONALITIES.items():
            assert isinstance(w, Weights), name

    def test_unknown_personality(self):
        with pytest.raises(KeyError):
            get_weights("berserker")

    def test_bad_food_distance_mode(self):
        with pytest.raises(ValueError):
            Weights(food_distance="euclid")
