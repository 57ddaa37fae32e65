"""
Tests for the occupancy grid.
"""

from conftest import snake, world

from snake_agent.grid import CellState, build_grid
from snake_agent.models import Obstacle


class TestBuildGrid:
    def test_empty_world_is_free(self):
        grid = build_grid(world())
        assert grid.count(CellState.FREE) == 100
        assert grid.count(CellState.BLOCKED) == 0

    def test_bodies_are_blocked(self):
        grid = build_grid(world(snake("a", (2, 2), (2, 3), (2, 4))))
        for c in [(2, 2), (2, 3), (2, 4)]:
            assert grid.state(c) is CellState.BLOCKED
        assert grid.state((3, 3)) is CellState.FREE

    def test_out_of_bounds_segments_ignored(self):
        grid = build_grid(world(snake("a", (0, 0), (-1, 0), (-2, 0))))
        assert grid.count(CellState.BLOCKED) == 1

    def test_out_of_bounds_is_implicitly_blocked(self):
        grid = build_grid(world())
        assert grid.is_blocked((-1, 0))
        assert grid.is_blocked((0, 10))

    def test_corpses_are_blocked_but_not_risky(self):
        me = snake("me", (8, 8))
        corpse = snake("a", (2, 2), (2, 3), alive=False)
        grid = build_grid(world(me, corpse), own_id="me")
        assert grid.state((2, 2)) is CellState.BLOCKED
        assert grid.state((2, 3)) is CellState.BLOCKED
        assert grid.count(CellState.RISK) == 0

    def test_risk_around_longer_opponent_head(self):
        me = snake("me", (8, 8))
        big = snake("big", (4, 4), (4, 5), (4, 6))
        grid = build_grid(world(me, big), own_id="me")
        assert grid.state((4, 3)) is CellState.RISK
        assert grid.state((3, 4)) is CellState.RISK
        assert grid.state((5, 4)) is CellState.RISK
        # its own neck stays blocked, risk never downgrades a body cell
        assert grid.state((4, 5)) is CellState.BLOCKED

    def test_equal_length_opponent_is_risky(self):
        me = snake("me", (8, 8), (8, 9))
        other = snake("o", (2, 2), (2, 3))
        grid = build_grid(world(me, other), own_id="me")
        assert grid.state((2, 1)) is CellState.RISK

    def test_shorter_opponent_is_not_risky(self):
        me = snake("me", (8, 8), (8, 9), (9, 9))
        small = snake("s", (2, 2))
        grid = build_grid(world(me, small), own_id="me")
        assert grid.count(CellState.RISK) == 0

    def test_risk_can_be_disabled(self):
        me = snake("me", (8, 8))
        big = snake("big", (4, 4), (4, 5))
        grid = build_grid(world(me, big), own_id="me", mark_risk=False)
        assert grid.count(CellState.RISK) == 0

    def test_obstacles(self):
        snap = world(obstacles=[Obstacle((1, 1), solid=True), Obstacle((2, 2), solid=False)])
        grid = build_grid(snap)
        assert grid.state((1, 1)) is CellState.BLOCKED
        assert grid.state((2, 2)) is CellState.RISK

    def test_render(self):
        grid = build_grid(world(snake("a", (0, 0)), size=2))
        assert grid.render() == "#.\n.."
