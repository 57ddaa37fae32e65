"""
Pytest configuration and shared builders for snake_agent tests.
"""

import pytest

from snake_agent.models import Player, WorldSnapshot


def snake(pid, *cells, bot_id=None, alive=True):
    """A player whose body is the given cells, head first."""
    return Player(id=pid, body=tuple(cells), bot_id=bot_id, alive=alive)


def world(*players, food=(), size=10, obstacles=()):
    return WorldSnapshot(players=tuple(players), food=frozenset(food),
                         grid_size=size, obstacles=tuple(obstacles))


@pytest.fixture
def lone_snake():
    """Our snake alone on a 10x10 board with food straight up."""
    return world(snake("me", (5, 5), bot_id="bot_me"), food=[(5, 0)])


@pytest.fixture
def update_payload():
    return {
        "type": "update",
        "state": {
            "players": [
                {"id": "p1", "botId": "bot_me", "head": {"x": 5, "y": 5},
                 "body": [{"x": 5, "y": 5}, {"x": 5, "y": 6}, {"x": 5, "y": 7}], "alive": True},
                {"id": "p2", "botId": "bot_other", "head": {"x": 1, "y": 1},
                 "body": [{"x": 1, "y": 1}, {"x": 1, "y": 2}], "length": 2},
            ],
            "food": [{"x": 5, "y": 0}],
            "gridSize": 10,
        },
    }
