"""
World snapshot types and parsing for the snake arena protocol.

The arena pushes one ``update`` per tick with every player's body, the food
list and (in competitive rooms) obstacles. Everything here is immutable for
the duration of one decision.
"""
from __future__ import annotations
from typing import Any, Dict, FrozenSet, Optional, Tuple
from dataclasses import dataclass, field

# ---------------------------------
# Types & helpers
# ---------------------------------
Coord = Tuple[int, int]

DEFAULT_GRID_SIZE = 30
MAX_GRID_SIZE = 500

# Screen coordinates: y grows downwards. Order matters for tie-breaking.
DIRS: Dict[str, Coord] = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

INV = {v: k for k, v in DIRS.items()}


class SnapshotError(ValueError):
    """Raised when an update payload cannot be turned into a snapshot."""


def manhattan(a: Coord, b: Coord) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def add(a: Coord, b: Coord) -> Coord:
    return (a[0] + b[0], a[1] + b[1])


def opposite(direction: Optional[str]) -> Optional[str]:
    if direction is None:
        return None
    dx, dy = DIRS[direction]
    return INV[(-dx, -dy)]


def direction_from_vector(vec: Any) -> Optional[str]:
    """Map ``{"x": 0, "y": -1}``, ``(0, -1)`` or ``"up"`` to a direction name."""
    if isinstance(vec, str):
        return vec if vec in DIRS else None
    if isinstance(vec, dict):
        try:
            vec = (int(vec["x"]), int(vec["y"]))
        except (KeyError, TypeError, ValueError):
            return None
    if isinstance(vec, (tuple, list)) and len(vec) == 2:
        return INV.get((vec[0], vec[1]))
    return None


def direction_payload(direction: str) -> Dict[str, int]:
    dx, dy = DIRS[direction]
    return {"x": dx, "y": dy}

# ---------------------------------
# Data models
# ---------------------------------
@dataclass(frozen=True)
class Player:
    id: str
    body: Tuple[Coord, ...]  # head first
    bot_id: Optional[str] = None
    alive: bool = True
    declared_length: Optional[int] = None
    declared_head: Optional[Coord] = None

    @property
    def head(self) -> Optional[Coord]:
        if self.body:
            return self.body[0]
        return self.declared_head

    @property
    def length(self) -> int:
        if self.declared_length is not None:
            return self.declared_length
        return len(self.body)

    @property
    def tail(self) -> Optional[Coord]:
        return self.body[-1] if self.body else self.head


@dataclass(frozen=True)
class Obstacle:
    pos: Coord
    solid: bool = True


@dataclass(frozen=True)
class WorldSnapshot:
    players: Tuple[Player, ...] = ()
    food: FrozenSet[Coord] = frozenset()
    grid_size: int = DEFAULT_GRID_SIZE
    obstacles: Tuple[Obstacle, ...] = field(default_factory=tuple)

    def find_player(self, bot_id: Optional[str] = None,
                    player_id: Optional[str] = None) -> Optional[Player]:
        """Locate our own snake; the stable bot id wins over the per-match id."""
        if bot_id is not None:
            for p in self.players:
                if p.bot_id == bot_id:
                    return p
        if player_id is not None:
            for p in self.players:
                if p.id == player_id:
                    return p
        return None

# ---------------------------------
# Parsing
# ---------------------------------

def _coord(raw: Any) -> Coord:
    if isinstance(raw, dict):
        return (int(raw["x"]), int(raw["y"]))
    x, y = raw
    return (int(x), int(y))


def parse_player(raw: Dict) -> Player:
    body = tuple(_coord(p) for p in raw.get("body") or [])
    head = raw.get("head")
    length = raw.get("length")
    return Player(
        id=str(raw["id"]),
        body=body,
        bot_id=raw.get("botId"),
        alive=bool(raw.get("alive", True)),
        declared_length=int(length) if length is not None else None,
        declared_head=_coord(head) if head is not None else None,
    )


def parse_snapshot(state: Dict, default_grid_size: int = DEFAULT_GRID_SIZE) -> WorldSnapshot:
    """Build a snapshot from the ``state`` object of an ``update`` message.

    ``gridSize`` is optional on the wire (the arena announces it in ``init``),
    so the caller passes the size it already knows.
    """
    if not isinstance(state, dict):
        raise SnapshotError(f"state must be an object, got {type(state).__name__}")
    try:
        players = tuple(parse_player(p) for p in state.get("players") or [])
        food = frozenset(_coord(f) for f in state.get("food") or [])
        obstacles = tuple(
            Obstacle(pos=_coord(o), solid=bool(o.get("solid", True)) if isinstance(o, dict) else True)
            for o in state.get("obstacles") or []
        )
        grid_size = int(state.get("gridSize") or default_grid_size)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SnapshotError(f"malformed state: {exc!r}") from exc

    if not 0 < grid_size <= MAX_GRID_SIZE:
        raise SnapshotError(f"grid size must be in 1..{MAX_GRID_SIZE}, got {grid_size}")
    return WorldSnapshot(players=players, food=food, grid_size=grid_size, obstacles=obstacles)
