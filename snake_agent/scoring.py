"""
Per-candidate move scoring.

One additive formula, tuned by a ``Weights`` record. Penalties are stored as
negative numbers so every term is simply ``weight * feature``. Only the
ordering of candidates matters, so nothing is normalised.
"""
from __future__ import annotations
from typing import Dict, FrozenSet, List, Optional, Sequence
from dataclasses import dataclass, field, fields, replace

from .grid import CellState, Grid
from .models import Coord, manhattan
from .reachability import path_distance, reachable_count
from .threat import OpponentInfo

FOOD_DISTANCE_MODES = ("manhattan", "path")

# ---------------------------------
# Config
# ---------------------------------
@dataclass(frozen=True)
class Weights:
    # space
    trap: float = -10_000.0       # reachable < own length
    tight_ratio: float = 2.0
    tight: float = -2_000.0       # reachable < tight_ratio * length
    cramped_ratio: float = 3.0
    cramped: float = -300.0       # reachable < cramped_ratio * length
    space: float = 3.0
    # food
    food: float = 2.0
    food_when_small: Optional[float] = None
    small_length: int = 10
    food_distance: str = "manhattan"
    tail_chase: float = 0.0
    # opponents
    prey_radius: int = 1
    prey_head: float = 500.0
    intercept_radius: int = 2
    intercept: float = 200.0
    threat_radius: int = 2
    threat_head: float = -3_000.0
    dodge_radius: int = 1
    dodge: float = -1_000.0
    # position
    edge_margin: int = 1
    edge: float = -100.0
    corner: float = 0.0
    centre: float = 0.5
    momentum: float = 10.0
    risk: float = -2_000.0

    def __post_init__(self):
        if self.food_distance not in FOOD_DISTANCE_MODES:
            raise ValueError(f"food_distance must be one of {FOOD_DISTANCE_MODES}, got {self.food_distance!r}")

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]


BALANCED = Weights()

PERSONALITIES: Dict[str, Weights] = {
    "balanced": BALANCED,
    # Hunts shorter snakes by cutting into where they are about to be.
    "assassin": replace(
        BALANCED,
        trap=-20_000.0, tight_ratio=2.0, tight=-3_000.0, cramped_ratio=0.0, cramped=0.0,
        food=3.0, prey_radius=6, prey_head=300.0, intercept_radius=5, intercept=600.0,
        threat_radius=3, threat_head=-2_500.0, dodge_radius=2, dodge=-2_000.0,
        edge_margin=2, edge=-150.0, centre=0.0, momentum=15.0, risk=-1_000.0,
    ),
    # Survival first: real path distance to food, tail chasing when food is cut off.
    "guardian": replace(
        BALANCED,
        tight_ratio=1.5, tight=-3_000.0, cramped_ratio=2.5, cramped=-500.0, space=2.0,
        food=5.0, food_when_small=10.0, food_distance="path", tail_chase=2.0,
        prey_radius=3, prey_head=120.0, intercept_radius=0, intercept=0.0,
        threat_radius=0, threat_head=0.0, dodge_radius=0, dodge=0.0,
        edge=-50.0, corner=-150.0, momentum=0.0, risk=-20_000.0,
    ),
    "aggressor": replace(
        BALANCED,
        tight_ratio=1.5, tight=-3_000.0, cramped_ratio=3.0, cramped=-500.0, space=1.5,
        food=4.0, food_when_small=8.0, food_distance="path", tail_chase=2.0,
        prey_radius=3, prey_head=150.0, threat_radius=1, threat_head=-1_000.0,
        edge=-30.0, corner=-100.0, centre=0.3, momentum=5.0,
    ),
    # Greedy eater; still refuses obvious traps.
    "forager": replace(
        BALANCED,
        space=1.0, tight=-1_000.0, cramped=0.0, food=10.0,
        prey_radius=0, prey_head=0.0, intercept_radius=0, intercept=0.0,
        edge=0.0, centre=0.0, momentum=0.0, risk=-500.0,
    ),
}


def get_weights(personality: str) -> Weights:
    try:
        return PERSONALITIES[personality]
    except KeyError:
        raise KeyError(f"unknown personality {personality!r}; choose from {sorted(PERSONALITIES)}") from None

# ---------------------------------
# Context
# ---------------------------------
@dataclass(frozen=True)
class ScoringContext:
    own_length: int
    grid_size: int
    food: FrozenSet[Coord] = frozenset()
    opponents: Sequence[OpponentInfo] = field(default_factory=tuple)
    last_direction: Optional[str] = None
    own_tail: Optional[Coord] = None

# ---------------------------------
# Terms
# ---------------------------------

def space_term(space: int, length: int, w: Weights) -> float:
    s = w.space * space
    if space < length:
        s += w.trap
    elif space < length * w.tight_ratio:
        s += w.tight
    elif space < length * w.cramped_ratio:
        s += w.cramped
    return s


def nearest_food_distance(grid: Grid, cell: Coord, ctx: ScoringContext, w: Weights) -> Optional[int]:
    if not ctx.food:
        return None
    if w.food_distance == "path":
        best = None
        for f in ctx.food:
            d = path_distance(grid, cell, f)
            if d is not None and (best is None or d < best):
                best = d
        return best
    return min(manhattan(cell, f) for f in ctx.food)


def food_term(dist: Optional[int], ctx: ScoringContext, w: Weights) -> float:
    if dist is None:
        return 0.0
    weight = w.food
    if w.food_when_small is not None and ctx.own_length < w.small_length:
        weight = w.food_when_small
    return (2 * ctx.grid_size - dist) * weight


def opponent_term(cell: Coord, ctx: ScoringContext, w: Weights) -> float:
    s = 0.0
    for opp in ctx.opponents:
        d = manhattan(cell, opp.head)
        if opp.prey:
            if d <= w.prey_radius:
                s += (w.prey_radius + 1 - d) * w.prey_head
            if opp.predicted_next is not None:
                pd = manhattan(cell, opp.predicted_next)
                if pd <= w.intercept_radius:
                    s += (w.intercept_radius + 1 - pd) * w.intercept
        else:
            if d <= w.threat_radius:
                s += (w.threat_radius + 1 - d) * w.threat_head
            if opp.predicted_next is not None:
                pd = manhattan(cell, opp.predicted_next)
                if pd <= w.dodge_radius:
                    s += (w.dodge_radius + 1 - pd) * w.dodge
    return s


def position_term(cell: Coord, size: int, w: Weights) -> float:
    x, y = cell
    m = w.edge_margin
    near_x = x < m or x >= size - m
    near_y = y < m or y >= size - m
    s = 0.0
    if near_x or near_y:
        s += w.edge
    if (x == 0 or x == size - 1) and (y == 0 or y == size - 1):
        s += w.corner
    s -= w.centre * (abs(x - size / 2) + abs(y - size / 2))
    return s


def score_terms(grid: Grid, cell: Coord, direction: str,
                ctx: ScoringContext, w: Weights) -> Dict[str, float]:
    """Every term for one candidate, keyed by name; ``score_cell`` sums them."""
    space = reachable_count(grid, cell)
    food_dist = nearest_food_distance(grid, cell, ctx, w)
    terms = {
        "space": space_term(space, ctx.own_length, w),
        "food": food_term(food_dist, ctx, w),
        "tail": 0.0,
        "opponents": opponent_term(cell, ctx, w),
        "position": position_term(cell, grid.size, w),
        "momentum": w.momentum if direction == ctx.last_direction else 0.0,
        "risk": w.risk if grid.state(cell) is CellState.RISK else 0.0,
    }
    if food_dist is None and w.tail_chase and ctx.own_tail is not None:
        terms["tail"] = (ctx.grid_size - manhattan(cell, ctx.own_tail)) * w.tail_chase
    return terms


def score_cell(grid: Grid, cell: Coord, direction: str,
               ctx: ScoringContext, w: Weights = BALANCED) -> float:
    return sum(score_terms(grid, cell, direction, ctx, w).values())
