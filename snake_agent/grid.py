from __future__ import annotations
from typing import List, Optional, Tuple
from enum import Enum
import functools

from .models import Coord, DIRS, WorldSnapshot, add


class CellState(Enum):
    FREE = 0
    BLOCKED = 1
    RISK = 2  # passable, but an equal-or-longer head can reach it next tick


@functools.lru_cache(maxsize=4096)
def neighbor_list(size: int, c: Coord) -> Tuple[Coord, ...]:
    res = []
    for dx, dy in DIRS.values():
        n = (c[0] + dx, c[1] + dy)
        if 0 <= n[0] < size and 0 <= n[1] < size:
            res.append(n)
    return tuple(res)


class Grid:
    """Square occupancy grid rebuilt from scratch every tick."""

    def __init__(self, size: int):
        self.size = size
        self.cells: List[List[CellState]] = [[CellState.FREE] * size for _ in range(size)]

    def in_bounds(self, c: Coord) -> bool:
        x, y = c
        return 0 <= x < self.size and 0 <= y < self.size

    def state(self, c: Coord) -> CellState:
        if not self.in_bounds(c):
            return CellState.BLOCKED
        return self.cells[c[1]][c[0]]

    def is_blocked(self, c: Coord) -> bool:
        return self.state(c) is CellState.BLOCKED

    def is_passable(self, c: Coord) -> bool:
        return not self.is_blocked(c)

    def mark(self, c: Coord, state: CellState) -> None:
        self.cells[c[1]][c[0]] = state

    def neighbors(self, c: Coord) -> Tuple[Coord, ...]:
        return neighbor_list(self.size, c)

    def count(self, state: CellState) -> int:
        return sum(row.count(state) for row in self.cells)

    def render(self) -> str:
        glyphs = {CellState.FREE: ".", CellState.BLOCKED: "#", CellState.RISK: "!"}
        return "\n".join("".join(glyphs[c] for c in row) for row in self.cells)


def build_grid(snapshot: WorldSnapshot, own_id: Optional[str] = None,
               mark_risk: bool = True) -> Grid:
    """Mark bodies and solid obstacles BLOCKED, cells near dangerous heads RISK.

    ``own_id`` is the player id of our snake inside this snapshot; without it no
    risk zones are drawn since there is nobody to compare lengths against.
    """
    grid = Grid(snapshot.grid_size)

    # Corpses stay on the board for a while and still kill on contact.
    for p in snapshot.players:
        for seg in p.body:
            if grid.in_bounds(seg):
                grid.mark(seg, CellState.BLOCKED)
        head = p.head
        if head is not None and grid.in_bounds(head):
            grid.mark(head, CellState.BLOCKED)

    blinking = []
    for obs in snapshot.obstacles:
        if not grid.in_bounds(obs.pos):
            continue
        if obs.solid:
            grid.mark(obs.pos, CellState.BLOCKED)
        else:
            blinking.append(obs.pos)
    # Blinking obstacles turn solid within a few ticks.
    for c in blinking:
        if grid.state(c) is CellState.FREE:
            grid.mark(c, CellState.RISK)

    if not mark_risk or own_id is None:
        return grid

    me = next((p for p in snapshot.players if p.id == own_id), None)
    if me is None:
        return grid
    my_len = me.length

    for p in snapshot.players:
        if p.id == own_id or not p.alive or p.head is None:
            continue
        if p.length < my_len:
            continue
        for d in DIRS.values():
            n = add(p.head, d)
            if grid.in_bounds(n) and grid.state(n) is CellState.FREE:
                grid.mark(n, CellState.RISK)
    return grid
