from __future__ import annotations
from typing import Dict, Optional
from collections import deque
import heapq

from .grid import Grid
from .models import Coord, manhattan


def reachable_count(grid: Grid, start: Coord) -> int:
    """Number of non-blocked cells 4-connected to ``start``, ``start`` included.

    RISK cells are walkable here; they only cost points in scoring.
    """
    if not grid.in_bounds(start) or grid.is_blocked(start):
        return 0
    q = deque([start])
    seen = {start}
    while q:
        c = q.popleft()
        for n in grid.neighbors(c):
            if n in seen or grid.is_blocked(n):
                continue
            seen.add(n)
            q.append(n)
    return len(seen)


def path_distance(grid: Grid, start: Coord, goal: Coord) -> Optional[int]:
    """A* step count from ``start`` to ``goal`` through passable cells.

    The start cell itself may be blocked (it is usually our own head); the goal
    must be passable. Returns None when the goal cannot be reached.
    """
    if not grid.in_bounds(start) or not grid.in_bounds(goal) or grid.is_blocked(goal):
        return None
    if start == goal:
        return 0

    open_set = [(manhattan(start, goal), 0, start)]
    g: Dict[Coord, int] = {start: 0}

    while open_set:
        _, cost, cur = heapq.heappop(open_set)
        if cur == goal:
            return cost
        if cost > g.get(cur, cost):
            continue
        for n in grid.neighbors(cur):
            if grid.is_blocked(n):
                continue
            tg = cost + 1
            if tg < g.get(n, tg + 1):
                g[n] = tg
                heapq.heappush(open_set, (tg + manhattan(n, goal), tg, n))
    return None
