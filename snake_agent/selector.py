"""
Move selection: one call per snapshot, returning at most one direction.

``EngineState`` is the only thing carried between ticks. It belongs to a
single agent session and is passed into every ``decide`` call.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum
import logging
import random

from .grid import build_grid
from .models import Coord, DIRS, WorldSnapshot, add, opposite
from .scoring import BALANCED, ScoringContext, Weights, score_cell
from . import threat

logger = logging.getLogger(__name__)

STUCK_THRESHOLD = 3


class Phase(Enum):
    AWAITING_SNAPSHOT = "awaiting_snapshot"
    EVALUATING = "evaluating"
    COMMITTED = "committed"


@dataclass
class EngineState:
    last_direction: Optional[str] = None
    last_head: Optional[Coord] = None
    stuck_counter: int = 0
    opponent_heads: Dict[str, Coord] = field(default_factory=dict)
    player_id: Optional[str] = None  # assigned by the server in ``init``
    ticks: int = 0


@dataclass(frozen=True)
class Decision:
    direction: Optional[str]
    reason: str
    scores: Dict[str, float] = field(default_factory=dict)

    @property
    def moved(self) -> bool:
        return self.direction is not None


class MoveSelector:
    def __init__(self, bot_id: Optional[str] = None, weights: Weights = BALANCED,
                 stuck_threshold: int = STUCK_THRESHOLD,
                 rng: Optional[random.Random] = None, mark_risk: bool = True):
        self.bot_id = bot_id
        self.weights = weights
        self.stuck_threshold = stuck_threshold
        self.rng = rng or random.Random()
        self.mark_risk = mark_risk
        self.phase = Phase.AWAITING_SNAPSHOT

    def decide(self, snapshot: WorldSnapshot, state: EngineState,
               override: Optional[str] = None) -> Decision:
        self.phase = Phase.EVALUATING
        state.ticks += 1

        me = snapshot.find_player(self.bot_id, state.player_id)
        if me is None or not me.alive or me.head is None:
            # a respawned snake starts without a heading
            state.last_direction = None
            state.last_head = None
            state.stuck_counter = 0
            self.phase = Phase.AWAITING_SNAPSHOT
            return Decision(None, "absent")

        head = me.head
        if state.last_head is not None and state.last_head == head:
            state.stuck_counter += 1
        else:
            state.stuck_counter = 0
        state.last_head = head

        grid = build_grid(snapshot, own_id=me.id, mark_risk=self.mark_risk)
        opponents = threat.classify(snapshot, me, state.opponent_heads)

        reverse = opposite(state.last_direction)
        dirs = [d for d in DIRS if d != reverse] or list(DIRS)
        candidates: List[Tuple[str, Coord]] = []
        for d in dirs:
            n = add(head, DIRS[d])
            if grid.is_passable(n):
                candidates.append((d, n))

        if override is not None and override not in dict(candidates):
            logger.warning("ignoring illegal override %r at %s", override, head)
            override = None

        scores: Dict[str, float] = {}
        if not candidates:
            direction = self._desperate(grid, head)
            reason = "desperate" if direction else "trapped"
            if direction is None:
                logger.debug("boxed in at %s:\n%s", head, grid.render())
        elif override is not None:
            direction, reason = override, "override"
        elif state.stuck_counter > self.stuck_threshold:
            direction, reason = self.rng.choice(candidates)[0], "stuck"
        else:
            ctx = ScoringContext(
                own_length=me.length,
                grid_size=snapshot.grid_size,
                food=snapshot.food,
                opponents=opponents,
                last_direction=state.last_direction,
                own_tail=me.tail,
            )
            best, best_score = None, None
            for d, n in candidates:
                s = score_cell(grid, n, d, ctx, self.weights)
                scores[d] = s
                if best_score is None or s > best_score:
                    best, best_score = d, s
            direction, reason = best, "scored"

        threat.remember(snapshot, me, state.opponent_heads)
        if direction is not None:
            state.last_direction = direction
        self.phase = Phase.COMMITTED
        logger.debug("tick %d head=%s -> %s (%s) %s", state.ticks, head, direction, reason, scores)
        return Decision(direction, reason, scores)

    def _desperate(self, grid, head: Coord) -> Optional[str]:
        for d, vec in DIRS.items():
            if grid.is_passable(add(head, vec)):
                return d
        return None
