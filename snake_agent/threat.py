"""
Opponent modelling: prey/threat split and one-step head extrapolation.

Prey means strictly shorter than us. The arena is assumed to let the longer
snake survive a collision with a shorter one; that rule is not published by
the server, so the classification only ever feeds scoring, never legality.
"""
from __future__ import annotations
from typing import Dict, List, MutableMapping, Optional
from dataclasses import dataclass

from .models import Coord, Player, WorldSnapshot, add


@dataclass(frozen=True)
class OpponentInfo:
    id: str
    head: Coord
    length: int
    predicted_next: Optional[Coord]
    prey: bool

    @property
    def threat(self) -> bool:
        return not self.prey


def predict_next(head: Coord, previous: Optional[Coord], grid_size: int) -> Optional[Coord]:
    """Assume the opponent keeps its last step; None without a usable history."""
    if previous is None:
        return None
    dx, dy = head[0] - previous[0], head[1] - previous[1]
    if dx == 0 and dy == 0:
        return None
    px, py = add(head, (dx, dy))
    if 0 <= px < grid_size and 0 <= py < grid_size:
        return (px, py)
    return None


def _opponents(snapshot: WorldSnapshot, me: Player) -> List[Player]:
    return [p for p in snapshot.players
            if p.id != me.id and p.alive and p.head is not None]


def classify(snapshot: WorldSnapshot, me: Player,
             history: MutableMapping[str, Coord]) -> List[OpponentInfo]:
    opponents = []
    for p in _opponents(snapshot, me):
        opponents.append(OpponentInfo(
            id=p.id,
            head=p.head,
            length=p.length,
            predicted_next=predict_next(p.head, history.get(p.id), snapshot.grid_size),
            prey=p.length < me.length,
        ))
    return opponents


def remember(snapshot: WorldSnapshot, me: Player,
             history: MutableMapping[str, Coord]) -> None:
    """Store this tick's heads for next tick's prediction.

    Opponents missing from the snapshot are forgotten so that a respawn is not
    mistaken for a long jump.
    """
    current: Dict[str, Coord] = {p.id: p.head for p in _opponents(snapshot, me)}
    for stale in [k for k in history if k not in current]:
        del history[stale]
    history.update(current)
