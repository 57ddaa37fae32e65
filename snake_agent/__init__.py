"""
Snake arena agent
-----------------
Per-tick move engine for a multiplayer grid snake arena:
- Grid model: bodies/obstacles blocked, cells next to dangerous heads risky
- Space safety: flood-fill count from every candidate cell
- Opponent model: prey/threat by length, one-step head extrapolation
- Scoring: one weighted formula, tuned per personality
- Fallbacks: desperation reverse scan, random pick when stuck
"""
from .grid import CellState, Grid, build_grid
from .models import DIRS, Player, SnapshotError, WorldSnapshot, parse_snapshot
from .reachability import reachable_count
from .scoring import PERSONALITIES, ScoringContext, Weights, score_cell
from .selector import Decision, EngineState, MoveSelector

__version__ = "0.1.0"

__all__ = [
    "CellState",
    "DIRS",
    "Decision",
    "EngineState",
    "Grid",
    "MoveSelector",
    "PERSONALITIES",
    "Player",
    "ScoringContext",
    "SnapshotError",
    "Weights",
    "WorldSnapshot",
    "build_grid",
    "parse_snapshot",
    "reachable_count",
    "score_cell",
]
