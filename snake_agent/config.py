from __future__ import annotations
from typing import Dict, List, Optional
from dataclasses import dataclass, replace
from pathlib import Path
import argparse
import json
import os

from .models import DEFAULT_GRID_SIZE
from .scoring import PERSONALITIES, Weights, get_weights
from .selector import STUCK_THRESHOLD


class ConfigError(ValueError):
    pass


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass
class AgentConfig:
    name: str = "SnakeAgent"
    bot_id: Optional[str] = None
    server_url: str = "ws://localhost:3000"
    personality: str = "balanced"
    grid_size: int = DEFAULT_GRID_SIZE
    stuck_threshold: int = STUCK_THRESHOLD
    seed: Optional[int] = None
    control_port: Optional[int] = None
    log_level: str = "INFO"
    weights_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "AgentConfig":
        base = cls()
        return cls(
            name=os.environ.get("SNAKE_NAME", base.name),
            bot_id=os.environ.get("SNAKE_BOT_ID") or None,
            server_url=os.environ.get("SNAKE_SERVER", base.server_url),
            personality=os.environ.get("SNAKE_PERSONALITY", base.personality),
            seed=_env_int("SNAKE_SEED"),
            control_port=_env_int("SNAKE_CONTROL_PORT"),
            log_level=os.environ.get("SNAKE_LOG_LEVEL", base.log_level),
            weights_file=os.environ.get("SNAKE_WEIGHTS") or None,
        )

    def weights(self) -> Weights:
        try:
            w = get_weights(self.personality)
        except KeyError as e:
            raise ConfigError(e.args[0])
        if self.weights_file:
            w = apply_overrides(w, load_weight_overrides(self.weights_file))
        return w


def load_weight_overrides(path: str) -> Dict:
    config_path = Path(path)
    try:
        with open(config_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}")
    except FileNotFoundError:
        raise ConfigError(f"File not found: {config_path}")
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object of weight overrides")
    return data


def _check_weight_value(key: str, value) -> None:
    if key == "food_distance":
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a string, got {value!r}")
        return
    if value is None and key == "food_when_small":
        return
    # bool is an int subclass but never a meaningful weight
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")


def apply_overrides(weights: Weights, overrides: Dict) -> Weights:
    unknown = sorted(set(overrides) - set(Weights.field_names()))
    if unknown:
        raise ConfigError(f"unknown weight keys: {', '.join(unknown)}")
    for key, value in overrides.items():
        _check_weight_value(key, value)
    try:
        return replace(weights, **overrides)
    except ValueError as e:
        raise ConfigError(str(e))


def build_parser(defaults: AgentConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="snake-agent", description="Snake arena agent")
    parser.add_argument("name", nargs="?", default=defaults.name, help="Display name sent on join")
    parser.add_argument("server_url", nargs="?", default=defaults.server_url, help="Arena websocket URL")
    parser.add_argument("--bot-id", default=defaults.bot_id, help="Stable bot id used to find our snake")
    parser.add_argument("--personality", default=defaults.personality, choices=sorted(PERSONALITIES))
    parser.add_argument("--weights", dest="weights_file", default=defaults.weights_file,
                        help="JSON file with weight overrides")
    parser.add_argument("--grid-size", type=int, default=defaults.grid_size,
                        help="Grid size until the server announces one")
    parser.add_argument("--stuck-threshold", type=int, default=defaults.stuck_threshold)
    parser.add_argument("--seed", type=int, default=defaults.seed, help="Seed for the stuck fallback")
    parser.add_argument("--control-port", type=int, default=defaults.control_port,
                        help="Serve the HTTP control surface on this port")
    parser.add_argument("--log-level", default=defaults.log_level,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def parse_args(argv: Optional[List[str]] = None) -> AgentConfig:
    defaults = AgentConfig.from_env()
    args = build_parser(defaults).parse_args(argv)
    config = AgentConfig(**vars(args))
    config.weights()  # fail early on a bad weights file
    return config
