"""
Run one agent:

  python -m snake_agent GuardianFang ws://localhost:3000 --bot-id bot_abc --personality guardian
"""
from __future__ import annotations
from typing import List, Optional
import asyncio
import logging
import sys

from .client import Agent
from .config import ConfigError, parse_args
from .control import Control, serve_in_background

logger = logging.getLogger("snake_agent")


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = parse_args(argv)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    control = None
    if config.control_port:
        control = Control(name=config.name, personality=config.personality)
        serve_in_background(control, config.control_port)

    agent = Agent(config, control=control)
    try:
        asyncio.run(agent.run())
    except KeyboardInterrupt:
        logger.info("stopped by user")
    except OSError as e:
        logger.error("cannot reach %s: %s", config.server_url, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
