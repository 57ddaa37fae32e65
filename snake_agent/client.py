"""
Websocket session against the arena server.

One receive task parses frames and parks the newest ``update`` in a one-slot
mailbox; one decision task wakes up, takes whatever is newest, decides and
sends. Updates that arrive while a decision runs simply replace each other.
"""
from __future__ import annotations
from typing import Any, Dict, Optional
import asyncio
import json
import logging
import random

import websockets
from websockets.exceptions import ConnectionClosed

from .config import AgentConfig
from .control import Control
from .models import SnapshotError, direction_payload, parse_snapshot
from .selector import Decision, EngineState, MoveSelector

logger = logging.getLogger(__name__)


class Agent:
    def __init__(self, config: AgentConfig, selector: Optional[MoveSelector] = None,
                 control: Optional[Control] = None):
        self.config = config
        self.grid_size = config.grid_size
        self.state = EngineState()
        self.selector = selector or MoveSelector(
            bot_id=config.bot_id,
            weights=config.weights(),
            stuck_threshold=config.stuck_threshold,
            rng=random.Random(config.seed),
        )
        self.control = control
        self.last_decision: Optional[Decision] = None
        self._pending: Optional[Dict[str, Any]] = None
        self._wake: Optional[asyncio.Event] = None

    # ---------------------------------
    # Protocol
    # ---------------------------------
    def join_message(self) -> Dict[str, Any]:
        return {
            "type": "join",
            "name": self.config.name,
            "botId": self.config.bot_id,
            "botType": "agent",
        }

    def on_init(self, msg: Dict[str, Any]) -> None:
        self.state.player_id = None if msg.get("id") is None else str(msg["id"])
        size = msg.get("gridSize")
        if isinstance(size, int) and size > 0:
            self.grid_size = size
        logger.info("registered as %s (grid %d)", self.state.player_id, self.grid_size)

    def on_update(self, msg: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Run one decision; returns the move message or None when nothing is sent."""
        try:
            snapshot = parse_snapshot(msg.get("state"), self.grid_size)
        except SnapshotError as e:
            logger.warning("dropping tick: %s", e)
            return None

        override = self.control.take_override() if self.control else None
        decision = self.selector.decide(snapshot, self.state, override)
        self.last_decision = decision
        if self.control:
            self.control.update_status(
                tick=self.state.ticks,
                direction=decision.direction,
                reason=decision.reason,
                stuck_counter=self.state.stuck_counter,
            )
        if not decision.moved:
            if decision.reason == "trapped":
                logger.info("no legal move at tick %d", self.state.ticks)
            return None
        return {"type": "move", "direction": direction_payload(decision.direction)}

    def receive(self, raw: Any) -> None:
        try:
            msg = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("unparseable frame dropped: %s", e)
            return
        if not isinstance(msg, dict):
            logger.warning("unexpected frame dropped: %r", msg)
            return

        kind = msg.get("type")
        if kind == "init":
            self.on_init(msg)
        elif kind == "update":
            if self._pending is not None:
                logger.debug("superseding stale update")
            self._pending = msg
            if self._wake is not None:
                self._wake.set()
        else:
            logger.debug("ignoring %s message", kind)

    # ---------------------------------
    # Session
    # ---------------------------------
    async def _receive_loop(self, ws) -> None:
        try:
            async for raw in ws:
                self.receive(raw)
        except ConnectionClosed as e:
            logger.info("connection closed: %s", e)

    async def _decide_loop(self, ws) -> None:
        while True:
            await self._wake.wait()
            self._wake.clear()
            msg, self._pending = self._pending, None
            if msg is None:
                continue
            out = self.on_update(msg)
            if out is None:
                continue
            try:
                await ws.send(json.dumps(out))
            except ConnectionClosed as e:
                logger.info("move not sent, connection closed: %s", e)
                return

    async def session(self, ws) -> None:
        self._pending = None
        self._wake = asyncio.Event()
        await ws.send(json.dumps(self.join_message()))
        logger.info("%s joined as %s", self.config.name, self.config.personality)

        receiver = asyncio.create_task(self._receive_loop(ws))
        decider = asyncio.create_task(self._decide_loop(ws))
        done, pending = await asyncio.wait({receiver, decider}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for task in done:
            task.result()

    async def run(self) -> None:
        async with websockets.connect(self.config.server_url) as ws:
            logger.info("connected to %s", self.config.server_url)
            await self.session(ws)
        logger.info("disconnected")
