"""
Optional HTTP control surface.

``GET /`` reports who we are and what the engine last did; ``POST /command``
queues a direction that replaces the engine's choice for one tick (if legal
at that tick). The server runs in a daemon thread next to the asyncio loop,
so the only shared thing is the lock-guarded ``Control`` object.
"""
from __future__ import annotations
from typing import Any, Dict, Optional
from threading import Lock, Thread
import logging

from flask import Flask, request, jsonify

from .models import direction_from_vector

logger = logging.getLogger(__name__)


class Control:
    def __init__(self, name: str = "", personality: str = ""):
        self.name = name
        self.personality = personality
        self._lock = Lock()
        self._override: Optional[str] = None
        self._status: Dict[str, Any] = {}

    def set_override(self, direction: str) -> None:
        with self._lock:
            self._override = direction

    def take_override(self) -> Optional[str]:
        with self._lock:
            d, self._override = self._override, None
            return d

    def update_status(self, **status: Any) -> None:
        with self._lock:
            self._status.update(status)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._status, pending_override=self._override)


def create_app(control: Control) -> Flask:
    app = Flask(__name__)

    @app.get("/")
    def index():
        return jsonify({
            "name": control.name,
            "personality": control.personality,
            "status": control.snapshot(),
        })

    @app.post("/command")
    def command():
        data = request.get_json(silent=True) or {}
        direction = direction_from_vector(data.get("direction"))
        if direction is None:
            return jsonify({"error": "direction must be up/down/left/right or a unit vector"}), 400
        control.set_override(direction)
        logger.info("override queued: %s", direction)
        return jsonify({"queued": direction})

    return app


def serve_in_background(control: Control, port: int, host: str = "127.0.0.1") -> Thread:
    app = create_app(control)
    thread = Thread(
        target=app.run,
        kwargs={"host": host, "port": port, "debug": False, "use_reloader": False},
        name="snake-agent-control",
        daemon=True,
    )
    thread.start()
    logger.info("control surface on http://%s:%d", host, port)
    return thread
