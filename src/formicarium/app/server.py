from __future__ import annotations

import asyncio
import json
import logging
import math
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Set

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..config import AppConfig
from ..logging_config import configure_logging
from ..sim.core.simulation import Simulation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueuedSnapshot:
    tick: int
    payload: str


class SimulationController:
    """Bridges the simulation's tick listeners to connected WebSocket clients.

    One listener serializes the snapshot once per tick and pushes it onto
    each client's bounded queue. A client that falls behind loses its oldest
    queued snapshot rather than holding up the tick.
    """

    def __init__(self, config: AppConfig):
        self.config = config
        self.simulation = Simulation(config.simulation)
        self.queue_size = max(1, config.server.client_queue_size)
        self.clients: Set[asyncio.Queue[QueuedSnapshot]] = set()
        self.simulation.add_tick_listener(self._on_tick)

    async def start(self) -> None:
        self.simulation.start()

    async def stop(self) -> None:
        self.simulation.stop()

    async def reset(self) -> None:
        self.simulation.reset()
        self._publish(self.serialize_snapshot())

    def serialize_snapshot(self) -> QueuedSnapshot:
        tick = self.simulation.tick_count
        payload = {
            "type": "snapshot",
            "tick": tick,
            "payload": self.simulation.get_world_snapshot(),
        }
        return QueuedSnapshot(tick=tick, payload=json.dumps(payload))

    def register(self) -> asyncio.Queue[QueuedSnapshot]:
        queue: asyncio.Queue[QueuedSnapshot] = asyncio.Queue(maxsize=self.queue_size)
        queue.put_nowait(self.serialize_snapshot())
        self.clients.add(queue)
        return queue

    def unregister(self, queue: asyncio.Queue[QueuedSnapshot]) -> None:
        self.clients.discard(queue)

    def _on_tick(self) -> None:
        if self.clients:
            self._publish(self.serialize_snapshot())

    def _publish(self, queued: QueuedSnapshot) -> None:
        for queue in self.clients:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(queued)

    def handle_command(self, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        kind = payload.get("type")
        if kind == "spawn":
            position = _parse_position(payload)
            if position is None:
                return {"type": "error", "error": "spawn requires finite numeric x and y"}
            return {"type": "spawned", "id": self.simulation.spawn_ant(position)}
        if kind == "kill":
            ant_id = str(payload.get("id", ""))
            return {"type": "killed", "id": ant_id, "killed": self.simulation.kill_ant(ant_id)}
        return None


def _parse_position(payload: Dict[str, Any]) -> Optional[tuple[float, float]]:
    x, y = payload.get("x"), payload.get("y")
    if isinstance(x, bool) or isinstance(y, bool):
        return None
    if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
        return None
    # NaN and infinities would make every later snapshot unserializable
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return (float(x), float(y))


async def _pump(websocket: WebSocket, queue: asyncio.Queue[QueuedSnapshot]) -> None:
    while True:
        item = await queue.get()
        await websocket.send_text(item.payload)


def create_app(config: AppConfig | None = None, autostart: bool = True) -> FastAPI:
    config = config or AppConfig()
    controller = SimulationController(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(config.server.log_level)
        if autostart:
            await controller.start()
        try:
            yield
        finally:
            await controller.stop()

    app = FastAPI(title="Formicarium Simulation", lifespan=lifespan)
    app.state.controller = controller

    @app.get("/api/status")
    async def status() -> JSONResponse:
        simulation = controller.simulation
        return JSONResponse(
            {
                "running": simulation.running,
                "tick": simulation.tick_count,
                "population": len(simulation.ants),
                "food_sources": len(simulation.world.food_sources),
            }
        )

    @app.get("/api/world")
    async def world() -> JSONResponse:
        return JSONResponse(controller.simulation.get_world_snapshot())

    @app.post("/api/control/start")
    async def start_simulation() -> JSONResponse:
        await controller.start()
        return JSONResponse({"running": True})

    @app.post("/api/control/stop")
    async def stop_simulation() -> JSONResponse:
        await controller.stop()
        return JSONResponse({"running": False})

    @app.post("/api/control/reset")
    async def reset_simulation() -> JSONResponse:
        await controller.reset()
        return JSONResponse({"running": controller.simulation.running, "tick": controller.simulation.tick_count})

    @app.post("/api/ants")
    async def spawn_ant(payload: dict) -> JSONResponse:
        position = _parse_position(payload)
        if position is None:
            return JSONResponse({"error": "x and y must be finite numbers"}, status_code=422)
        ant_id = controller.simulation.spawn_ant(position)
        return JSONResponse({"id": ant_id}, status_code=201)

    @app.delete("/api/ants/{ant_id}")
    async def kill_ant(ant_id: str) -> JSONResponse:
        return JSONResponse({"killed": controller.simulation.kill_ant(ant_id)})

    @app.websocket("/ws/world")
    async def world_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        queue = controller.register()
        sender = asyncio.create_task(_pump(websocket, queue))
        try:
            while True:
                message = await websocket.receive_text()
                try:
                    payload = json.loads(message)
                except json.JSONDecodeError:
                    continue
                if not isinstance(payload, dict):
                    continue
                reply = controller.handle_command(payload)
                if reply is not None:
                    await websocket.send_text(json.dumps(reply))
        except WebSocketDisconnect:
            logger.debug("WebSocket client disconnected")
        finally:
            controller.unregister(queue)
            sender.cancel()
            await asyncio.gather(sender, return_exceptions=True)

    return app


def _load_app_config() -> AppConfig:
    path = os.getenv("FORMICARIUM_CONFIG")
    return AppConfig.from_yaml(Path(path)) if path else AppConfig()


app = create_app(_load_app_config())


def main() -> None:
    config = app.state.controller.config
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
