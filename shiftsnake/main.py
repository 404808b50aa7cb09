"""FastAPI application — state routes, WebSocket endpoint, game loop."""

import asyncio
import json
import logging
import os

from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from .constants import CELL_SIZE, GRID_SIZE, ITEM_COLORS
from .models import ItemKind
from .session import ConnectionManager, GameSession, build_state_msg, snapshot

logger = logging.getLogger(__name__)

IDLE_POLL_S = 0.1


def _env_seed():
    raw = os.environ.get("SHIFTSNAKE_SEED")
    return int(raw) if raw else None


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(game_loop())
    yield
    task.cancel()


app = FastAPI(lifespan=lifespan)
session = GameSession(GRID_SIZE, seed=_env_seed())
manager = ConnectionManager()


@app.get("/config")
async def get_config():
    return {
        "grid_size": session.grid_size,
        "cell_size": CELL_SIZE,
        "item_colors": {kind.value: ITEM_COLORS[kind.name] for kind in ItemKind},
    }


@app.get("/state")
async def get_state():
    return snapshot(session)


@app.get("/records")
async def get_records():
    return session.records.to_dict()


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await manager.connect(ws)
    await ws.send_text(build_state_msg(session))
    try:
        while True:
            raw = await ws.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug("dropping malformed message %r", raw[:80])
                continue
            if not isinstance(msg, dict):
                continue

            if msg.get("type") == "key":
                if session.handle_key(str(msg.get("key", ""))):
                    await manager.broadcast(build_state_msg(session))
            elif msg.get("type") == "restart":
                seed = msg.get("seed")
                if not isinstance(seed, int) or isinstance(seed, bool):
                    seed = None
                session.restart(seed)
                await manager.broadcast(build_state_msg(session))
            else:
                logger.debug("ignoring message type %r", msg.get("type"))
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)


async def game_loop():
    while True:
        if not session.running or not manager.connections:
            await asyncio.sleep(IDLE_POLL_S)
            continue

        session.tick()
        await manager.broadcast(build_state_msg(session))

        await asyncio.sleep(session.state.tick_ms / 1000)


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    host = os.environ.get("SHIFTSNAKE_HOST", "127.0.0.1")
    port = int(os.environ.get("SHIFTSNAKE_PORT", "8765"))
    logger.info("Shift Snake starting on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
