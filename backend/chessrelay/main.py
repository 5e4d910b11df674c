"""
ChessRelay API и WebSocket.
"""
import logging

import uvicorn
from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_config
from .pairing import get_session_counts
from .ws_handlers import ws_game_loop

config = get_config()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="ChessRelay API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok", "sessions": get_session_counts()}


@app.get("/ws")
def ws_without_upgrade():
    # Обычный HTTP-запрос на адрес сокета — рукопожатие не состоялось
    logger.warning("WS: plain HTTP request to /ws, upgrade required")
    return JSONResponse({"detail": "WebSocket upgrade required"}, status_code=400)


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    logger.info("WS: connection attempt from %s", ws.client)
    await ws_game_loop(ws)


def run():
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
