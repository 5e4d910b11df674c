"""
Pytest will auto-discover / import this file called 'conftest.py'.
Shared fixtures: a fresh session registry per test, env-driven config and a mock websocket.
"""
import asyncio
from typing import Any, Callable, Iterator

import pytest
from starlette.websockets import WebSocketState

from chessrelay import pairing
from chessrelay.config import get_config
from chessrelay.store import Store
from chessrelay.ws_manager import manager


class RecordingEngine:
    """Stand-in engine: empty board, remembers every selection call."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, int]] = []

    def render_board(self) -> list[int]:
        return [0] * 64

    def select_square(self, row: int, col: int) -> None:
        self.calls.append((row, col))


class MockWebSocket:
    """Mock of the starlette WebSocket surface used by the gateway. Frames are ASGI messages."""

    def __init__(self, frames: list[dict[str, Any]] | None = None, hold: float = 0.0) -> None:
        self.client = ("testclient", 50000)
        self.client_state = WebSocketState.CONNECTING
        self.application_state = WebSocketState.CONNECTING
        self.sent: list[str] = []
        self.closed_with: int | None = None
        self._incoming = list(frames or [])
        self._hold = hold

    async def accept(self) -> None:
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    async def receive(self) -> dict[str, Any]:
        await asyncio.sleep(0)
        if not self._incoming:
            if self._hold:
                await asyncio.sleep(self._hold)
            self.client_state = WebSocketState.DISCONNECTED
            return {"type": "websocket.disconnect", "code": 1000}
        message = self._incoming.pop(0)
        if isinstance(message, Exception):
            raise message
        if message["type"] == "websocket.disconnect":
            self.client_state = WebSocketState.DISCONNECTED
        return message

    async def send_text(self, data: str) -> None:
        if self.application_state != WebSocketState.CONNECTED:
            raise RuntimeError("Cannot send once the socket is closed")
        self.sent.append(data)

    async def close(self, code: int = 1000) -> None:
        self.application_state = WebSocketState.DISCONNECTED
        self.closed_with = code


def text_frame(text: str) -> dict[str, Any]:
    return {"type": "websocket.receive", "text": text}


def bytes_frame(data: bytes) -> dict[str, Any]:
    return {"type": "websocket.receive", "bytes": data}


@pytest.fixture(autouse=True)
def fresh_registry(monkeypatch: pytest.MonkeyPatch) -> Iterator[Store]:
    """Every test starts with an empty registry (counter at 0) and no tracked connections."""
    store: Store = Store("game")
    monkeypatch.setattr(pairing, "_store", store)
    manager._by_session.clear()
    try:
        yield store
    finally:
        manager._by_session.clear()


@pytest.fixture(autouse=True)
def config_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[..., None]]:
    """Long broadcast period by default so tests only see frames they asked for."""

    def set_env(**values: str) -> None:
        for name, value in values.items():
            monkeypatch.setenv(name, value)
        get_config.cache_clear()

    set_env(BROADCAST_INTERVAL_MS="60000", PUSH_ON_CHANGE="0")
    try:
        yield set_env
    finally:
        get_config.cache_clear()
