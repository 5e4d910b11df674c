"""
Менеджер WebSocket: подключения по партиям, отправка кадров и рассылка по партии.
"""
import asyncio
import logging
from collections import defaultdict

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from .protocol import OutboundMessage, encode

logger = logging.getLogger(__name__)


class Connection:
    def __init__(self, ws: WebSocket, session_id: str):
        self.ws = ws
        self.session_id = session_id
        # Таймер рассылки и ответы на действия пишут в один сокет
        self.send_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return (
            self.ws.client_state == WebSocketState.CONNECTED
            and self.ws.application_state == WebSocketState.CONNECTED
        )

    async def send(self, message: OutboundMessage) -> None:
        async with self.send_lock:
            await self.ws.send_text(encode(message))


class WSManager:
    def __init__(self):
        self._by_session: dict[str, list[Connection]] = defaultdict(list)

    def connect(self, conn: Connection) -> None:
        self._by_session[conn.session_id].append(conn)

    def disconnect(self, conn: Connection) -> None:
        conns = self._by_session.get(conn.session_id)
        if conns and conn in conns:
            conns.remove(conn)
        if not conns:
            self._by_session.pop(conn.session_id, None)

    def connections(self, session_id: str) -> list[Connection]:
        return list(self._by_session.get(session_id, []))

    async def broadcast(
        self,
        session_id: str,
        message: OutboundMessage,
        exclude: Connection | None = None,
    ) -> None:
        dead = []
        for conn in self.connections(session_id):
            if conn is exclude:
                continue
            try:
                await conn.send(message)
            except Exception as e:
                logger.warning("broadcast to session %s: %s", session_id, e)
                dead.append(conn)
        for conn in dead:
            self.disconnect(conn)


manager = WSManager()
