"""
Обработка WebSocket-подключения к партии.
Подключение сразу попадает в партию: открытую, если есть, иначе новую.
Дальше — таймер рассылки доски и цикл приёма сообщений.
"""
import asyncio
import logging

from fastapi import WebSocket, status
from starlette.websockets import WebSocketDisconnect, WebSocketState

from .config import get_config
from .pairing import (
    SessionRecord,
    apply_selection,
    get_session,
    pair_connection,
    render_session,
)
from .protocol import ActionReply, Broadcast, InvalidNotice, parse_action
from .ws_manager import Connection, manager

logger = logging.getLogger(__name__)

# Сильные ссылки на задачи рассылки, иначе asyncio может их собрать
_broadcast_tasks: set[asyncio.Task] = set()


async def _broadcast_loop(conn: Connection, session: SessionRecord, interval_s: float) -> None:
    """Каждые interval_s секунд отправляет текущую доску. Сама завершается, когда сокет закрыт."""
    while True:
        await asyncio.sleep(interval_s)
        if not conn.is_open:
            logger.debug("WS: broadcast for session %s stopped, socket closed", session.id)
            return
        try:
            await conn.send(Broadcast(render_session(session)))
        except Exception as e:
            logger.debug("WS: broadcast for session %s stopped: %s", session.id, e)
            return


def start_broadcast(conn: Connection, session: SessionRecord) -> asyncio.Task:
    interval_s = get_config().broadcast_interval_ms / 1000
    task = asyncio.create_task(
        _broadcast_loop(conn, session, interval_s),
        name=f"broadcast-{session.id}",
    )
    _broadcast_tasks.add(task)
    task.add_done_callback(_broadcast_tasks.discard)
    return task


async def handle_text_frame(conn: Connection, session: SessionRecord, raw: str) -> None:
    """Одно текстовое сообщение: применить к движку и ответить."""
    action = parse_action(raw)
    if action is None:
        logger.info("WS: invalid message in session %s: %.200s", session.id, raw)
        await conn.send(InvalidNotice())
        return
    try:
        board = apply_selection(session, action.position)
    except Exception as e:
        logger.warning("WS: engine rejected %.200s in session %s: %s", raw, session.id, e)
        await conn.send(InvalidNotice())
        return
    await conn.send(ActionReply(
        event=action.event,
        data=action.data,
        board=board,
        highlight=action.highlight,
    ))
    if get_config().push_on_change:
        await manager.broadcast(session.id, Broadcast(board), exclude=conn)


async def _close_quietly(ws: WebSocket, code: int = status.WS_1000_NORMAL_CLOSURE) -> None:
    if (
        ws.client_state == WebSocketState.DISCONNECTED
        or ws.application_state == WebSocketState.DISCONNECTED
    ):
        return
    try:
        await ws.close(code=code)
    except Exception as e:
        logger.warning("WS: error while closing socket: %s", e)


async def _close_connection(conn: Connection) -> None:
    # Под замком отправки: кадр закрытия не смешается с рассылкой
    async with conn.send_lock:
        await _close_quietly(conn.ws)


async def ws_game_loop(ws: WebSocket) -> None:
    try:
        await ws.accept()
    except Exception as e:
        logger.warning("WS: failed to accept websocket: %s", e)
        # Закрытие до accept сервер отдаёт клиенту как HTTP 403
        await _close_quietly(ws, code=status.WS_1002_PROTOCOL_ERROR)
        return
    logger.info("WS: socket connected")

    session_id = pair_connection()
    session = get_session(session_id)
    if session is None:
        logger.error("WS: session %s vanished right after pairing, closing", session_id)
        await _close_quietly(ws)
        return
    logger.info("WS: bound to session %s (status=%s)", session.id, session.status)

    conn = Connection(ws, session.id)
    manager.connect(conn)
    start_broadcast(conn, session)
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                logger.info(
                    "ws:Close code=%s reason=%s session=%s",
                    message.get("code"), message.get("reason") or "", session.id,
                )
                break
            text = message.get("text")
            data = message.get("bytes")
            if text is not None:
                logger.info("ws:Text %.200s", text)
                await handle_text_frame(conn, session, text)
            elif data is not None:
                logger.info("ws:Binary %d bytes", len(data))
            else:
                logger.debug("ws:%s", message["type"])
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s session=%s", e.code, session.id)
    except Exception as e:
        logger.exception("WS: failed to receive frame in session %s: %s", session.id, e)
    finally:
        manager.disconnect(conn)
        await _close_connection(conn)
