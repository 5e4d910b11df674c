"""
Пейринг подключений в партии (in-memory).
Первое подключение открывает партию, второе её занимает. Партии не удаляются.
"""
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, Literal

from .board import render
from .config import get_config
from .constants import DESELECT_POSITION, Board, Position
from .game import ChessClient
from .store import Store

logger = logging.getLogger(__name__)

SessionStatus = Literal["open", "ready"]


@dataclass(frozen=True)
class SessionRecord:
    id: str
    status: SessionStatus
    engine: ChessClient
    # Один замок на партию: любое обращение к движку идёт под ним
    guard: threading.Lock = field(default_factory=threading.Lock, compare=False, repr=False)


# Глобальное состояние (in-memory)
_store: Store[SessionRecord] = Store(get_config().session_id_prefix)
_pairing_lock = threading.Lock()


def pair_connection(engine_factory: Callable[[], ChessClient] = ChessClient) -> str:
    """
    Найти открытую партию и занять её, иначе создать новую.
    Возвращает id партии, к которой привязано подключение.
    """
    with _pairing_lock:
        found = _store.find(lambda s: s.status == "open")
        if found:
            _store.set(replace(found, status="ready"))
            logger.info("Pairing: joined session %s", found.id)
            return found.id
        session = SessionRecord(
            id=_store.make_id(),
            status="open",
            engine=engine_factory(),
        )
        _store.set(session)
        logger.info("Pairing: created session %s", session.id)
        return session.id


def get_session(session_id: str) -> SessionRecord | None:
    return _store.get(session_id)


def get_session_counts() -> dict[str, int]:
    """Количество партий по статусам."""
    counts = {"open": 0, "ready": 0}
    for session in _store.values():
        counts[session.status] += 1
    return counts


def apply_selection(session: SessionRecord, position: Position | None) -> Board:
    """
    Передать выбор клетки движку и сразу снять доску.
    Без позиции уходит 100/100 — снять выбор.
    """
    target = position if position is not None else DESELECT_POSITION
    with session.guard:
        session.engine.select_square(target["row"], target["col"])
        return render(session.engine)


def render_session(session: SessionRecord) -> Board:
    with session.guard:
        return render(session.engine)
