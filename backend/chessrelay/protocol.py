"""
Протокол WebSocket: разбор входящих кадров и сборка исходящих.

Входящий кадр — JSON {"type": "select", "position": {"row": int, "col": int}}.
Любой другой JSON-объект с "type" — снять выбор. Не JSON или без "type" — ошибка.

Исходящие кадры двух форм, клиенты их различают:
- доска или ответ на действие — JSON-объект;
- ошибка — голая строка "Invalid message." (не JSON).
"""
import json
from dataclasses import dataclass
from typing import Any

from .constants import INVALID_MESSAGE, Board, Position


@dataclass(frozen=True)
class SelectAction:
    event: str  # исходный кадр как есть
    data: dict[str, Any]
    position: Position | None

    @property
    def highlight(self) -> Any:
        return self.data.get("position")


def _parse_position(value: Any) -> Position | None:
    if not isinstance(value, dict):
        return None
    row, col = value.get("row"), value.get("col")
    if not _is_int(row) or not _is_int(col):
        return None
    return {"row": row, "col": col}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_action(raw: str) -> SelectAction | None:
    """
    Разбирает текстовый кадр. None — кадр невалиден.
    Диапазон row/col не проверяется, это дело движка.
    """
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError, TypeError):
        # JSONDecodeError — подкласс ValueError; ValueError также на слишком длинных числах
        return None
    if not isinstance(data, dict) or "type" not in data:
        return None
    if data["type"] != "select" or data.get("position") is None:
        return SelectAction(event=raw, data=data, position=None)
    position = _parse_position(data["position"])
    if position is None:
        return None
    return SelectAction(event=raw, data=data, position=position)


@dataclass(frozen=True)
class Broadcast:
    board: Board


@dataclass(frozen=True)
class ActionReply:
    event: str
    data: dict[str, Any]
    board: Board
    highlight: Any = None


@dataclass(frozen=True)
class InvalidNotice:
    pass


OutboundMessage = Broadcast | ActionReply | InvalidNotice


def encode(message: OutboundMessage) -> str:
    if isinstance(message, Broadcast):
        return json.dumps(message.board)
    if isinstance(message, ActionReply):
        payload = {
            "event": message.event,
            "json": message.data,
            "board": message.board,
        }
        # Без position в кадре ключа highlight нет
        if "position" in message.data:
            payload["highlight"] = message.highlight
        return json.dumps(payload)
    if isinstance(message, InvalidNotice):
        return INVALID_MESSAGE
    raise TypeError(f"unknown outbound message: {message!r}")
