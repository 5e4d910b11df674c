"""Константы протокола и доски."""
from typing import TypedDict


class Position(TypedDict):
    row: int
    col: int


# Доска в формате протокола: "e4" -> "wP"
Board = dict[str, str]

BOARD_SIZE = 8
FILES = "abcdefgh"

# Зарезервированная клетка "ничего не выбрано", на доске её нет
DESELECT_POSITION: Position = {"row": 100, "col": 100}

INVALID_MESSAGE = "Invalid message."

# Символ фигуры python-chess -> код фигуры для chessboard.js
PIECE_KEY_MAP: dict[str, str] = {
    "P": "wP",
    "N": "wN",
    "B": "wB",
    "R": "wR",
    "Q": "wQ",
    "K": "wK",
    "p": "bP",
    "n": "bN",
    "b": "bB",
    "r": "bR",
    "q": "bQ",
    "k": "bK",
}
