"""Перевод сырого снимка доски движка в доску протокола."""
from typing import Protocol

from .constants import BOARD_SIZE, FILES, PIECE_KEY_MAP, Board, Position
from .game import piece_from_value


class BoardSource(Protocol):
    def render_board(self) -> list[int]: ...


def get_position(index: int) -> Position:
    """Линейный индекс (a1=0, b1=1, ..., h8=63) -> строка/столбец с 1."""
    return {"row": index // BOARD_SIZE + 1, "col": index % BOARD_SIZE + 1}


def get_file(col: int) -> str:
    return FILES[col - 1]


def square_label(position: Position) -> str:
    return f"{get_file(position['col'])}{position['row']}"


def render(engine: BoardSource) -> Board:
    """Только занятые и распознанные клетки; нераспознанные значения пропускаются."""
    pieces: Board = {}
    for index, value in enumerate(engine.render_board()):
        piece = piece_from_value(value)
        if piece is None:
            continue
        code = PIECE_KEY_MAP.get(piece.symbol())
        if code is None:
            continue
        pieces[square_label(get_position(index))] = code
    return pieces
