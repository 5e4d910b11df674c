"""Unit tests for chessrelay/board.py"""

import pytest

from chessrelay.board import get_file, get_position, render, square_label
from chessrelay.game import ChessClient


class FixedEngine:
    def __init__(self, raw: list) -> None:
        self.raw = raw

    def render_board(self) -> list:
        return self.raw


@pytest.mark.parametrize(
    "index, label",
    [(0, "a1"), (7, "h1"), (8, "a2"), (28, "e4"), (63, "h8")],
)
def test_linear_index_to_label(index: int, label: str) -> None:
    assert square_label(get_position(index)) == label


def test_get_position_and_file() -> None:
    assert get_position(12) == {"row": 2, "col": 5}
    assert get_file(1) == "a"
    assert get_file(8) == "h"


def test_render_starting_position() -> None:
    board = render(ChessClient())

    assert len(board) == 32
    assert board["e1"] == "wK"
    assert board["d1"] == "wQ"
    assert board["a2"] == "wP"
    assert board["g8"] == "bN"
    assert board["d8"] == "bQ"
    assert "e4" not in board


def test_render_skips_empty_and_unknown_values() -> None:
    raw = [0] * 64
    raw[0] = 4  # white rook
    raw[1] = 99
    raw[2] = -3
    raw[63] = 8 | 6  # black king
    board = render(FixedEngine(raw))

    assert board == {"a1": "wR", "h8": "bK"}


def test_render_after_move() -> None:
    client = ChessClient()
    client.select_square(2, 5)
    client.select_square(4, 5)
    board = render(client)

    assert board["e4"] == "wP"
    assert "e2" not in board
