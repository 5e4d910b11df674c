"""
Игровой движок партии на python-chess.
Наружу отдаёт только снимок доски, выбор клетки и декодирование значения клетки.
"""
import chess

from .constants import BOARD_SIZE

# Бит цвета в сыром значении клетки
_BLACK_BIT = 8


def encode_piece(piece: chess.Piece | None) -> int:
    """0 — пустая клетка, иначе piece_type (+8 для чёрных)."""
    if piece is None:
        return 0
    return piece.piece_type | (0 if piece.color == chess.WHITE else _BLACK_BIT)


def piece_from_value(value: int) -> chess.Piece | None:
    """Сырое значение клетки -> фигура или None (пусто или неизвестное значение)."""
    if not isinstance(value, int) or value < 0 or value > (_BLACK_BIT | chess.KING):
        return None
    piece_type = value & ~_BLACK_BIT
    if piece_type not in chess.PIECE_TYPES:
        return None
    color = chess.BLACK if value & _BLACK_BIT else chess.WHITE
    return chess.Piece(piece_type, color)


def square_at(row: int, col: int) -> chess.Square | None:
    """Клетка по строке/столбцу (с 1), None если вне доски."""
    if not (1 <= row <= BOARD_SIZE and 1 <= col <= BOARD_SIZE):
        return None
    return chess.square(col - 1, row - 1)


class ChessClient:
    """Одна партия: доска плюс выбранная клетка."""

    def __init__(self, fen: str = chess.STARTING_FEN):
        self.board = chess.Board(fen)
        self.selected: chess.Square | None = None

    def render_board(self) -> list[int]:
        return [encode_piece(self.board.piece_at(sq)) for sq in chess.SQUARES]

    def select_square(self, row: int, col: int) -> None:
        """
        Выбор клетки игроком.
        Первый выбор берёт фигуру стороны, которая ходит; второй — делает ход,
        если он легален. Клетка вне доски (в т.ч. 100/100) снимает выбор.
        """
        square = square_at(row, col)
        if square is None or square == self.selected:
            self.selected = None
            return
        if self.selected is not None:
            move = self._legal_move(self.selected, square)
            if move is not None:
                self.board.push(move)
                self.selected = None
                return
        piece = self.board.piece_at(square)
        if piece is not None and piece.color == self.board.turn:
            self.selected = square
        else:
            self.selected = None

    def _legal_move(self, from_sq: chess.Square, to_sq: chess.Square) -> chess.Move | None:
        candidates = [
            m for m in self.board.legal_moves
            if m.from_square == from_sq and m.to_square == to_sq
        ]
        if not candidates:
            return None
        # Превращение по умолчанию в ферзя
        for move in candidates:
            if move.promotion in (None, chess.QUEEN):
                return move
        return candidates[0]
