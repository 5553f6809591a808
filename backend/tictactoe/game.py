"""
Логика доски 3x3: ход, победитель, ничья.
Чистые функции без состояния и ввода-вывода.
"""
from .constants import BOARD_SIZE, WIN_LINES, Symbol

Board = tuple[Symbol | None, ...]


class GameError(Exception):
    pass


class InvalidMoveError(GameError):
    pass


def empty_board() -> Board:
    return (None,) * BOARD_SIZE


def other(symbol: Symbol) -> Symbol:
    return Symbol.O if symbol is Symbol.X else Symbol.X


def is_valid_index(index: object) -> bool:
    # bool является подклассом int, но индексом не считается
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < BOARD_SIZE


def moves_played(board: Board) -> int:
    return sum(1 for cell in board if cell is not None)


def apply_move(board: Board, index: int, symbol: Symbol) -> Board:
    """
    Вернуть новую доску с symbol в клетке index.
    Бросает InvalidMoveError, если индекс вне 0..8 или клетка занята.
    """
    if not is_valid_index(index):
        raise InvalidMoveError(f"index out of range: {index!r}")
    if board[index] is not None:
        raise InvalidMoveError(f"cell {index} is occupied")
    cells = list(board)
    cells[index] = symbol
    return tuple(cells)


def detect_winner(board: Board) -> Symbol | None:
    for a, b, c in WIN_LINES:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return board[a]
    return None


def is_draw(board: Board) -> bool:
    return all(cell is not None for cell in board) and detect_winner(board) is None


def board_payload(board: Board) -> list[str | None]:
    """Доска в виде для JSON: "X" / "O" / null."""
    return [cell.value if cell is not None else None for cell in board]
