"""Константы игры: символы, исходы, выигрышные линии, имена событий."""
from enum import Enum


class Symbol(str, Enum):
    X = "X"
    O = "O"


class Outcome(str, Enum):
    X_WINS = "X"
    O_WINS = "O"
    DRAW = "draw"

    @classmethod
    def for_winner(cls, symbol: Symbol) -> "Outcome":
        return cls.X_WINS if symbol is Symbol.X else cls.O_WINS


class SessionState(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"


BOARD_SIZE = 9

# Порядок проверки фиксирован: строки, столбцы, диагонали
WIN_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

# client -> server
SEEK_GAME = "seekGame"
MAKE_MOVE = "makeMove"
PLAY_AGAIN = "playAgain"

# server -> client / group
WAITING = "waiting"
GAME_START = "gameStart"
MOVE_MADE = "moveMade"
GAME_OVER = "gameOver"
GAME_RESET = "gameReset"
OPPONENT_LEFT = "opponentLeft"
