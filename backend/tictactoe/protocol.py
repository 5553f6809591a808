"""
Контракт с транспортом и сборка payload'ов исходящих событий.
Ядро (pairing, coordinator) общается с клиентами только через Transport.
"""
from typing import Any, Protocol

from .constants import Outcome, Symbol
from .game import Board, board_payload


class Transport(Protocol):
    """Отправка без ожидания: методы не блокируют и не сообщают о доставке."""

    def send(self, connection: str, event: str, payload: dict[str, Any] | None = None) -> None: ...

    def join(self, connection: str, group: str) -> None: ...

    def broadcast(self, group: str, event: str, payload: dict[str, Any] | None = None) -> None: ...

    def discard(self, group: str) -> None: ...


def message(event: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Собрать JSON-сообщение: {"type": event, ...payload}."""
    return {"type": event, **(payload or {})}


def game_start_payload(session_id: str, symbol: Symbol, opponent: str) -> dict[str, Any]:
    return {"sessionId": session_id, "symbol": symbol.value, "opponent": opponent}


def move_made_payload(board: Board, turn: Symbol) -> dict[str, Any]:
    return {"board": board_payload(board), "turn": turn.value}


def game_over_payload(outcome: Outcome, board: Board) -> dict[str, Any]:
    return {"outcome": outcome.value, "board": board_payload(board)}


def game_reset_payload(board: Board, turn: Symbol) -> dict[str, Any]:
    return move_made_payload(board, turn)

