"""
Сессии, реестр сессий и очередь пейринга (in-memory).
Пейринг: первый ждущий получает X, второй O.
"""
import logging
import uuid
from dataclasses import dataclass, field

from .constants import GAME_START, WAITING, Outcome, SessionState, Symbol
from .game import Board, empty_board
from .protocol import Transport, game_start_payload

logger = logging.getLogger(__name__)


@dataclass
class Session:
    id: str
    player_x: str
    player_o: str
    board: Board = field(default_factory=empty_board)
    turn: Symbol = Symbol.X
    outcome: Outcome | None = None

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self.outcome is None else SessionState.FINISHED

    @property
    def is_finished(self) -> bool:
        return self.outcome is not None

    @property
    def members(self) -> tuple[str, str]:
        return (self.player_x, self.player_o)

    def has_member(self, connection: str) -> bool:
        return connection in self.members

    def symbol_of(self, connection: str) -> Symbol | None:
        if connection == self.player_x:
            return Symbol.X
        if connection == self.player_o:
            return Symbol.O
        return None

    def opponent_of(self, connection: str) -> str | None:
        if connection == self.player_x:
            return self.player_o
        if connection == self.player_o:
            return self.player_x
        return None

    def reset(self) -> None:
        """Новая партия в той же сессии; символы игроков сохраняются."""
        self.board = empty_board()
        self.turn = Symbol.X
        self.outcome = None


class SessionRegistry:
    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def create(self, player_x: str, player_o: str) -> Session:
        if player_x == player_o:
            raise ValueError("a session needs two distinct connections")
        session = Session(id=str(uuid.uuid4()), player_x=player_x, player_o=player_o)
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> Session | None:
        return self._sessions.pop(session_id, None)

    def sessions_of(self, connection: str) -> list[Session]:
        """Все сессии, где connection играет."""
        return [s for s in self._sessions.values() if s.has_member(connection)]


class Matchmaker:
    """Один слот ожидания; второй ищущий сразу получает пару."""

    def __init__(self, registry: SessionRegistry, transport: Transport):
        self._registry = registry
        self._transport = transport
        self._waiting: str | None = None

    @property
    def waiting(self) -> str | None:
        return self._waiting

    def seek(self, connection: str) -> Session | None:
        """
        Встать в очередь или сразу создать сессию, если есть ждущий.
        Возвращает Session если пара найдена, иначе None.
        """
        if self._waiting is None or self._waiting == connection:
            # Повторный seekGame от того же соединения: только повторное уведомление
            self._waiting = connection
            self._transport.send(connection, WAITING)
            logger.info("Matchmaker: %s is waiting", connection)
            return None
        opponent = self._waiting
        session = self._registry.create(player_x=opponent, player_o=connection)
        self._waiting = None
        self._transport.join(opponent, session.id)
        self._transport.join(connection, session.id)
        self._transport.send(opponent, GAME_START, game_start_payload(session.id, Symbol.X, connection))
        self._transport.send(connection, GAME_START, game_start_payload(session.id, Symbol.O, opponent))
        logger.info("Matchmaker: session %s X=%s O=%s", session.id, opponent, connection)
        return session

    def cancel(self, connection: str) -> bool:
        """Убрать из слота ожидания. Возвращает True если соединение ждало."""
        if self._waiting != connection:
            return False
        self._waiting = None
        return True
