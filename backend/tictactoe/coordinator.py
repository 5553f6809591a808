"""
Жизненный цикл сессии: ходы, реванш, отключение игрока.
Некорректные запросы отбрасываются молча: без изменения состояния и без рассылки.
"""
import logging

from .constants import GAME_OVER, GAME_RESET, MOVE_MADE, OPPONENT_LEFT, Outcome, Symbol
from .game import InvalidMoveError, apply_move, detect_winner, is_draw, moves_played, other
from .pairing import Matchmaker, Session, SessionRegistry
from .protocol import (
    Transport,
    game_over_payload,
    game_reset_payload,
    move_made_payload,
)

logger = logging.getLogger(__name__)


class SessionCoordinator:
    """
    strict_symbols=False: символ хода берётся из сообщения клиента, как есть.
    strict_symbols=True: символ должен совпадать с тем, что выдан соединению при пейринге,
    а реванш принимается только от участника сессии.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        matchmaker: Matchmaker,
        transport: Transport,
        strict_symbols: bool = False,
    ):
        self._registry = registry
        self._matchmaker = matchmaker
        self._transport = transport
        self.strict_symbols = strict_symbols

    def make_move(self, session_id: str, connection: str, claimed_symbol: Symbol, index: int) -> bool:
        """
        Применить ход. Возвращает True если ход принят и разослан группе.
        """
        session = self._registry.get(session_id)
        if session is None:
            logger.debug("move rejected: unknown session %s", session_id)
            return False
        if session.is_finished:
            logger.debug("move rejected: session %s is finished", session_id)
            return False
        if claimed_symbol != session.turn:
            logger.debug("move rejected: %s is not on turn in %s", claimed_symbol, session_id)
            return False
        if self.strict_symbols and session.symbol_of(connection) != claimed_symbol:
            logger.debug("move rejected: %s does not hold %s in %s", connection, claimed_symbol, session_id)
            return False
        try:
            session.board = apply_move(session.board, index, claimed_symbol)
        except InvalidMoveError as e:
            logger.debug("move rejected in %s: %s", session_id, e)
            return False

        winner = detect_winner(session.board)
        if winner is not None:
            self._finish(session, Outcome.for_winner(winner))
        elif is_draw(session.board):
            self._finish(session, Outcome.DRAW)
        else:
            session.turn = other(claimed_symbol)
            self._transport.broadcast(session.id, MOVE_MADE, move_made_payload(session.board, session.turn))
        return True

    def _finish(self, session: Session, outcome: Outcome) -> None:
        session.outcome = outcome
        logger.info("Session %s over after %s moves: %s", session.id, moves_played(session.board), outcome.value)
        self._transport.broadcast(session.id, GAME_OVER, game_over_payload(outcome, session.board))

    def rematch(self, session_id: str, connection: str | None = None) -> bool:
        """Сбросить доску; X снова ходит первым. Допустим и посреди партии."""
        session = self._registry.get(session_id)
        if session is None:
            return False
        if self.strict_symbols and (connection is None or not session.has_member(connection)):
            logger.debug("rematch rejected: %s is not in %s", connection, session_id)
            return False
        session.reset()
        logger.info("Session %s reset", session.id)
        self._transport.broadcast(session.id, GAME_RESET, game_reset_payload(session.board, session.turn))
        return True

    def disconnect(self, connection: str) -> int:
        """
        Убрать соединение из очереди и закрыть все его сессии.
        Возвращает количество закрытых сессий.
        """
        self._matchmaker.cancel(connection)
        sessions = self._registry.sessions_of(connection)
        for session in sessions:
            self._transport.broadcast(session.id, OPPONENT_LEFT)
            self._registry.remove(session.id)
            self._transport.discard(session.id)
            logger.info("Session %s closed: %s left, %s notified", session.id, connection, session.opponent_of(connection))
        return len(sessions)
