"""
Обработка сообщений WebSocket: seekGame, makeMove, playAgain.
Каждое сообщение обрабатывается целиком до следующего: внутри нет await.
"""
import json
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .constants import MAKE_MOVE, PLAY_AGAIN, SEEK_GAME, Symbol
from .coordinator import SessionCoordinator
from .pairing import Matchmaker
from .ws_manager import WSManager

logger = logging.getLogger(__name__)


def _parse_symbol(value: object) -> Symbol | None:
    try:
        return Symbol(value)
    except ValueError:
        return None


def handle_ws_message(
    raw: str,
    connection: str,
    matchmaker: Matchmaker,
    coordinator: SessionCoordinator,
) -> bool:
    """
    Обрабатывает одно сообщение клиента.
    Возвращает True если сообщение разобрано и передано в ядро;
    False если оно отброшено ещё до ядра (битый JSON, неизвестный тип, не те поля).
    """
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        logger.warning("WS: invalid JSON from %s: %s", connection, e)
        return False
    if not isinstance(data, dict):
        logger.warning("WS: non-object message from %s", connection)
        return False
    t = data.get("type")
    logger.info("WS: msg from %s type=%s", connection, t)
    if t == SEEK_GAME:
        matchmaker.seek(connection)
        return True
    if t == MAKE_MOVE:
        session_id = data.get("sessionId")
        symbol = _parse_symbol(data.get("symbol"))
        if not isinstance(session_id, str) or symbol is None:
            logger.warning("WS: malformed makeMove from %s", connection)
            return False
        coordinator.make_move(session_id, connection, symbol, data.get("index"))
        return True
    if t == PLAY_AGAIN:
        session_id = data.get("sessionId")
        if not isinstance(session_id, str):
            logger.warning("WS: malformed playAgain from %s", connection)
            return False
        coordinator.rematch(session_id, connection)
        return True
    logger.warning("WS: unknown message type %r from %s", t, connection)
    return False


async def ws_loop(
    ws: WebSocket,
    manager: WSManager,
    matchmaker: Matchmaker,
    coordinator: SessionCoordinator,
) -> None:
    """Приём сообщений до отключения клиента, затем закрытие его сессий."""
    connection = None
    try:
        await ws.accept()
        connection = manager.connect(ws).id
        logger.info("WS: accepted connection=%s", connection)
        while True:
            msg = await ws.receive()
            if msg["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(msg.get("code", 1000), msg.get("reason"))
            raw = msg.get("text")
            if raw is None:
                # Бинарные кадры протоколом не предусмотрены
                logger.warning("WS: non-text frame from %s ignored", connection)
                continue
            handle_ws_message(raw, connection, matchmaker, coordinator)
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s connection=%s", e.code, connection)
    except Exception as e:
        logger.exception("WS: error connection=%s: %s", connection, e)
    finally:
        if connection:
            # Сначала убрать из групп, чтобы opponentLeft ушёл только оставшемуся игроку
            manager.disconnect(connection)
            closed = coordinator.disconnect(connection)
            logger.info("WS: disconnected connection=%s sessions_closed=%s", connection, closed)
