"""
Менеджер WebSocket: подключения по connection_id, группы сессий, рассылка.
Отправка не блокирует: сообщения кладутся в очередь соединения,
из которой их пишет в сокет отдельная задача.
"""
import asyncio
import logging
import uuid
from typing import Any

from fastapi import WebSocket

from .protocol import message

logger = logging.getLogger(__name__)


class Connection:
    def __init__(self, ws: WebSocket, connection_id: str):
        self.ws = ws
        self.id = connection_id
        self.outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.groups: set[str] = set()
        self.writer: asyncio.Task | None = None
        self.closed = False


class WSManager:
    def __init__(self):
        self._by_id: dict[str, Connection] = {}
        self._groups: dict[str, set[str]] = {}

    def __len__(self) -> int:
        return len(self._by_id)

    def connect(self, ws: WebSocket) -> Connection:
        conn = Connection(ws, uuid.uuid4().hex)
        conn.writer = asyncio.create_task(self._write_loop(conn))
        self._by_id[conn.id] = conn
        return conn

    def disconnect(self, connection_id: str) -> None:
        conn = self._by_id.pop(connection_id, None)
        if not conn:
            return
        for group in list(conn.groups):
            self.leave(connection_id, group, conn)
        if conn.writer:
            conn.writer.cancel()

    def send(self, connection: str, event: str, payload: dict[str, Any] | None = None) -> None:
        conn = self._by_id.get(connection)
        if not conn or conn.closed:
            logger.debug("send %s: %s is gone", event, connection)
            return
        conn.outbox.put_nowait(message(event, payload))

    def join(self, connection: str, group: str) -> None:
        conn = self._by_id.get(connection)
        if not conn:
            return
        conn.groups.add(group)
        self._groups.setdefault(group, set()).add(connection)

    def leave(self, connection: str, group: str, conn: Connection | None = None) -> None:
        conn = conn or self._by_id.get(connection)
        if conn:
            conn.groups.discard(group)
        members = self._groups.get(group)
        if members is None:
            return
        members.discard(connection)
        if not members:
            del self._groups[group]

    def members(self, group: str) -> set[str]:
        return set(self._groups.get(group, ()))

    def broadcast(self, group: str, event: str, payload: dict[str, Any] | None = None) -> None:
        for connection in sorted(self._groups.get(group, ())):
            self.send(connection, event, payload)

    def discard(self, group: str) -> None:
        for connection in self._groups.pop(group, set()):
            conn = self._by_id.get(connection)
            if conn:
                conn.groups.discard(group)

    async def _write_loop(self, conn: Connection) -> None:
        while True:
            payload = await conn.outbox.get()
            try:
                await conn.ws.send_json(payload)
            except Exception as e:
                # Соединение умерло: очередь больше не копим, группы почистит обработчик отключения
                logger.warning("send to %s failed: %s", conn.id, e)
                conn.closed = True
                while not conn.outbox.empty():
                    conn.outbox.get_nowait()
                return
