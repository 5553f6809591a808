"""Shared pytest fixtures: a recording transport and a wired-up core."""

from __future__ import annotations

from typing import Any

import pytest

from tictactoe.coordinator import SessionCoordinator
from tictactoe.pairing import Matchmaker, Session, SessionRegistry


class RecordingTransport:
    """In-memory Transport that remembers groups and every message it was asked to deliver."""

    def __init__(self) -> None:
        self.groups: dict[str, set[str]] = {}
        self.sent: list[tuple[str, str, dict[str, Any] | None]] = []
        self.broadcasts: list[tuple[str, str, dict[str, Any] | None]] = []

    def send(self, connection: str, event: str, payload: dict[str, Any] | None = None) -> None:
        self.sent.append((connection, event, payload))

    def join(self, connection: str, group: str) -> None:
        self.groups.setdefault(group, set()).add(connection)

    def broadcast(self, group: str, event: str, payload: dict[str, Any] | None = None) -> None:
        self.broadcasts.append((group, event, payload))

    def discard(self, group: str) -> None:
        self.groups.pop(group, None)

    def events_for(self, connection: str) -> list[str]:
        return [event for conn, event, _ in self.sent if conn == connection]

    def last_broadcast(self) -> tuple[str, str, dict[str, Any] | None]:
        return self.broadcasts[-1]

    def clear(self) -> None:
        self.sent.clear()
        self.broadcasts.clear()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def matchmaker(registry: SessionRegistry, transport: RecordingTransport) -> Matchmaker:
    return Matchmaker(registry, transport)


@pytest.fixture
def coordinator(
    registry: SessionRegistry,
    matchmaker: Matchmaker,
    transport: RecordingTransport,
) -> SessionCoordinator:
    return SessionCoordinator(registry, matchmaker, transport)


@pytest.fixture
def session(matchmaker: Matchmaker, transport: RecordingTransport) -> Session:
    """A freshly paired session: "alice" holds X, "bob" holds O."""
    matchmaker.seek("alice")
    paired = matchmaker.seek("bob")
    assert paired is not None
    transport.clear()
    return paired
