"""
Module: conftest.py
Description: Shared pytest fixtures for Sparkle Relay tests.

Provides rooms, messages, a controllable clock, and delivery clients
(real ones for pytest-httpx tests, mocked ones for filter tests).
"""

import os
from datetime import timezone
from unittest.mock import Mock

import pytest

from sparkle_relay.delivery.client import DeliveryClient
from sparkle_relay.filters.logging_filter import LoggingMessageFilter
from sparkle_relay.models.message import ChatRoom, MessageKind, ObservedMessage

TARGET_URL = "http://relay.test/message/create"


class FakeClock:
    """Clock returning a fixed epoch-millisecond value until advanced."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> None:
        self.now += millis


@pytest.fixture(autouse=True)
def clear_relay_env(monkeypatch, tmp_path):
    """Keep developer SPARKLE_* variables and .env files out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("SPARKLE_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def target_url():
    return TARGET_URL


@pytest.fixture
def lobby():
    """Room the test filters are bound to."""
    return ChatRoom(room_name="lobby")


@pytest.fixture
def other_room():
    return ChatRoom(room_name="kitchen@conference.example.org")


@pytest.fixture
def local_message():
    """Message authored by the signed-in user (no origin)."""
    return ObservedMessage(message_id="1", body="hi")


@pytest.fixture
def groupchat_message():
    return ObservedMessage(
        message_id="2",
        body="hello room",
        origin="lobby@conference.example.org/bob",
        kind=MessageKind.GROUPCHAT
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def delivery_client(target_url):
    """Real client rendering times in UTC."""
    return DeliveryClient(target_url, timeout_seconds=5, tz=timezone.utc)


@pytest.fixture
def mock_delivery_client(target_url):
    """
    Mocked client that succeeds by default.

    Set ``post.return_value`` or ``post.side_effect`` to simulate failures.
    """
    client = Mock(spec=DeliveryClient)
    client.target_url = target_url
    client.post.return_value = 200
    return client


@pytest.fixture
def logging_filter(mock_delivery_client, clock):
    """Filter bound to 'lobby' for user 'alice' with a mocked client."""
    return LoggingMessageFilter(
        room_name="lobby",
        delivery_client=mock_delivery_client,
        current_username="alice",
        clock=clock
    )


@pytest.fixture
def make_message():
    """Factory for numbered local messages."""
    def _make(index: int) -> ObservedMessage:
        return ObservedMessage(message_id=str(index), body=f"message {index}")
    return _make
