"""
Module: message.py
Description: Chat message data models for Sparkle Relay.

Defines the immutable records exchanged between the host chat client,
the logging filter and the delivery client.

Key Components:
- ChatRoom: Room identity delivered by the host
- ObservedMessage: One incoming or outgoing chat message
- MessageKind / Direction: Message type and dispatch direction
- PendingDelivery: A message paired with its resolved sender and timestamp

Dependencies: pydantic, enum, typing
Author: Sparkle Relay Team
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from sparkle_relay.utils.jid import parse_name


class MessageKind(str, Enum):
    """Chat message type as reported by the host."""

    NORMAL = "normal"
    GROUPCHAT = "groupchat"


class Direction(str, Enum):
    """Whether the host saw the message arrive or leave."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


class ChatRoom(BaseModel):
    """
    Room in which a message was observed.

    Attributes:
        room_name: Full room address (e.g. 'lobby@conference.example.org')
    """

    model_config = ConfigDict(frozen=True)

    room_name: str = Field(..., description="Full room address")

    @property
    def display_name(self) -> str:
        """Name part of the room address."""
        return parse_name(self.room_name)


class ObservedMessage(BaseModel):
    """
    Chat message observed by the host client.

    Messages without an identifier are untracked: they cannot be
    deduplicated by the remote log, so the filter skips them.

    Attributes:
        message_id: Host packet identifier (None when untracked)
        body: Message text
        origin: Sender address; None for messages authored locally
        kind: Normal or group-chat message
    """

    model_config = ConfigDict(frozen=True)

    message_id: Optional[str] = Field(
        default=None,
        description="Host packet identifier"
    )
    body: str = Field(default="", description="Message text")
    origin: Optional[str] = Field(
        default=None,
        description="Sender address (None when sent by the current user)"
    )
    kind: MessageKind = Field(
        default=MessageKind.NORMAL,
        description="Message type"
    )


class PendingDelivery(BaseModel):
    """Everything needed to (re)post one message to the remote log."""

    model_config = ConfigDict(frozen=True)

    room: ChatRoom
    message: ObservedMessage
    username: str
    timestamp: int = Field(..., ge=0, description="Epoch milliseconds")
