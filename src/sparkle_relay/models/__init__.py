"""
Module: models
Description: Package initialization for Pydantic data models.

All models are exported here for convenient importing.
"""

from .message import (
    ChatRoom,
    Direction,
    MessageKind,
    ObservedMessage,
    PendingDelivery,
)

__all__ = [
    "ChatRoom",
    "Direction",
    "MessageKind",
    "ObservedMessage",
    "PendingDelivery",
]
