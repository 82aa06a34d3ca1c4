"""
Module: logging_filter.py
Description: Message filter that relays one chat room to the remote log.

The filter is registered with the host chat client and sees every
incoming and outgoing message. For messages in its bound room it resolves
the sender, assigns a strictly increasing timestamp, and posts the message
through the delivery client. Failed posts go to a bounded retry buffer
that is drained after the next successful post.

Key Components:
- LoggingMessageFilter: Host-facing filter with delivery and retry
- resolve_username(): Sender name from the message origin
- TIMESTAMP_STEP_MS: Spacing applied when the clock does not advance

Dependencies: threading, models, delivery, archive, utils
Author: Sparkle Relay Team
"""

import threading
from typing import Callable, Optional

from sparkle_relay.archive.transcript import TranscriptArchive
from sparkle_relay.delivery.buffer import DEFAULT_CAPACITY, RetryBuffer
from sparkle_relay.delivery.client import DeliveryClient, DeliveryError
from sparkle_relay.models.message import (
    ChatRoom,
    Direction,
    MessageKind,
    ObservedMessage,
    PendingDelivery,
)
from sparkle_relay.utils.jid import parse_name, parse_resource
from sparkle_relay.utils.logger import get_logger
from sparkle_relay.utils.timefmt import now_millis

logger = get_logger(__name__)

SUCCESS_STATUS = 200
TIMESTAMP_STEP_MS = 10


def resolve_username(message: ObservedMessage, current_username: str) -> str:
    """
    Resolve the display name of a message's sender.

    Args:
        message: Observed message
        current_username: Name of the locally signed-in user

    Returns:
        current_username for locally authored messages, the nickname
        (resource) for group-chat messages, the name part otherwise
    """
    if message.origin is None:
        return current_username
    if message.kind == MessageKind.GROUPCHAT:
        return parse_resource(message.origin)
    return parse_name(message.origin)


class LoggingMessageFilter:
    """
    Relays messages from one room to the remote log.

    All work happens synchronously on the caller's thread and is
    serialized by a per-filter lock. No exception escapes to the host.

    Attributes:
        room_name: Room this filter is bound to (matched case-insensitively)
        current_username: Name used for locally authored messages
    """

    def __init__(
        self,
        room_name: str,
        delivery_client: DeliveryClient,
        current_username: str,
        buffer_capacity: int = DEFAULT_CAPACITY,
        archive: Optional[TranscriptArchive] = None,
        clock: Callable[[], int] = now_millis
    ):
        """
        Initialize logging filter.

        Args:
            room_name: Room whose messages are relayed
            delivery_client: Client bound to the remote log endpoint
            current_username: Display name of the signed-in user
            buffer_capacity: Maximum number of failed messages kept
            archive: Optional local transcript archive
            clock: Wall-clock source in epoch milliseconds
        """
        if not room_name:
            raise ValueError("room_name must be a non-empty string")

        self._room_name = room_name
        self._delivery_client = delivery_client
        self._current_username = current_username
        self._archive = archive
        self._clock = clock

        self._retry_buffer = RetryBuffer(buffer_capacity)
        self._last_timestamp = 0
        self._lock = threading.Lock()

        logger.info(
            "Logging filter initialized",
            room=room_name,
            target_url=delivery_client.target_url,
            buffer_capacity=buffer_capacity,
            archive_enabled=archive is not None
        )

    @property
    def room_name(self) -> str:
        return self._room_name

    @property
    def current_username(self) -> str:
        return self._current_username

    @property
    def last_timestamp(self) -> int:
        return self._last_timestamp

    @property
    def retry_buffer(self) -> RetryBuffer:
        return self._retry_buffer

    def filter_incoming(self, room: ChatRoom, message: ObservedMessage) -> None:
        """Host callback for messages received."""
        self.on_message_observed(room, message, Direction.INCOMING)

    def filter_outgoing(self, room: ChatRoom, message: ObservedMessage) -> None:
        """Host callback for messages sent."""
        self.on_message_observed(room, message, Direction.OUTGOING)

    def on_message_observed(
        self,
        room: ChatRoom,
        message: ObservedMessage,
        direction: Direction
    ) -> None:
        """
        Relay one observed message, buffering it if delivery fails.

        Direction is recorded in logs only; both directions are relayed
        the same way. Never raises.

        Args:
            room: Room the message was observed in
            message: Observed message
            direction: Incoming or outgoing
        """
        try:
            with self._lock:
                self._process(room, message, direction)
        except Exception:
            logger.error(
                "Unexpected error relaying message",
                message_id=message.message_id,
                room=room.room_name,
                direction=direction.value,
                exc_info=True
            )

    def _process(
        self,
        room: ChatRoom,
        message: ObservedMessage,
        direction: Direction
    ) -> None:
        if message.message_id is None:
            logger.debug("Skipping untracked message", room=room.room_name)
            return

        if room.room_name.lower() != self._room_name.lower():
            return

        username = resolve_username(message, self._current_username)
        entry = PendingDelivery(
            room=room,
            message=message,
            username=username,
            timestamp=self._next_timestamp()
        )

        if self._archive is not None:
            try:
                self._archive.append(message.message_id, username, message.body)
            except Exception as e:
                logger.error(
                    "Transcript archive failed, relaying anyway",
                    message_id=message.message_id,
                    error=str(e),
                    error_type=type(e).__name__
                )

        logger.debug(
            "Relaying message",
            message_id=message.message_id,
            direction=direction.value,
            timestamp=entry.timestamp
        )

        if not self._deliver(entry):
            self._retry_buffer.push(entry)
            logger.info(
                "Message buffered for retry",
                message_id=message.message_id,
                buffered=len(self._retry_buffer)
            )
            return

        self._drain()

    def _next_timestamp(self) -> int:
        now = self._clock()
        if now <= self._last_timestamp:
            now = self._last_timestamp + TIMESTAMP_STEP_MS
        self._last_timestamp = now
        return now

    def _deliver(self, entry: PendingDelivery) -> bool:
        """Post one pending delivery; True only on HTTP 200."""
        try:
            status_code = self._delivery_client.post(
                entry.room,
                entry.message,
                entry.username,
                entry.timestamp
            )
        except DeliveryError as e:
            logger.warning(
                "Message delivery failed",
                message_id=entry.message.message_id,
                error=str(e)
            )
            return False
        except Exception as e:
            logger.error(
                "Message delivery failed unexpectedly",
                message_id=entry.message.message_id,
                error=str(e),
                error_type=type(e).__name__
            )
            return False

        if status_code != SUCCESS_STATUS:
            logger.warning(
                "Message delivery rejected",
                message_id=entry.message.message_id,
                status_code=status_code
            )
            return False

        return True

    def _drain(self) -> None:
        """
        Redeliver buffered messages oldest first with their original timestamps.

        A message whose redelivery fails is dropped, and draining stops
        until the next successful delivery.
        """
        drained = 0
        while self._retry_buffer:
            entry = self._retry_buffer.pop_front()
            if not self._deliver(entry):
                logger.warning(
                    "Dropping message after failed redelivery",
                    message_id=entry.message.message_id,
                    remaining=len(self._retry_buffer)
                )
                break
            drained += 1

        if drained:
            logger.info(
                "Retry buffer drained",
                delivered=drained,
                remaining=len(self._retry_buffer)
            )
