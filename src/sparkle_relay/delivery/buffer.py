"""
Module: delivery/buffer.py
Description: Bounded FIFO buffer for messages whose delivery failed.

When the buffer is full the oldest entry is evicted to make room. The
loss is deliberate: the relay never holds more than ``capacity`` messages
in memory while the endpoint is unreachable.
"""

from collections import deque
from typing import Deque, Iterator, Optional

from sparkle_relay.models.message import PendingDelivery
from sparkle_relay.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CAPACITY = 50


class RetryBuffer:
    """Ordered, bounded queue of pending deliveries (oldest first)."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")

        self._capacity = capacity
        self._entries: Deque[PendingDelivery] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, entry: PendingDelivery) -> Optional[PendingDelivery]:
        """
        Append an entry at the back of the buffer.

        Args:
            entry: Pending delivery to retry later

        Returns:
            The evicted oldest entry if the buffer was full, else None
        """
        evicted = None
        if len(self._entries) >= self._capacity:
            evicted = self._entries.popleft()
            logger.warning(
                "Retry buffer full, dropping oldest message",
                message_id=evicted.message.message_id,
                capacity=self._capacity
            )

        self._entries.append(entry)
        return evicted

    def pop_front(self) -> PendingDelivery:
        """Remove and return the oldest entry. Raises IndexError if empty."""
        if not self._entries:
            raise IndexError("pop from empty retry buffer")
        return self._entries.popleft()

    def peek_front(self) -> Optional[PendingDelivery]:
        return self._entries[0] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __iter__(self) -> Iterator[PendingDelivery]:
        return iter(list(self._entries))
