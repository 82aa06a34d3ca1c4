"""
Package: delivery
Description: Message delivery mechanisms for Sparkle Relay.

Provides the HTTP client that posts messages to the remote log and the
bounded buffer that holds failed deliveries until the endpoint recovers.
"""

from .buffer import DEFAULT_CAPACITY, RetryBuffer
from .client import DeliveryClient, DeliveryError

__all__ = [
    "DEFAULT_CAPACITY",
    "DeliveryClient",
    "DeliveryError",
    "RetryBuffer",
]
