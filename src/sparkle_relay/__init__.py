"""
Package: sparkle_relay
Description: Relay chat room messages to a remote HTTP log.

A message filter for a host chat client that posts every message of one
room to a remote endpoint, keeping failed posts in a bounded buffer until
the endpoint recovers.
"""

__version__ = "0.1.0"

from .filters.logging_filter import LoggingMessageFilter
from .plugin import SparklePlugin

__all__ = ["LoggingMessageFilter", "SparklePlugin", "__version__"]
