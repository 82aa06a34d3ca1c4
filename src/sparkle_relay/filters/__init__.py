"""
Package: filters
Description: Host message filters provided by Sparkle Relay.
"""

from .logging_filter import LoggingMessageFilter, resolve_username

__all__ = ["LoggingMessageFilter", "resolve_username"]
