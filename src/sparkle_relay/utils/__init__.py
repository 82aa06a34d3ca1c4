"""
Module: utils
Description: Package initialization for utility functions.

This package contains shared helpers used throughout Sparkle Relay:
- logger: Structured logging configuration and helpers
- jid: Chat address parsing
- timefmt: Timestamp clock and display formatting
"""

__all__ = []
