"""
Package: archive
Description: Local transcript files for relayed messages.
"""

from .transcript import TranscriptArchive, format_line, parse_line

__all__ = ["TranscriptArchive", "format_line", "parse_line"]
