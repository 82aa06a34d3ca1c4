"""
Module: jid.py
Description: Helpers for splitting chat addresses.

Chat addresses have the form ``name@domain/resource``. Group-chat
messages carry the sender's nickname in the resource part of the room
address (``lobby@conference.example.org/alice``), while direct messages
carry it in the name part (``alice@example.org/laptop``).
"""

from typing import Optional


def parse_name(address: Optional[str]) -> Optional[str]:
    """
    Return the name part of a chat address.

    An address without ``@`` is returned unchanged, so a bare room name
    such as ``lobby`` is its own display name.

    Args:
        address: Full chat address

    Returns:
        Text before the last ``@``, or None if address is None
    """
    if address is None:
        return None

    bare = address.split("/", 1)[0]
    at_index = bare.rfind("@")
    if at_index < 0:
        return bare
    return bare[:at_index]


def parse_resource(address: Optional[str]) -> Optional[str]:
    """
    Return the resource part of a chat address.

    Args:
        address: Full chat address

    Returns:
        Text after the first ``/``, empty string if there is none,
        or None if address is None
    """
    if address is None:
        return None

    slash_index = address.find("/")
    if slash_index < 0:
        return ""
    return address[slash_index + 1:]
