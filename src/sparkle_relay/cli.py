"""
Script: cli.py
Description: Command line access to the relay for smoke tests and backfill.

Builds a logging filter from the SPARKLE_* settings and feeds it either a
single message or every line of an archived transcript.

Usage:
    sparkle-relay send --body "hello" [--id 42] [--from alice@example.org] [--groupchat]
    sparkle-relay replay path/to/transcript

Exit codes:
    0  every message was delivered
    1  configuration could not be loaded or the input could not be read
    2  some messages are still waiting in the retry buffer
"""

import argparse
import getpass
import sys
import uuid
from pathlib import Path
from typing import List, Optional

from sparkle_relay.archive.transcript import parse_line
from sparkle_relay.config.settings import load_settings
from sparkle_relay.filters.logging_filter import LoggingMessageFilter
from sparkle_relay.models.message import ChatRoom, MessageKind, ObservedMessage
from sparkle_relay.plugin import build_filter
from sparkle_relay.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def resolve_user(user: Optional[str]) -> str:
    """Name from --user, falling back to the login name or "unknown"."""
    if user:
        return user
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        logger.warning("No login name available, using 'unknown'")
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sparkle-relay",
        description="Relay chat messages to the configured remote log"
    )
    parser.add_argument("--room", help="Override SPARKLE_ROOM_NAME")
    parser.add_argument("--url", help="Override SPARKLE_TARGET_URL")
    parser.add_argument(
        "--user",
        help="Name used for messages without a sender (default: login name)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    send = subparsers.add_parser("send", help="Relay a single message")
    send.add_argument("--body", required=True, help="Message text")
    send.add_argument("--id", dest="message_id", help="Message identifier (default: random)")
    send.add_argument("--from", dest="origin", help="Sender address")
    send.add_argument(
        "--groupchat",
        action="store_true",
        help="Treat the sender address as a group-chat occupant"
    )

    replay = subparsers.add_parser("replay", help="Relay every line of a transcript file")
    replay.add_argument("path", type=Path, help="Transcript file to replay")

    return parser


def read_transcript(path: Path, room_name: str) -> List[ObservedMessage]:
    """
    Read transcript lines back into group-chat messages.

    The sender is encoded as the occupant resource of the room address so
    the filter resolves the archived username.

    Raises:
        OSError: If the file cannot be read
        ValueError: If a line is malformed
    """
    messages = []
    with open(path, encoding="utf-8", newline="") as transcript:
        for line in transcript:
            if not line.strip():
                continue
            message_id, username, body = parse_line(line)
            messages.append(ObservedMessage(
                message_id=message_id,
                body=body,
                origin=f"{room_name}/{username}",
                kind=MessageKind.GROUPCHAT
            ))
    return messages


def relay(message_filter: LoggingMessageFilter, messages: List[ObservedMessage]) -> int:
    """Feed messages to the filter and report what is left in the buffer."""
    room = ChatRoom(room_name=message_filter.room_name)
    for message in messages:
        message_filter.filter_outgoing(room, message)

    remaining = len(message_filter.retry_buffer)
    print(f"Relayed {len(messages)} message(s), {remaining} still buffered")
    return 0 if remaining == 0 else 2


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.room:
        overrides["room_name"] = args.room
    if args.url:
        overrides["target_url"] = args.url

    settings = load_settings(**overrides)
    if settings is None:
        print("Relay configuration missing: set SPARKLE_ROOM_NAME and SPARKLE_TARGET_URL",
              file=sys.stderr)
        return 1

    configure_logging(settings.log_level)
    message_filter = build_filter(settings, current_username=resolve_user(args.user))

    if args.command == "send":
        kind = MessageKind.GROUPCHAT if args.groupchat else MessageKind.NORMAL
        messages = [ObservedMessage(
            message_id=args.message_id or uuid.uuid4().hex,
            body=args.body,
            origin=args.origin,
            kind=kind
        )]
    else:
        try:
            messages = read_transcript(args.path, settings.room_name)
        except (OSError, ValueError) as e:
            logger.error("Cannot read transcript", path=str(args.path), error=str(e))
            print(f"Cannot read transcript {args.path}: {e}", file=sys.stderr)
            return 1

    return relay(message_filter, messages)


if __name__ == "__main__":
    sys.exit(main())
