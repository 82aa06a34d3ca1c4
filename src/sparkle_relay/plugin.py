"""
Module: plugin.py
Description: Host plugin lifecycle for Sparkle Relay.

Startup is two-phase: load settings, and only when they load build the
logging filter and register it with the host chat manager. Without
configuration the host runs with no filter attached.

Key Components:
- SparklePlugin: initialize / shutdown entry points for the host
- ChatManager, SessionManager, MessageFilter: host-side protocols
- build_filter(): Construct a filter from settings

Dependencies: typing, config, delivery, archive, filters, utils
Author: Sparkle Relay Team
"""

from typing import Callable, Optional, Protocol

from sparkle_relay.archive.transcript import TranscriptArchive
from sparkle_relay.config.settings import Settings, load_settings
from sparkle_relay.delivery.client import DeliveryClient
from sparkle_relay.filters.logging_filter import LoggingMessageFilter
from sparkle_relay.models.message import ChatRoom, ObservedMessage
from sparkle_relay.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


class MessageFilter(Protocol):
    """Filter the host calls for every message it sends or receives."""

    def filter_incoming(self, room: ChatRoom, message: ObservedMessage) -> None: ...

    def filter_outgoing(self, room: ChatRoom, message: ObservedMessage) -> None: ...


class ChatManager(Protocol):
    """Host registry of message filters."""

    def add_message_filter(self, message_filter: MessageFilter) -> None: ...

    def remove_message_filter(self, message_filter: MessageFilter) -> None: ...


class SessionManager(Protocol):
    """Host session lookup."""

    @property
    def username(self) -> str: ...


def build_filter(
    settings: Settings,
    current_username: str,
    archive: Optional[TranscriptArchive] = None
) -> LoggingMessageFilter:
    """
    Construct a logging filter from loaded settings.

    Args:
        settings: Loaded relay settings
        current_username: Display name of the signed-in user
        archive: Optional transcript archive to attach

    Returns:
        Configured LoggingMessageFilter
    """
    delivery_client = DeliveryClient(
        settings.target_url,
        timeout_seconds=settings.delivery_timeout
    )
    return LoggingMessageFilter(
        room_name=settings.room_name,
        delivery_client=delivery_client,
        current_username=current_username,
        buffer_capacity=settings.retry_buffer_capacity,
        archive=archive
    )


class SparklePlugin:
    """Registers the logging filter with the host when configured."""

    def __init__(
        self,
        chat_manager: ChatManager,
        session_manager: SessionManager,
        settings_loader: Callable[[], Optional[Settings]] = load_settings
    ):
        self.chat_manager = chat_manager
        self.session_manager = session_manager
        self.settings_loader = settings_loader

        self.message_filter: Optional[LoggingMessageFilter] = None
        self.archive: Optional[TranscriptArchive] = None

    @property
    def enabled(self) -> bool:
        return self.message_filter is not None

    def can_shut_down(self) -> bool:
        return True

    def initialize(self) -> Optional[LoggingMessageFilter]:
        """
        Load settings and register the logging filter.

        Returns:
            The registered filter, or None if the plugin stays disabled
        """
        if self.message_filter is not None:
            logger.warning("Sparkle relay already initialized")
            return self.message_filter

        settings = self.settings_loader()
        if settings is None:
            logger.warning("Sparkle relay disabled: no configuration")
            return None

        configure_logging(settings.log_level)

        if settings.archive_enabled:
            try:
                self.archive = TranscriptArchive(
                    settings.archive_path,
                    settings.publish_path,
                    threshold=settings.archive_threshold
                )
            except OSError as e:
                logger.error(
                    "Transcript archive unavailable, relaying without it",
                    archive_path=settings.archive_path,
                    error=str(e)
                )

        try:
            message_filter = build_filter(
                settings,
                current_username=self.session_manager.username,
                archive=self.archive
            )
            self.chat_manager.add_message_filter(message_filter)
        except Exception as e:
            logger.error(
                "Sparkle relay disabled: filter could not be registered",
                error=str(e),
                error_type=type(e).__name__
            )
            if self.archive is not None:
                self.archive.close()
                self.archive = None
            return None

        self.message_filter = message_filter

        logger.info(
            "Sparkle relay enabled",
            room=settings.room_name,
            target_url=settings.target_url
        )
        return self.message_filter

    def shutdown(self) -> None:
        """Unregister the filter and close the transcript archive."""
        if self.message_filter is not None:
            self.chat_manager.remove_message_filter(self.message_filter)
            self.message_filter = None

        if self.archive is not None:
            self.archive.close()
            self.archive = None

        logger.info("Sparkle relay shut down")
