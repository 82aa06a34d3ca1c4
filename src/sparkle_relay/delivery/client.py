"""
Module: client.py
Description: Post observed chat messages to the remote logging endpoint.

Implements a single synchronous, form-encoded HTTP POST per message.
The client reports the response status and leaves the success decision
and any retrying to the logging filter.
"""

from datetime import tzinfo
from typing import Optional

import httpx

from sparkle_relay.models.message import ChatRoom, ObservedMessage
from sparkle_relay.utils.logger import get_logger
from sparkle_relay.utils.timefmt import format_timestamp

logger = get_logger(__name__)


class DeliveryError(Exception):
    """Raised when a message could not be posted at all."""


class DeliveryClient:
    """
    HTTP client for posting chat messages to the remote log.

    One request per call; no connection reuse and no retries.
    """

    def __init__(
        self,
        target_url: str,
        timeout_seconds: float = 10,
        tz: Optional[tzinfo] = None
    ):
        """
        Initialize delivery client.

        Args:
            target_url: Endpoint that accepts form-encoded messages
            timeout_seconds: HTTP timeout in seconds
            tz: Zone used to render the Time field (local time when None)

        Raises:
            ValueError: If target_url is invalid
        """
        if not target_url or not isinstance(target_url, str):
            raise ValueError("target_url must be a non-empty string")
        if not target_url.startswith(('http://', 'https://')):
            raise ValueError("target_url must be a valid HTTP/HTTPS URL")

        self.target_url = target_url
        self.timeout = httpx.Timeout(timeout_seconds)
        self.tz = tz

        logger.info(
            "Delivery client initialized",
            target_url=target_url,
            timeout_seconds=timeout_seconds
        )

    def build_form(
        self,
        room: ChatRoom,
        message: ObservedMessage,
        username: str,
        timestamp: int
    ) -> dict:
        """Form fields for one message, in wire order."""
        return {
            'ID': message.message_id,
            'Room': room.display_name,
            'Body': message.body,
            'From': username,
            'Time': format_timestamp(timestamp, self.tz),
        }

    def post(
        self,
        room: ChatRoom,
        message: ObservedMessage,
        username: str,
        timestamp: int
    ) -> int:
        """
        Post one message to the remote log.

        Args:
            room: Room the message was observed in
            message: Message to post
            username: Resolved sender name
            timestamp: Assigned timestamp in epoch milliseconds

        Returns:
            HTTP status code of the response

        Raises:
            DeliveryError: On invalid URL, connection failure or encoding failure
        """
        form = self.build_form(room, message, username, timestamp)

        logger.debug(
            "Posting message",
            message_id=message.message_id,
            target_url=self.target_url
        )

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    self.target_url,
                    data=form,
                    headers={'Content-Type': 'application/x-www-form-urlencoded'}
                )

        except httpx.TimeoutException as e:
            raise DeliveryError(f"Timed out posting to {self.target_url}") from e

        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DeliveryError(
                f"Could not post to {self.target_url}: {e}"
            ) from e

        except UnicodeError as e:
            raise DeliveryError(f"Could not encode message: {e}") from e

        logger.debug(
            "Message posted",
            message_id=message.message_id,
            status_code=response.status_code
        )

        return response.status_code
