"""
Module: transcript.py
Description: Local transcript archive of relayed chat messages.

Each relayed message is appended to a working file as
``<id>:<username>:<body>`` with CRLF line endings. Once more than
``threshold`` messages have been written, the working file is moved into
the publish directory and a new one is started. Archive I/O failures are
logged and never interrupt relaying.
"""

import shutil
import uuid
from pathlib import Path
from typing import Optional, TextIO, Union

from sparkle_relay.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_THRESHOLD = 5
LINE_ENDING = "\r\n"


def format_line(message_id: str, username: str, body: str) -> str:
    """Render one transcript line (without the line ending)."""
    return f"{message_id}:{username}:{body}"


def parse_line(line: str) -> tuple:
    """
    Split a transcript line into (message_id, username, body).

    The body may itself contain colons; only the first two separate fields.

    Raises:
        ValueError: If the line has fewer than three fields
    """
    parts = line.rstrip(LINE_ENDING).split(":", 2)
    if len(parts) != 3:
        raise ValueError(f"Malformed transcript line: {line!r}")
    return parts[0], parts[1], parts[2]


class TranscriptArchive:
    """
    Working transcript file that is periodically published.

    Attributes:
        archive_path: Directory holding the working file
        publish_path: Directory receiving completed files
        threshold: Messages written before a file is published
    """

    def __init__(
        self,
        archive_path: Union[str, Path],
        publish_path: Union[str, Path],
        threshold: int = DEFAULT_THRESHOLD
    ):
        """
        Initialize archive and open the first working file.

        Raises:
            OSError: If the working file cannot be created
        """
        if threshold < 1:
            raise ValueError("threshold must be at least 1")

        self.archive_path = Path(archive_path)
        self.publish_path = Path(publish_path)
        self.threshold = threshold

        self._message_count = 0
        self._current_file: Optional[Path] = None
        self._writer: Optional[TextIO] = None

        self._open_new_file()

        logger.info(
            "Transcript archive initialized",
            archive_path=str(self.archive_path),
            publish_path=str(self.publish_path),
            threshold=threshold
        )

    @property
    def current_file(self) -> Optional[Path]:
        return self._current_file

    @property
    def message_count(self) -> int:
        return self._message_count

    def _open_new_file(self) -> None:
        self.archive_path.mkdir(parents=True, exist_ok=True)
        self._current_file = self.archive_path / str(uuid.uuid4())
        # newline="" keeps the CRLF endings exactly as written
        self._writer = open(self._current_file, "w", encoding="utf-8", newline="")
        self._message_count = 0

    def append(self, message_id: str, username: str, body: str) -> None:
        """
        Append one message and publish the file once past the threshold.

        Args:
            message_id: Message identifier
            username: Resolved sender name
            body: Message text
        """
        if self._writer is None:
            logger.warning("Transcript archive is closed", message_id=message_id)
            return

        try:
            self._writer.write(format_line(message_id, username, body) + LINE_ENDING)
            self._writer.flush()
        except (OSError, ValueError) as e:
            logger.error(
                "Failed to write transcript line",
                message_id=message_id,
                file=str(self._current_file),
                error=str(e)
            )
            return

        self._message_count += 1
        if self._message_count > self.threshold:
            self.publish()

    def publish(self) -> Optional[Path]:
        """
        Move the working file into the publish directory.

        Returns:
            Path of the published file, or None if publishing failed
        """
        if self._current_file is None:
            logger.warning("No transcript to publish")
            return None

        try:
            self.publish_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(
                "Cannot create publish directory, keeping current transcript",
                publish_path=str(self.publish_path),
                error=str(e)
            )
            return None

        self._close_writer()

        destination = self.publish_path / self._current_file.name
        try:
            shutil.move(str(self._current_file), str(destination))
        except OSError as e:
            logger.error(
                "Failed to publish transcript",
                file=str(self._current_file),
                error=str(e)
            )
            self._reopen_for_append()
            return None

        logger.info(
            "Transcript published",
            file=str(destination),
            messages=self._message_count
        )

        try:
            self._open_new_file()
        except OSError as e:
            logger.error("Failed to start new transcript", error=str(e))
            self._current_file = None
            return destination

        return destination

    def _reopen_for_append(self) -> None:
        try:
            self._writer = open(self._current_file, "a", encoding="utf-8", newline="")
        except OSError as e:
            logger.error(
                "Failed to reopen transcript",
                file=str(self._current_file),
                error=str(e)
            )

    def _close_writer(self) -> None:
        if self._writer is not None:
            try:
                self._writer.close()
            except OSError as e:
                logger.warning("Failed to close transcript", error=str(e))
            self._writer = None

    def close(self) -> None:
        """Flush and close the working file."""
        self._close_writer()
