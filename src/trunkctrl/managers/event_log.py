"""Per-channel decode event logs under ``<home>/event_logs``."""

import logging
import re
import threading
from datetime import datetime
from pathlib import Path
from typing import TextIO

from trunkctrl.models.channel import Channel
from trunkctrl.models.message import Message

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def log_file_name(channel: Channel, opened: datetime) -> str:
    """Return the event log file name for a channel."""
    name = _UNSAFE_CHARS.sub("_", channel.display_name).strip("_") or f"channel_{channel.id}"
    return f"{opened:%Y%m%d_%H%M%S}_{name}_events.log"


class EventLogManager:
    """Open, write and close decode event logs.

    Without a log folder (no home directory) every call is a no-op.
    """

    def __init__(self, log_folder: Path | None) -> None:
        """Initialize the manager.

        Args:
            log_folder: Directory for log files, or None to disable logging.
        """
        self._log_folder = log_folder
        self._logs: dict[int, TextIO] = {}
        self._lock = threading.Lock()
        if log_folder is None:
            logger.warning("No event log folder available; decode event logging disabled")

    @property
    def log_folder(self) -> Path | None:
        """Return the log directory."""
        return self._log_folder

    def is_open(self, channel_id: int) -> bool:
        """Return True if a log is open for ``channel_id``."""
        with self._lock:
            return channel_id in self._logs

    def open_log(self, channel: Channel) -> Path | None:
        """Open an event log for a channel.

        Returns:
            Path of the log file, or None if it could not be opened.
        """
        if self._log_folder is None:
            return None

        path = self._log_folder / log_file_name(channel, datetime.now())
        with self._lock:
            if channel.id in self._logs:
                return Path(self._logs[channel.id].name)
            try:
                self._logs[channel.id] = path.open("a", encoding="utf-8")
            except OSError as e:
                logger.error("Couldn't open event log [%s]: %s", path, e)
                return None
        logger.info("Opened event log [%s]", path)
        return path

    def write(self, message: Message) -> None:
        """Append a message to its channel's log, if one is open."""
        aliases = ";".join(alias.name for alias in message.aliases)
        line = f"{message.timestamp:%Y-%m-%d %H:%M:%S},{message.protocol},{message.entity_id},{aliases},{message.text}\n"
        with self._lock:
            log_file = self._logs.get(message.channel_id)
            if log_file is None:
                return
            try:
                log_file.write(line)
                log_file.flush()
            except OSError as e:
                logger.error("Couldn't write event log for channel %d: %s", message.channel_id, e)

    def close_log(self, channel_id: int) -> None:
        """Close a channel's log."""
        with self._lock:
            log_file = self._logs.pop(channel_id, None)
        if log_file is not None:
            log_file.close()

    def close_all(self) -> None:
        """Close every open log."""
        with self._lock:
            logs = list(self._logs.values())
            self._logs.clear()
        for log_file in logs:
            log_file.close()
