"""Channel configuration model and channel-lifecycle events."""

import itertools
import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum

from trunkctrl.core.broadcaster import Broadcaster, Listener

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Channel:
    """A decoding channel configuration.

    Attributes:
        id: Model-assigned identifier (0 until added to a model).
        name: Channel name.
        frequency: Center frequency in Hz.
        system: Radio system label.
        site: Site label.
        alias_list: Name of the alias list used to resolve identifiers.
        enabled: Whether the channel should be processing.
    """

    id: int
    name: str
    frequency: int
    system: str = ""
    site: str = ""
    alias_list: str = ""
    enabled: bool = False

    @property
    def display_name(self) -> str:
        """Return ``system/site/name`` without empty parts."""
        return "/".join(part for part in (self.system, self.site, self.name) if part)


class ChannelEventKind(Enum):
    """Channel-lifecycle event kinds."""

    ADD = "add"
    CHANGE = "change"
    REMOVE = "remove"
    REQUEST_ENABLE = "request_enable"
    REQUEST_DISABLE = "request_disable"


@dataclass(frozen=True, slots=True)
class ChannelEvent:
    """A channel-lifecycle notification."""

    channel: Channel
    kind: ChannelEventKind


class ChannelModel:
    """Mutable store of channel configurations.

    Every mutation is announced to channel listeners in registration order.
    """

    def __init__(self) -> None:
        """Initialize an empty model."""
        self._channels: dict[int, Channel] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._broadcaster: Broadcaster[ChannelEvent] = Broadcaster("channel-lifecycle")

    @property
    def channels(self) -> list[Channel]:
        """Return all channels, in insertion order."""
        with self._lock:
            return list(self._channels.values())

    def get_channel(self, channel_id: int) -> Channel | None:
        """Return the channel with ``channel_id``, or None."""
        with self._lock:
            return self._channels.get(channel_id)

    def add_listener(self, listener: Listener[ChannelEvent]) -> None:
        """Register a channel-lifecycle listener."""
        self._broadcaster.add_listener(listener)

    @property
    def broadcaster(self) -> Broadcaster[ChannelEvent]:
        """Return the channel-lifecycle broadcaster."""
        return self._broadcaster

    def add_channel(self, channel: Channel) -> Channel:
        """Add a channel and assign it an identifier.

        Returns:
            The stored channel.
        """
        with self._lock:
            stored = replace(channel, id=next(self._ids))
            self._channels[stored.id] = stored
        logger.debug("Channel added: %s", stored.display_name)
        self._broadcaster.broadcast(ChannelEvent(stored, ChannelEventKind.ADD))
        return stored

    def update_channel(self, channel: Channel) -> None:
        """Replace a stored channel with a changed copy."""
        with self._lock:
            if channel.id not in self._channels:
                logger.warning("Ignoring update for unknown channel %d", channel.id)
                return
            self._channels[channel.id] = channel
        self._broadcaster.broadcast(ChannelEvent(channel, ChannelEventKind.CHANGE))

    def remove_channel(self, channel_id: int) -> bool:
        """Remove a channel.

        Returns:
            True if the channel was removed, False if not found.
        """
        with self._lock:
            channel = self._channels.pop(channel_id, None)
        if channel is None:
            return False
        self._broadcaster.broadcast(ChannelEvent(channel, ChannelEventKind.REMOVE))
        return True

    def set_enabled(self, channel_id: int, enabled: bool) -> None:
        """Request that a channel start or stop processing."""
        with self._lock:
            channel = self._channels.get(channel_id)
            if channel is None:
                logger.warning("Ignoring enable request for unknown channel %d", channel_id)
                return
            channel = replace(channel, enabled=enabled)
            self._channels[channel_id] = channel

        kind = ChannelEventKind.REQUEST_ENABLE if enabled else ChannelEventKind.REQUEST_DISABLE
        self._broadcaster.broadcast(ChannelEvent(channel, kind))
