"""Channel maps: channel number to frequency translation tables."""

import threading
from dataclasses import dataclass

from trunkctrl.core.broadcaster import Broadcaster, Listener
from trunkctrl.models.model_event import ModelEvent, ModelEventKind


@dataclass(frozen=True, slots=True)
class ChannelRange:
    """A linear block of channel numbers.

    Attributes:
        first: First channel number in the block.
        last: Last channel number in the block.
        base: Frequency of ``first`` in Hz.
        step: Spacing between channels in Hz.
    """

    first: int
    last: int
    base: int
    step: int = 12_500

    def contains(self, channel_number: int) -> bool:
        """Return True if ``channel_number`` falls in this block."""
        return self.first <= channel_number <= self.last

    def frequency(self, channel_number: int) -> int:
        """Return the frequency of ``channel_number`` in Hz."""
        return self.base + (channel_number - self.first) * self.step


@dataclass(frozen=True, slots=True)
class ChannelMap:
    """A named set of channel ranges."""

    name: str
    ranges: tuple[ChannelRange, ...] = ()

    def get_frequency(self, channel_number: int) -> int:
        """Return the frequency for ``channel_number``, or 0 if unmapped."""
        for channel_range in self.ranges:
            if channel_range.contains(channel_number):
                return channel_range.frequency(channel_number)
        return 0


class ChannelMapModel:
    """Mutable store of channel maps."""

    def __init__(self) -> None:
        """Initialize an empty model."""
        self._maps: dict[str, ChannelMap] = {}
        self._lock = threading.Lock()
        self._broadcaster: Broadcaster[ModelEvent] = Broadcaster("channel-map")

    @property
    def channel_maps(self) -> list[ChannelMap]:
        """Return all channel maps."""
        with self._lock:
            return list(self._maps.values())

    def add_listener(self, listener: Listener[ModelEvent]) -> None:
        """Register a channel map change listener."""
        self._broadcaster.add_listener(listener)

    def add_channel_map(self, channel_map: ChannelMap) -> None:
        """Add or replace a channel map by name."""
        with self._lock:
            kind = ModelEventKind.CHANGE if channel_map.name in self._maps else ModelEventKind.ADD
            self._maps[channel_map.name] = channel_map
        self._broadcaster.broadcast(ModelEvent("channel-map", kind, channel_map))

    def get_channel_map(self, name: str) -> ChannelMap | None:
        """Return the channel map called ``name``, or None."""
        with self._lock:
            return self._maps.get(name)
