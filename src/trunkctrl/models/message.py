"""Decoded messages produced by channel processing."""

from dataclasses import dataclass, field
from datetime import datetime

from trunkctrl.models.alias import Alias


@dataclass(frozen=True, slots=True)
class Message:
    """A decoded message.

    Attributes:
        channel_id: Producing channel identifier.
        protocol: Decoder protocol name.
        text: Human-readable message summary.
        entity_id: Radio/unit identifier the message is about.
        aliases: Aliases resolved for the identifiers in the message.
        latitude: Reported latitude, if the message carries a location.
        longitude: Reported longitude, if the message carries a location.
        timestamp: Decode time.
    """

    channel_id: int
    protocol: str
    text: str
    entity_id: str = ""
    aliases: tuple[Alias, ...] = ()
    latitude: float | None = None
    longitude: float | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def has_location(self) -> bool:
        """Return True if the message carries coordinates."""
        return self.latitude is not None and self.longitude is not None
