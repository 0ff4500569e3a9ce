"""Demodulated audio packets produced by channel processing."""

from dataclasses import dataclass
from enum import Enum

# 16-bit mono PCM
SAMPLE_RATE = 8000
SAMPLE_WIDTH = 2


class AudioPacketKind(Enum):
    """Audio packet kinds."""

    AUDIO = "audio"
    END = "end"


@dataclass(frozen=True, slots=True)
class AudioPacket:
    """A block of audio from one channel.

    Attributes:
        channel_id: Producing channel identifier.
        channel_name: Producing channel display name.
        kind: AUDIO for samples, END when the call/transmission ends.
        samples: Little-endian 16-bit PCM samples.
        recordable: Whether the audio should be recorded.
        broadcast_streams: Names of broadcast streams that carry this audio.
    """

    channel_id: int
    channel_name: str
    kind: AudioPacketKind = AudioPacketKind.AUDIO
    samples: bytes = b""
    recordable: bool = False
    broadcast_streams: tuple[str, ...] = ()

    @property
    def is_end(self) -> bool:
        """Return True for end-of-audio packets."""
        return self.kind is AudioPacketKind.END
