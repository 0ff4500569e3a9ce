"""Routes channel audio to the mixer output, one call at a time."""

import logging
import threading
from collections import deque

from PySide6.QtCore import QObject, Signal

from trunkctrl.managers.source import DEFAULT_OUTPUT, MixerManager, MixerOutput
from trunkctrl.models.audio import AudioPacket

logger = logging.getLogger(__name__)


class AudioManager(QObject):
    """Play the active channel and queue audio from the others.

    The first channel to deliver audio owns the output until its END
    packet. Audio from other channels is held and played, in arrival order,
    once the output is free.
    """

    active_channel_changed = Signal(object)  # channel name or None

    def __init__(
        self,
        mixer_manager: MixerManager,
        output_name: str = DEFAULT_OUTPUT,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the audio manager.

        Args:
            mixer_manager: Audio output registry.
            output_name: Output to play on.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._mixer_manager = mixer_manager
        self._output_name = output_name
        self._active: int | None = None
        self._pending: dict[int, deque[AudioPacket]] = {}
        self._lock = threading.Lock()

    @property
    def active_channel_id(self) -> int | None:
        """Return the channel holding the output, or None."""
        with self._lock:
            return self._active

    def pending_count(self, channel_id: int) -> int:
        """Return the number of packets held for ``channel_id``."""
        with self._lock:
            return len(self._pending.get(channel_id, ()))

    def receive(self, packet: AudioPacket) -> None:
        """Play or hold an audio packet."""
        output = self._mixer_manager.get_output(self._output_name)
        if output is None:
            logger.error("Audio output %s not available", self._output_name)
            return

        announce: list[str | None] = []
        with self._lock:
            if self._active is None and not packet.is_end:
                self._active = packet.channel_id
                announce.append(packet.channel_name)

            if packet.channel_id != self._active:
                if packet.is_end and packet.channel_id not in self._pending:
                    # End of a call that never produced audio here
                    return
                self._pending.setdefault(packet.channel_id, deque()).append(packet)
            elif packet.is_end:
                self._active = None
                announce.append(None)
                self._promote_pending(output, announce)
            else:
                output.write(packet.samples)

        for name in announce:
            self.active_channel_changed.emit(name)

    def _promote_pending(self, output: MixerOutput, announce: list[str | None]) -> None:
        """Hand the output to the oldest held call. Caller holds the lock."""
        while self._pending:
            channel_id = next(iter(self._pending))
            held = self._pending.pop(channel_id)
            audio = [p for p in held if not p.is_end]
            if not audio:
                continue
            self._active = channel_id
            announce.append(audio[0].channel_name)
            for packet in audio:
                output.write(packet.samples)
            if held[-1].is_end:
                self._active = None
                announce.append(None)
                continue
            return
