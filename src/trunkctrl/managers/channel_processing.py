"""Channel processing: starts and stops decoding as channels change.

The manager listens to channel-lifecycle events and owns two outgoing event
families, audio packets and decoded messages. The decoding pipeline feeds
both through ``broadcast_audio_packet`` and ``broadcast_message``.
"""

import logging
import threading
from dataclasses import dataclass, replace

from PySide6.QtCore import QObject, Signal

from trunkctrl.core.broadcaster import Broadcaster, Listener
from trunkctrl.managers.event_log import EventLogManager
from trunkctrl.managers.recorder import RecorderManager
from trunkctrl.managers.source import SourceManager, TunerChannelSource
from trunkctrl.models.alias import Alias, AliasModel
from trunkctrl.models.audio import AudioPacket
from trunkctrl.models.channel import Channel, ChannelEvent, ChannelEventKind, ChannelModel
from trunkctrl.models.channel_map import ChannelMapModel
from trunkctrl.models.message import Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessingChannel:
    """A channel that is being decoded."""

    channel: Channel
    source: TunerChannelSource


class ChannelProcessingManager(QObject):
    """Run decoding for enabled channels and fan out their output.

    Example:
        manager = ChannelProcessingManager(
            channel_model, channel_map_model, alias_model,
            event_log_manager, recorder_manager, source_manager,
        )
        channel_model.add_listener(manager)
        manager.add_audio_packet_listener(recorder_manager)
        manager.add_message_listener(alias_action_manager)
    """

    processing_started = Signal(object)  # Channel
    processing_stopped = Signal(object)  # Channel

    def __init__(
        self,
        channel_model: ChannelModel,
        channel_map_model: ChannelMapModel,
        alias_model: AliasModel,
        event_log_manager: EventLogManager,
        recorder_manager: RecorderManager,
        source_manager: SourceManager,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the manager."""
        super().__init__(parent)
        self._channel_model = channel_model
        self._channel_map_model = channel_map_model
        self._alias_model = alias_model
        self._event_log_manager = event_log_manager
        self._recorder_manager = recorder_manager
        self._source_manager = source_manager
        self._processing: dict[int, ProcessingChannel] = {}
        self._lock = threading.RLock()
        self._audio_packets: Broadcaster[AudioPacket] = Broadcaster("audio-packet")
        self._messages: Broadcaster[Message] = Broadcaster("message")

    # -- Listener registration -------------------------------------------------

    def add_audio_packet_listener(self, listener: Listener[AudioPacket]) -> None:
        """Register an audio packet listener."""
        self._audio_packets.add_listener(listener)

    def add_message_listener(self, listener: Listener[Message]) -> None:
        """Register a decoded message listener."""
        self._messages.add_listener(listener)

    @property
    def audio_packet_broadcaster(self) -> Broadcaster[AudioPacket]:
        """Return the audio packet broadcaster."""
        return self._audio_packets

    @property
    def message_broadcaster(self) -> Broadcaster[Message]:
        """Return the decoded message broadcaster."""
        return self._messages

    # -- Processing state ------------------------------------------------------

    def is_processing(self, channel_id: int) -> bool:
        """Return True if the channel is being decoded."""
        with self._lock:
            return channel_id in self._processing

    @property
    def processing_channels(self) -> list[Channel]:
        """Return the channels being decoded."""
        with self._lock:
            return [p.channel for p in self._processing.values()]

    def receive(self, event: ChannelEvent) -> None:
        """Handle a channel-lifecycle event."""
        channel = event.channel
        if event.kind is ChannelEventKind.ADD:
            if channel.enabled:
                self._start(channel)
        elif event.kind is ChannelEventKind.REQUEST_ENABLE:
            self._start(channel)
        elif event.kind in (ChannelEventKind.REQUEST_DISABLE, ChannelEventKind.REMOVE):
            self._stop(channel)
        elif event.kind is ChannelEventKind.CHANGE:
            self._restart_if_retuned(channel)

    def _start(self, channel: Channel) -> None:
        with self._lock:
            if channel.id in self._processing:
                return
            source = self._source_manager.get_source(channel)
            if source is None:
                logger.warning("Couldn't start processing %s: no source", channel.display_name)
                return
            self._processing[channel.id] = ProcessingChannel(channel, source)

        self._event_log_manager.open_log(channel)
        logger.info("Started processing %s", channel.display_name)
        self.processing_started.emit(channel)

    def _stop(self, channel: Channel) -> None:
        with self._lock:
            processing = self._processing.pop(channel.id, None)
        if processing is None:
            return

        self._source_manager.release_source(processing.source)
        self._event_log_manager.close_log(channel.id)
        self._recorder_manager.close_channel(channel.id)
        logger.info("Stopped processing %s", channel.display_name)
        self.processing_stopped.emit(channel)

    def _restart_if_retuned(self, channel: Channel) -> None:
        with self._lock:
            processing = self._processing.get(channel.id)
            if processing is None:
                return
            if processing.channel.frequency == channel.frequency:
                self._processing[channel.id] = replace(processing, channel=channel)
                return
        logger.info("Retuning %s", channel.display_name)
        self._stop(processing.channel)
        self._start(channel)

    # -- Decoder output --------------------------------------------------------

    def resolve_frequency(self, channel_map: str, channel_number: int) -> int:
        """Translate a trunked channel number through a channel map.

        Returns:
            Frequency in Hz, or 0 if the map or channel number is unknown.
        """
        mapping = self._channel_map_model.get_channel_map(channel_map)
        if mapping is None:
            logger.debug("Unknown channel map %s", channel_map)
            return 0
        return mapping.get_frequency(channel_number)

    def resolve_alias(self, channel_id: int, identifier: str) -> Alias | None:
        """Look up ``identifier`` in the alias list of a channel."""
        channel = self._channel_model.get_channel(channel_id)
        if channel is None or not channel.alias_list:
            return None
        return self._alias_model.lookup(channel.alias_list, identifier)

    def broadcast_audio_packet(self, packet: AudioPacket) -> None:
        """Deliver an audio packet to every audio packet listener."""
        self._audio_packets.broadcast(packet)

    def broadcast_message(self, message: Message) -> None:
        """Log a decoded message and deliver it to every message listener.

        Messages without aliases get the alias of their entity, if any.
        """
        if not message.aliases and message.entity_id:
            alias = self.resolve_alias(message.channel_id, message.entity_id)
            if alias is not None:
                message = replace(message, aliases=(alias,))
        self._event_log_manager.write(message)
        self._messages.broadcast(message)

    def shutdown(self) -> None:
        """Stop processing every channel."""
        for channel in self.processing_channels:
            self._stop(channel)
