"""Tracks which processing channel the user has selected."""

import logging
import threading

from PySide6.QtCore import QObject, Signal

from trunkctrl.managers.channel_processing import ChannelProcessingManager
from trunkctrl.models.channel import Channel, ChannelEvent, ChannelEventKind, ChannelModel

logger = logging.getLogger(__name__)


class ChannelSelectionManager(QObject):
    """Hold the selected channel and drop the selection when it goes away.

    Registered on the channel model after the channel processing manager,
    so by the time an event arrives here processing has already reacted.
    """

    selection_changed = Signal(object)  # Channel | None

    def __init__(
        self,
        channel_model: ChannelModel,
        channel_processing_manager: ChannelProcessingManager,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the manager."""
        super().__init__(parent)
        self._channel_model = channel_model
        self._channel_processing_manager = channel_processing_manager
        self._selected: Channel | None = None
        self._lock = threading.Lock()

    @property
    def selected(self) -> Channel | None:
        """Return the selected channel, or None."""
        with self._lock:
            return self._selected

    def select(self, channel_id: int) -> bool:
        """Select a processing channel.

        Returns:
            True if selected, False if the channel is unknown or not processing.
        """
        channel = self._channel_model.get_channel(channel_id)
        if channel is None or not self._channel_processing_manager.is_processing(channel_id):
            logger.warning("Can't select channel %d: not processing", channel_id)
            return False
        self._set(channel)
        return True

    def clear(self) -> None:
        """Clear the selection."""
        self._set(None)

    def receive(self, event: ChannelEvent) -> None:
        """Follow changes to the selected channel."""
        selected = self.selected
        if selected is None or event.channel.id != selected.id:
            return

        if event.kind is ChannelEventKind.REMOVE:
            self._set(None)
        elif not self._channel_processing_manager.is_processing(selected.id):
            self._set(None)
        elif event.kind is ChannelEventKind.CHANGE:
            self._set(event.channel)

    def _set(self, channel: Channel | None) -> None:
        with self._lock:
            if channel == self._selected:
                return
            self._selected = channel
        self.selection_changed.emit(channel)
