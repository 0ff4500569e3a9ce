"""Follows the tuner shown on the main spectral display."""

import logging
import threading

from PySide6.QtCore import QObject, Signal

from trunkctrl.managers.channel_processing import ChannelProcessingManager
from trunkctrl.managers.settings import SettingsManager
from trunkctrl.models.channel import Channel, ChannelModel
from trunkctrl.models.tuner import Tuner, TunerEvent, TunerEventKind

logger = logging.getLogger(__name__)


class TunerSpectralDisplayManager(QObject):
    """Track the displayed tuner and the channels visible on it."""

    display_tuner_changed = Signal(object)  # Tuner | None

    def __init__(
        self,
        channel_model: ChannelModel,
        channel_processing_manager: ChannelProcessingManager,
        settings_manager: SettingsManager,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the manager."""
        super().__init__(parent)
        self._channel_model = channel_model
        self._channel_processing_manager = channel_processing_manager
        self._settings_manager = settings_manager
        self._tuner: Tuner | None = None
        self._lock = threading.Lock()

    @property
    def tuner(self) -> Tuner | None:
        """Return the displayed tuner, or None."""
        with self._lock:
            return self._tuner

    @property
    def fft_size(self) -> int:
        """Return the FFT size for the display."""
        return self._settings_manager.get_fft_size()

    def receive(self, event: TunerEvent) -> None:
        """Handle a tuner event."""
        if event.kind is TunerEventKind.REQUEST_MAIN_SPECTRAL_DISPLAY:
            self._show(event.tuner)
        elif event.kind in (TunerEventKind.REMOVE, TunerEventKind.CLEAR_MAIN_SPECTRAL_DISPLAY):
            if self.tuner is event.tuner:
                self._show(None)

    def visible_channels(self) -> list[Channel]:
        """Return the processing channels inside the displayed tuner's range."""
        tuner = self.tuner
        if tuner is None:
            return []
        return [
            channel
            for channel in self._channel_model.channels
            if tuner.min_frequency <= channel.frequency <= tuner.max_frequency
            and self._channel_processing_manager.is_processing(channel.id)
        ]

    def _show(self, tuner: Tuner | None) -> None:
        with self._lock:
            if tuner is self._tuner:
                return
            self._tuner = tuner
        logger.info("Main spectral display tuner: %s", tuner.name if tuner else "(none)")
        self.display_tuner_changed.emit(tuner)
