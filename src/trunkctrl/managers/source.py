"""Tuner channel sources and the audio mixer registry."""

import logging
import threading
from dataclasses import dataclass

from trunkctrl.managers.settings import SettingsManager
from trunkctrl.models.channel import Channel
from trunkctrl.models.tuner import Tuner, TunerEvent, TunerEventKind, TunerModel

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "default"


class MixerOutput:
    """An audio output line."""

    def __init__(self, name: str) -> None:
        """Initialize the output."""
        self.name = name
        self._bytes_written = 0
        self._lock = threading.Lock()

    @property
    def bytes_written(self) -> int:
        """Return the number of PCM bytes written."""
        with self._lock:
            return self._bytes_written

    def write(self, samples: bytes) -> None:
        """Play PCM samples."""
        with self._lock:
            self._bytes_written += len(samples)


class MixerManager:
    """Registry of available audio outputs."""

    def __init__(self, output_names: tuple[str, ...] = (DEFAULT_OUTPUT,)) -> None:
        """Initialize with the given output names."""
        self._outputs = {name: MixerOutput(name) for name in output_names}

    @property
    def output_names(self) -> list[str]:
        """Return the output names."""
        return list(self._outputs)

    def get_output(self, name: str = DEFAULT_OUTPUT) -> MixerOutput | None:
        """Return the output called ``name``, or None."""
        return self._outputs.get(name)


@dataclass(frozen=True, slots=True)
class TunerChannelSource:
    """A tuner allocated to source one channel."""

    tuner: Tuner
    frequency: int


class SourceManager:
    """Allocate tuners to channels."""

    def __init__(self, tuner_model: TunerModel, settings_manager: SettingsManager) -> None:
        """Initialize the source manager.

        Args:
            tuner_model: Registry of available tuners.
            settings_manager: Tuner and display settings.
        """
        self._tuner_model = tuner_model
        self._settings_manager = settings_manager
        self._mixer_manager = MixerManager()
        self._lock = threading.Lock()

    @property
    def mixer_manager(self) -> MixerManager:
        """Return the audio mixer registry."""
        return self._mixer_manager

    def get_source(self, channel: Channel) -> TunerChannelSource | None:
        """Allocate a tuner covering the channel frequency.

        Returns:
            The allocated source, or None if no tuner can take the channel.
        """
        with self._lock:
            tuner = next(
                (t for t in self._tuner_model.tuners if t.can_tune(channel.frequency)), None
            )
            if tuner is None:
                logger.warning(
                    "No tuner available for %s at %.4f MHz",
                    channel.display_name,
                    channel.frequency / 1e6,
                )
                return None
            if tuner.configuration is None:
                configurations = self._settings_manager.tuner_configuration_model
                tuner.configuration = configurations.get_assigned(tuner.tuner_type)
            tuner.channel_count += 1

        self._tuner_model.broadcast(TunerEvent(tuner, TunerEventKind.CHANNEL_COUNT))
        return TunerChannelSource(tuner, channel.frequency)

    def release_source(self, source: TunerChannelSource) -> None:
        """Return a source's tuner capacity."""
        with self._lock:
            source.tuner.channel_count = max(0, source.tuner.channel_count - 1)
        self._tuner_model.broadcast(TunerEvent(source.tuner, TunerEventKind.CHANNEL_COUNT))
