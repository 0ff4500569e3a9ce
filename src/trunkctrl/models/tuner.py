"""Tuner configurations, tuner registry and tuner events."""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum

from trunkctrl.core.broadcaster import Broadcaster, Listener
from trunkctrl.models.model_event import ModelEvent, ModelEventKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TunerConfiguration:
    """Named settings for a tuner type.

    Attributes:
        name: Configuration name.
        tuner_type: Tuner hardware type this configuration applies to.
        frequency: Default center frequency in Hz.
        sample_rate: Sample rate in Hz.
        assigned: Whether this is the active configuration for its type.
    """

    name: str
    tuner_type: str
    frequency: int = 100_000_000
    sample_rate: int = 2_400_000
    assigned: bool = False


class TunerConfigurationModel:
    """Store of tuner configurations, one assigned per tuner type."""

    def __init__(self) -> None:
        """Initialize an empty model."""
        self._configurations: list[TunerConfiguration] = []
        self._lock = threading.Lock()
        self._broadcaster: Broadcaster[ModelEvent] = Broadcaster("tuner-configuration")

    @property
    def configurations(self) -> list[TunerConfiguration]:
        """Return all configurations."""
        with self._lock:
            return list(self._configurations)

    def add_listener(self, listener: Listener[ModelEvent]) -> None:
        """Register a configuration change listener."""
        self._broadcaster.add_listener(listener)

    def add_configuration(self, configuration: TunerConfiguration) -> None:
        """Add a configuration."""
        with self._lock:
            self._configurations.append(configuration)
        self._broadcaster.broadcast(
            ModelEvent("tuner-configuration", ModelEventKind.ADD, configuration)
        )

    def get_assigned(self, tuner_type: str) -> TunerConfiguration | None:
        """Return the assigned configuration for a tuner type, or None."""
        with self._lock:
            for configuration in self._configurations:
                if configuration.tuner_type == tuner_type and configuration.assigned:
                    return configuration
        return None


@dataclass(slots=True)
class Tuner:
    """A tuner source.

    Attributes:
        name: Display name.
        tuner_type: Hardware type, used to look up its configuration.
        min_frequency: Lowest tunable frequency in Hz.
        max_frequency: Highest tunable frequency in Hz.
        max_channels: Maximum number of channels it can source at once.
        configuration: Applied configuration, if any.
        channel_count: Number of channels currently sourced.
    """

    name: str
    tuner_type: str
    min_frequency: int
    max_frequency: int
    max_channels: int = 8
    configuration: TunerConfiguration | None = None
    channel_count: int = field(default=0)

    def can_tune(self, frequency: int) -> bool:
        """Return True if ``frequency`` is in range and capacity is left."""
        return (
            self.min_frequency <= frequency <= self.max_frequency
            and self.channel_count < self.max_channels
        )


class TunerEventKind(Enum):
    """Tuner event kinds."""

    ADD = "add"
    REMOVE = "remove"
    CHANNEL_COUNT = "channel_count"
    REQUEST_MAIN_SPECTRAL_DISPLAY = "request_main_spectral_display"
    CLEAR_MAIN_SPECTRAL_DISPLAY = "clear_main_spectral_display"


@dataclass(frozen=True, slots=True)
class TunerEvent:
    """A tuner notification."""

    tuner: Tuner
    kind: TunerEventKind


class TunerModel:
    """Registry of available tuners."""

    def __init__(self, configuration_model: TunerConfigurationModel) -> None:
        """Initialize the model.

        Args:
            configuration_model: Source of per-type tuner configurations.
        """
        self._configuration_model = configuration_model
        self._tuners: list[Tuner] = []
        self._lock = threading.Lock()
        self._broadcaster: Broadcaster[TunerEvent] = Broadcaster("tuner")

    @property
    def tuners(self) -> list[Tuner]:
        """Return all registered tuners."""
        with self._lock:
            return list(self._tuners)

    def add_listener(self, listener: Listener[TunerEvent]) -> None:
        """Register a tuner event listener."""
        self._broadcaster.add_listener(listener)

    @property
    def broadcaster(self) -> Broadcaster[TunerEvent]:
        """Return the tuner event broadcaster."""
        return self._broadcaster

    def broadcast(self, event: TunerEvent) -> None:
        """Deliver a tuner event to all tuner listeners."""
        self._broadcaster.broadcast(event)

    def add_tuner(self, tuner: Tuner) -> None:
        """Register a tuner and apply its assigned configuration."""
        configuration = self._configuration_model.get_assigned(tuner.tuner_type)
        if configuration is not None:
            tuner.configuration = configuration
            logger.info("Applied tuner configuration %s to %s", configuration.name, tuner.name)
        with self._lock:
            self._tuners.append(tuner)
        self.broadcast(TunerEvent(tuner, TunerEventKind.ADD))

    def remove_tuner(self, tuner: Tuner) -> None:
        """Unregister a tuner."""
        with self._lock:
            if tuner not in self._tuners:
                return
            self._tuners.remove(tuner)
        self.broadcast(TunerEvent(tuner, TunerEventKind.REMOVE))

    def request_first_tuner_display(self) -> None:
        """Ask for the first tuner to be shown on the main spectral display."""
        with self._lock:
            first = self._tuners[0] if self._tuners else None
        if first is None:
            logger.info("No tuners available for the main spectral display")
            return
        self.broadcast(TunerEvent(first, TunerEventKind.REQUEST_MAIN_SPECTRAL_DISPLAY))
