"""Audio streaming configurations and their live status.

The model receives every audio packet from channel processing and counts
what each configured stream would carry. Stream status changes are
published with a Qt signal for the status panel.
"""

import logging
import threading
from dataclasses import dataclass, replace

from PySide6.QtCore import QObject, Signal

from trunkctrl.core.broadcaster import Broadcaster, Listener
from trunkctrl.models.audio import AudioPacket
from trunkctrl.models.icon import IconManager
from trunkctrl.models.model_event import ModelEvent, ModelEventKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BroadcastConfiguration:
    """An audio streaming destination.

    Attributes:
        name: Stream name, referenced by aliases.
        host: Streaming server host.
        port: Streaming server port.
        enabled: Whether the stream is active.
        icon: Icon name for the status view.
    """

    name: str
    host: str = ""
    port: int = 0
    enabled: bool = True
    icon: str = "broadcast"


@dataclass(frozen=True, slots=True)
class BroadcastStatus:
    """Counters for one stream."""

    name: str
    packets: int = 0
    calls: int = 0


class BroadcastModel(QObject):
    """Broadcast configurations and per-stream status.

    Example:
        model = BroadcastModel(icon_manager)
        model.add_configuration(BroadcastConfiguration("county-fire"))
        model.status_changed.connect(lambda status: print(status))
    """

    status_changed = Signal(object)  # BroadcastStatus

    def __init__(self, icon_manager: IconManager, parent: QObject | None = None) -> None:
        """Initialize the model.

        Args:
            icon_manager: Resolves stream icons.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._icon_manager = icon_manager
        self._configurations: dict[str, BroadcastConfiguration] = {}
        self._statuses: dict[str, BroadcastStatus] = {}
        self._lock = threading.Lock()
        self._broadcaster: Broadcaster[ModelEvent] = Broadcaster("broadcast")

    @property
    def configurations(self) -> list[BroadcastConfiguration]:
        """Return all configurations."""
        with self._lock:
            return list(self._configurations.values())

    def add_listener(self, listener: Listener[ModelEvent]) -> None:
        """Register a configuration change listener."""
        self._broadcaster.add_listener(listener)

    def add_configuration(self, configuration: BroadcastConfiguration) -> None:
        """Add or replace a stream configuration."""
        with self._lock:
            exists = configuration.name in self._configurations
            self._configurations[configuration.name] = configuration
            self._statuses.setdefault(configuration.name, BroadcastStatus(configuration.name))
        kind = ModelEventKind.CHANGE if exists else ModelEventKind.ADD
        self._broadcaster.broadcast(ModelEvent("broadcast", kind, configuration))

    def get_status(self, name: str) -> BroadcastStatus | None:
        """Return the status of stream ``name``, or None if unknown."""
        with self._lock:
            return self._statuses.get(name)

    def get_icon_path(self, name: str) -> str:
        """Return the icon path for stream ``name``."""
        with self._lock:
            configuration = self._configurations.get(name)
        icon = configuration.icon if configuration else "broadcast"
        return self._icon_manager.get_icon_path(icon)

    def receive(self, packet: AudioPacket) -> None:
        """Count an audio packet against every enabled stream it targets."""
        changed: list[BroadcastStatus] = []
        with self._lock:
            for name in packet.broadcast_streams:
                configuration = self._configurations.get(name)
                if configuration is None or not configuration.enabled:
                    continue
                status = self._statuses[name]
                if packet.is_end:
                    status = replace(status, calls=status.calls + 1)
                    changed.append(status)
                else:
                    status = replace(status, packets=status.packets + 1)
                self._statuses[name] = status

        for status in changed:
            logger.debug("Stream %s finished call %d", status.name, status.calls)
            self.status_changed.emit(status)
