"""Last known positions of radio entities reported in decoded messages."""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime

from PySide6.QtCore import QObject, Signal

from trunkctrl.models.icon import DEFAULT_ICON, IconManager
from trunkctrl.models.message import Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlottableEntity:
    """A located radio entity.

    Attributes:
        id: Entity identifier (alias name when aliased).
        latitude: Latitude in degrees.
        longitude: Longitude in degrees.
        icon_path: Map icon image.
        protocol: Protocol of the reporting message.
        timestamp: Time of the report.
    """

    id: str
    latitude: float
    longitude: float
    icon_path: str
    protocol: str
    timestamp: datetime


class MapService(QObject):
    """Collect located entities for the map view."""

    entity_updated = Signal(object)  # PlottableEntity

    def __init__(self, icon_manager: IconManager, parent: QObject | None = None) -> None:
        """Initialize the map service."""
        super().__init__(parent)
        self._icon_manager = icon_manager
        self._entities: dict[str, PlottableEntity] = {}
        self._lock = threading.Lock()

    @property
    def entities(self) -> list[PlottableEntity]:
        """Return all located entities."""
        with self._lock:
            return list(self._entities.values())

    def get_entity(self, entity_id: str) -> PlottableEntity | None:
        """Return the entity with ``entity_id``, or None."""
        with self._lock:
            return self._entities.get(entity_id)

    def receive(self, message: Message) -> None:
        """Record the location carried by a message, if any."""
        if not message.has_location:
            return

        alias = message.aliases[0] if message.aliases else None
        entity_id = alias.name if alias else message.entity_id
        if not entity_id:
            logger.debug("Ignoring location without entity from %s", message.protocol)
            return

        entity = PlottableEntity(
            id=entity_id,
            latitude=message.latitude,  # type: ignore[arg-type]
            longitude=message.longitude,  # type: ignore[arg-type]
            icon_path=self._icon_manager.get_icon_path(alias.icon if alias and alias.icon else DEFAULT_ICON),
            protocol=message.protocol,
            timestamp=message.timestamp,
        )
        with self._lock:
            self._entities[entity_id] = entity
        self.entity_updated.emit(entity)
