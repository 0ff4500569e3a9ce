"""Tracks unsaved changes across the playlist models."""

import logging
import threading

from trunkctrl.models.alias import AliasModel
from trunkctrl.models.broadcast import BroadcastModel
from trunkctrl.models.channel import ChannelEvent, ChannelModel
from trunkctrl.models.channel_map import ChannelMapModel
from trunkctrl.models.model_event import ModelEvent

logger = logging.getLogger(__name__)


class PlaylistManager:
    """Aggregate change notifications from every playlist model.

    ``init()`` subscribes to the models; any later alias, broadcast,
    channel or channel map change marks the playlist dirty.
    """

    def __init__(
        self,
        alias_model: AliasModel,
        broadcast_model: BroadcastModel,
        channel_model: ChannelModel,
        channel_map_model: ChannelMapModel,
    ) -> None:
        """Initialize the manager."""
        self._alias_model = alias_model
        self._broadcast_model = broadcast_model
        self._channel_model = channel_model
        self._channel_map_model = channel_map_model
        self._initialized = False
        self._dirty = False
        self._change_count = 0
        self._lock = threading.Lock()

    @property
    def is_dirty(self) -> bool:
        """Return True if models changed since the last save."""
        with self._lock:
            return self._dirty

    @property
    def change_count(self) -> int:
        """Return the number of changes seen since ``init()``."""
        with self._lock:
            return self._change_count

    def init(self) -> None:
        """Subscribe to model changes. Later calls are ignored."""
        with self._lock:
            if self._initialized:
                return
            self._initialized = True

        self._alias_model.add_listener(self._on_model_event)
        self._broadcast_model.add_listener(self._on_model_event)
        self._channel_map_model.add_listener(self._on_model_event)
        self._channel_model.add_listener(self._on_channel_event)
        logger.info(
            "Playlist loaded: %d channels, %d aliases, %d channel maps, %d streams",
            len(self._channel_model.channels),
            len(self._alias_model.aliases),
            len(self._channel_map_model.channel_maps),
            len(self._broadcast_model.configurations),
        )

    def mark_saved(self) -> None:
        """Clear the dirty flag."""
        with self._lock:
            self._dirty = False

    def _on_model_event(self, event: ModelEvent) -> None:
        self._mark_dirty(event.model)

    def _on_channel_event(self, event: ChannelEvent) -> None:
        # Enable/disable requests change the persisted enabled flag too
        self._mark_dirty(f"channel {event.kind.value}")

    def _mark_dirty(self, source: str) -> None:
        with self._lock:
            self._dirty = True
            self._change_count += 1
        logger.debug("Playlist changed: %s", source)
