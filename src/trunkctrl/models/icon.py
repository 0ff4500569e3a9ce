"""Icon registry shared by the broadcast model and the map service."""

import logging
import threading

logger = logging.getLogger(__name__)

DEFAULT_ICON = "default"

_BUILTIN_ICONS = {
    DEFAULT_ICON: "icons/no_icon.png",
    "radio": "icons/radio.png",
    "police": "icons/police.png",
    "fire": "icons/fire_truck.png",
    "ambulance": "icons/ambulance.png",
    "broadcast": "icons/broadcast.png",
}


class IconManager:
    """Map icon names to image paths."""

    def __init__(self) -> None:
        """Initialize with the built-in icon set."""
        self._icons = dict(_BUILTIN_ICONS)
        self._lock = threading.Lock()

    @property
    def names(self) -> list[str]:
        """Return all icon names, sorted."""
        with self._lock:
            return sorted(self._icons)

    def add_icon(self, name: str, path: str) -> None:
        """Register or replace an icon."""
        with self._lock:
            self._icons[name] = path

    def get_icon_path(self, name: str) -> str:
        """Return the image path for ``name``, or the default icon's path."""
        with self._lock:
            path = self._icons.get(name)
            if path is None:
                logger.debug("Unknown icon %r, using default", name)
                return self._icons[DEFAULT_ICON]
            return path
