"""Persisted visibility of optional UI panels.

Threading: ``toggle()`` must be called on the thread that owns the state
object (the GUI thread). The new state is published with the
``visibility_changed`` signal, delivered as a single synchronous call to
receivers living on the same thread.
"""

import logging

from PySide6.QtCore import QObject, Signal

from trunkctrl.core.config import KEY_BROADCAST_STATUS_VISIBLE, ConfigStore

logger = logging.getLogger(__name__)


class PersistedUIState(QObject):
    """A Visible/Hidden flag mirrored to one configuration key.

    Example:
        state = PersistedUIState(config)
        state.visibility_changed.connect(panel.setVisible)
        state.toggle()
    """

    visibility_changed = Signal(bool)  # True=Visible, False=Hidden

    def __init__(
        self,
        config: ConfigStore,
        key: str = KEY_BROADCAST_STATUS_VISIBLE,
        parent: QObject | None = None,
    ) -> None:
        """Initialize from the stored value (default Hidden).

        Args:
            config: Application properties.
            key: Configuration key holding the flag.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._config = config
        self._key = key
        self._visible = bool(config.get(key, False))

    @property
    def key(self) -> str:
        """Return the configuration key."""
        return self._key

    @property
    def visible(self) -> bool:
        """Return True in the Visible state."""
        return self._visible

    def toggle(self) -> bool:
        """Flip the state, notify, then persist.

        Returns:
            The new state.
        """
        self._visible = not self._visible
        logger.debug("%s -> %s", self._key, "visible" if self._visible else "hidden")
        self.visibility_changed.emit(self._visible)
        self._config.set(self._key, self._visible)
        return self._visible
