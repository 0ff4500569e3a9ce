"""Process-wide key/value configuration backed by a properties file.

QSettings stores the values in IniFormat at ``<home>/TrunkCTRL.properties``.
Flat ``key=value`` lines without a section header are read as top-level keys,
and a value with unquoted commas is read back as the original text.

Writes go through QSettings, so the file gains a ``[General]`` header and
values are escaped the INI way: ``a,b`` is saved as ``"a,b"`` and a
leading ``@`` is doubled. QSettings reads both back unchanged.
"""

import logging
import threading
from pathlib import Path

from PySide6.QtCore import QSettings

from trunkctrl import APP_NAME

logger = logging.getLogger(__name__)

# Settings keys
KEY_BROADCAST_STATUS_VISIBLE = "main.broadcast.status.visible"
KEY_APPLICATION_NAME = "main.application.name"

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


def properties_path(home: Path, app_name: str = APP_NAME) -> Path:
    """Return the properties file location inside a home directory."""
    return home / f"{app_name}.properties"


def _coerce(value: object, default: object) -> object:
    """Convert a stored value to the type of ``default``.

    Raises:
        ValueError: If the value cannot be represented as that type.
    """
    if default is None or isinstance(value, type(default)):
        return value
    if isinstance(default, bool):
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"not a boolean: {value!r}")
    if isinstance(default, int):
        return int(str(value).strip())
    if isinstance(default, float):
        return float(str(value).strip())
    if isinstance(default, str):
        return str(value)
    raise ValueError(f"unsupported default type {type(default).__name__}")


class ConfigStore:
    """Typed access to the application properties.

    A store that was never loaded, or whose file could not be created or
    read, works in memory-only mode: ``set`` values live for the rest of the
    process and ``get`` falls back to the caller's default.

    Example:
        config = ConfigStore()
        config.load(properties_path(home))
        visible = config.get(KEY_BROADCAST_STATUS_VISIBLE, False)
        config.set(KEY_BROADCAST_STATUS_VISIBLE, True)
    """

    def __init__(self) -> None:
        """Initialize an empty, memory-only store."""
        self._lock = threading.RLock()
        self._values: dict[str, object] = {}
        self._settings: QSettings | None = None
        self._path: Path | None = None

    @property
    def path(self) -> Path | None:
        """Return the backing properties file, or None in memory-only mode."""
        return self._path

    @property
    def is_persistent(self) -> bool:
        """Return True if values are written through to disk."""
        return self._settings is not None

    def load(self, path: Path) -> bool:
        """Load the properties file, creating it empty if missing.

        Args:
            path: Location of the properties file.

        Returns:
            True if the store is now backed by the file, False if it stays
            in memory-only mode.
        """
        with self._lock:
            if not path.exists():
                try:
                    logger.info("Creating application properties file [%s]", path)
                    path.touch(exist_ok=True)
                except OSError as e:
                    logger.error("Couldn't create application properties file [%s]: %s", path, e)
                    return False

            settings = QSettings(str(path), QSettings.Format.IniFormat)
            if settings.status() != QSettings.Status.NoError:
                logger.error(
                    "Couldn't read application properties file [%s]: %s", path, settings.status()
                )
                return False

            for key in settings.allKeys():
                value = settings.value(key)
                # Unquoted commas read back as a string list
                self._values[key] = ",".join(value) if isinstance(value, list) else value

            self._settings = settings
            self._path = path
            logger.info("Loaded %d application properties from [%s]", len(self._values), path)
            return True

    def get(self, key: str, default: object = None) -> object:
        """Return the value for ``key`` coerced to the type of ``default``.

        Never raises: a missing or malformed value yields ``default``.
        """
        with self._lock:
            if key not in self._values:
                return default
            value = self._values[key]

        try:
            return _coerce(value, default)
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring invalid value for property %s: %s", key, e)
            return default

    def set(self, key: str, value: str | bool | int | float) -> None:
        """Store a value and write it through to the properties file.

        A failed write is logged; the in-memory value stays authoritative.
        """
        with self._lock:
            self._values[key] = value
            if self._settings is None:
                return

            self._settings.setValue(key, value)
            self._settings.sync()
            status = self._settings.status()
            if status != QSettings.Status.NoError:
                logger.error("Couldn't persist property %s to [%s]: %s", key, self._path, status)

    def contains(self, key: str) -> bool:
        """Return True if a value is stored for ``key``."""
        with self._lock:
            return key in self._values

    def keys(self) -> list[str]:
        """Return all stored keys, sorted."""
        with self._lock:
            return sorted(self._values)

    def log_current_settings(self) -> None:
        """Log every stored property."""
        with self._lock:
            items = sorted(self._values.items())

        if not items:
            logger.info("Application properties: (none)")
            return
        for key, value in items:
            logger.info("Property %s = %s", key, value)
