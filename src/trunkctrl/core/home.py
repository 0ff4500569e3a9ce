"""Application home directory bootstrap.

The home directory is resolved once per process. When it cannot be created
the resolver reports ``None`` and the rest of the application runs on
built-in defaults.
"""

import logging
import threading
from pathlib import Path

from trunkctrl import APP_NAME

logger = logging.getLogger(__name__)


class HomeDirectoryResolver:
    """Resolve (and create on first run) the persistent home directory.

    Example:
        resolver = HomeDirectoryResolver()
        home = resolver.resolve()
        if home is not None:
            recordings = resolver.application_folder("recordings")
    """

    def __init__(self, user_home: Path | None = None, app_name: str = APP_NAME) -> None:
        """Initialize the resolver.

        Args:
            user_home: Base directory, defaults to the user's home directory.
            app_name: Name of the application sub-directory.
        """
        self._user_home = user_home
        self._app_name = app_name
        self._lock = threading.Lock()
        self._resolved = False
        self._home: Path | None = None
        self._folders: dict[str, Path | None] = {}

    @property
    def candidate(self) -> Path:
        """Return the path the home directory is expected at."""
        base = self._user_home if self._user_home is not None else Path.home()
        return base.expanduser().absolute() / self._app_name

    def resolve(self) -> Path | None:
        """Return the home directory, creating it if absent.

        Creation is attempted at most once per resolver. Later calls return
        the cached outcome.

        Returns:
            Absolute home path, or None if it could not be created.
        """
        with self._lock:
            if not self._resolved:
                self._home = self._create(self.candidate)
                self._resolved = True
            return self._home

    def application_folder(self, name: str) -> Path | None:
        """Return a sub-folder of the home directory, creating it if absent.

        Args:
            name: Folder name relative to the home directory.

        Returns:
            Folder path, or None if home is absent or creation failed.
        """
        home = self.resolve()
        if home is None:
            return None

        with self._lock:
            if name not in self._folders:
                self._folders[name] = self._create(home / name)
            return self._folders[name]

    @staticmethod
    def _create(path: Path) -> Path | None:
        if path.is_dir():
            return path

        try:
            path.mkdir()
            logger.info("Created application directory [%s]", path)
        except FileExistsError:
            # Created concurrently by another process
            if not path.is_dir():
                logger.error("Application directory [%s] exists but is not a directory", path)
                return None
        except OSError as e:
            logger.error("Couldn't create application directory [%s]: %s", path, e)
            return None
        return path
