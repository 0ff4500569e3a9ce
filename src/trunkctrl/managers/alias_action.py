"""Runs alias actions for aliased identifiers in decoded messages."""

import logging
import threading
import time

from trunkctrl.models.alias import Alias, AliasAction
from trunkctrl.models.message import Message

logger = logging.getLogger(__name__)


class AliasActionManager:
    """Execute the actions of every alias attached to a message.

    Each action runs in isolation: one failing action does not stop the
    others. Actions with an interval run at most once per interval.
    """

    def __init__(self) -> None:
        """Initialize the manager."""
        self._last_run: dict[tuple[str, str], float] = {}
        self._lock = threading.Lock()

    def receive(self, message: Message) -> None:
        """Run the actions for a decoded message."""
        for alias in message.aliases:
            for action in alias.actions:
                if self._due(alias, action):
                    self._execute(alias, action, message)

    def _due(self, alias: Alias, action: AliasAction) -> bool:
        key = (alias.name, action.name)
        now = time.monotonic()
        with self._lock:
            last = self._last_run.get(key)
            if last is not None and now - last < action.interval:
                return False
            self._last_run[key] = now
            return True

    @staticmethod
    def _execute(alias: Alias, action: AliasAction, message: Message) -> None:
        try:
            action.handler(alias, message)
        except Exception:
            logger.exception("Alias action %s failed for %s", action.name, alias.name)
