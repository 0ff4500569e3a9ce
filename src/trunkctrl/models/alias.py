"""Aliases: friendly names and actions attached to radio identifiers."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trunkctrl.core.broadcaster import Broadcaster, Listener
from trunkctrl.models.model_event import ModelEvent, ModelEventKind

if TYPE_CHECKING:
    from trunkctrl.models.message import Message


@dataclass(frozen=True, slots=True)
class AliasAction:
    """Something to do when an aliased identifier shows up in a message.

    Attributes:
        name: Action name, for logging.
        handler: Called with the alias and the triggering message.
        interval: Minimum seconds between executions, 0 for every message.
    """

    name: str
    handler: Callable[[Alias, Message], None]
    interval: float = 0.0


@dataclass(frozen=True, slots=True)
class Alias:
    """A named radio identifier.

    Attributes:
        name: Display name.
        alias_list: Alias list this alias belongs to.
        identifiers: Radio identifiers (talkgroups, unit IDs) it covers.
        icon: Icon name for map display.
        recordable: Whether audio for this alias should be recorded.
        broadcast_streams: Streams that audio for this alias is sent to.
        actions: Actions executed when the alias appears in a message.
    """

    name: str
    alias_list: str = ""
    identifiers: tuple[str, ...] = ()
    icon: str = ""
    recordable: bool = False
    broadcast_streams: tuple[str, ...] = ()
    actions: tuple[AliasAction, ...] = ()


class AliasModel:
    """Mutable store of aliases."""

    def __init__(self) -> None:
        """Initialize an empty model."""
        self._aliases: list[Alias] = []
        self._lock = threading.Lock()
        self._broadcaster: Broadcaster[ModelEvent] = Broadcaster("alias")

    @property
    def aliases(self) -> list[Alias]:
        """Return all aliases."""
        with self._lock:
            return list(self._aliases)

    def add_listener(self, listener: Listener[ModelEvent]) -> None:
        """Register an alias change listener."""
        self._broadcaster.add_listener(listener)

    def add_alias(self, alias: Alias) -> None:
        """Add an alias."""
        with self._lock:
            self._aliases.append(alias)
        self._broadcaster.broadcast(ModelEvent("alias", ModelEventKind.ADD, alias))

    def remove_alias(self, alias: Alias) -> bool:
        """Remove an alias.

        Returns:
            True if removed, False if not present.
        """
        with self._lock:
            if alias not in self._aliases:
                return False
            self._aliases.remove(alias)
        self._broadcaster.broadcast(ModelEvent("alias", ModelEventKind.REMOVE, alias))
        return True

    def get_alias_list(self, alias_list: str) -> list[Alias]:
        """Return the aliases belonging to ``alias_list``."""
        with self._lock:
            return [a for a in self._aliases if a.alias_list == alias_list]

    def lookup(self, alias_list: str, identifier: str) -> Alias | None:
        """Return the first alias in ``alias_list`` covering ``identifier``."""
        for alias in self.get_alias_list(alias_list):
            if identifier in alias.identifiers:
                return alias
        return None
