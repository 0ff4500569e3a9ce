"""Core application layer.

This module contains the bootstrap, configuration and event delivery code
that the composition root uses to build and wire the application.

Classes:
    Application: Composition root building and wiring every component.
    Broadcaster: Ordered, failure-isolated delivery for one event family.
    ComponentGraph: Dependency-ordered component construction.
    ConfigStore: QSettings-backed application properties.
    HomeDirectoryResolver: Home directory bootstrap.
    PersistedUIState: Persisted panel visibility.
"""

from trunkctrl.core.application import Application
from trunkctrl.core.broadcaster import Broadcaster
from trunkctrl.core.config import ConfigStore
from trunkctrl.core.graph import ComponentGraph, CompositionError
from trunkctrl.core.home import HomeDirectoryResolver
from trunkctrl.core.ui_state import PersistedUIState

__all__ = [
    "Application",
    "Broadcaster",
    "ComponentGraph",
    "CompositionError",
    "ConfigStore",
    "HomeDirectoryResolver",
    "PersistedUIState",
]
