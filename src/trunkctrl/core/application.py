"""Composition root: builds and wires every long-lived component.

Startup runs on one thread, in three steps:

1. Bootstrap: resolve the home directory and load the properties file.
   Both degrade to in-memory defaults instead of failing.
2. Construction: every model and manager is declared with its
   dependencies and built in dependency order by ``ComponentGraph``.
3. Wiring: listener registrations, performed only after every component
   exists, so no event can reach a partially built graph.

Construction failures propagate to the caller and abort startup.
"""

import logging
import os
import platform
import sys
from pathlib import Path
from typing import cast

from PySide6 import __version__ as pyside_version
from PySide6.QtCore import QObject, Signal

from trunkctrl import APP_NAME, __version__
from trunkctrl.core.config import KEY_APPLICATION_NAME, ConfigStore, properties_path
from trunkctrl.core.graph import ComponentGraph, CompositionError
from trunkctrl.core.home import HomeDirectoryResolver
from trunkctrl.core.ui_state import PersistedUIState
from trunkctrl.managers.alias_action import AliasActionManager
from trunkctrl.managers.audio import AudioManager
from trunkctrl.managers.channel_processing import ChannelProcessingManager
from trunkctrl.managers.channel_selection import ChannelSelectionManager
from trunkctrl.managers.event_log import EventLogManager
from trunkctrl.managers.map_service import MapService
from trunkctrl.managers.playlist import PlaylistManager
from trunkctrl.managers.recorder import RecorderManager
from trunkctrl.managers.settings import SettingsManager
from trunkctrl.managers.source import SourceManager
from trunkctrl.managers.tuner_spectral_display import TunerSpectralDisplayManager
from trunkctrl.models.alias import AliasModel
from trunkctrl.models.broadcast import BroadcastModel
from trunkctrl.models.channel import ChannelModel
from trunkctrl.models.channel_map import ChannelMapModel
from trunkctrl.models.icon import IconManager
from trunkctrl.models.tuner import TunerConfigurationModel, TunerEvent, TunerEventKind, TunerModel

logger = logging.getLogger(__name__)

EVENT_LOG_FOLDER = "event_logs"
RECORDING_FOLDER = "recordings"

# Managers that need channel processing to exist before they are built
_CHANNEL_PROCESSING = ("channel_processing_manager",)


class Application(QObject):
    """Owns the bootstrap, the component graph and the wiring.

    Example:
        app = Application(HomeDirectoryResolver())
        app.build()
        app.title_changed.connect(window.setWindowTitle)
        app.toggle_broadcast_status()
    """

    title_changed = Signal(str)

    def __init__(self, resolver: HomeDirectoryResolver, parent: QObject | None = None) -> None:
        """Initialize the composition root.

        Args:
            resolver: Home directory resolver.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._resolver = resolver
        self._config = ConfigStore()
        self._graph = ComponentGraph()
        self._home: Path | None = None
        self._ui_state: PersistedUIState | None = None
        self._title = APP_NAME
        self._base_title = APP_NAME

    # -- Accessors -------------------------------------------------------------

    @property
    def config(self) -> ConfigStore:
        """Return the application properties."""
        return self._config

    @property
    def home(self) -> Path | None:
        """Return the home directory, or None if unavailable."""
        return self._home

    @property
    def graph(self) -> ComponentGraph:
        """Return the component graph."""
        return self._graph

    @property
    def components(self) -> dict[str, object]:
        """Return every constructed component by name, in construction order."""
        return {name: self._graph.get(name) for name in self._graph.construction_order}

    def component(self, name: str) -> object:
        """Return a constructed component.

        Raises:
            CompositionError: If it has not been constructed.
        """
        return self._graph.get(name)

    @property
    def ui_state(self) -> PersistedUIState:
        """Return the broadcast status panel visibility state."""
        if self._ui_state is None:
            raise CompositionError("Application has not been built")
        return self._ui_state

    @property
    def title(self) -> str:
        """Return the current main window title."""
        return self._title

    # -- Startup ---------------------------------------------------------------

    def build(self) -> None:
        """Bootstrap, construct and wire the application. Call once.

        Raises:
            CompositionError: If called twice or the graph is malformed.
        """
        if self._graph.is_built:
            raise CompositionError("Application already built")

        self._log_banner()
        self._bootstrap()
        self._declare(self._graph)
        self._graph.build()
        self._ui_state = PersistedUIState(self._config, parent=self)
        self._wire()

        cast(RecorderManager, self.component("recorder_manager")).start()
        cast(PlaylistManager, self.component("playlist_manager")).init()
        cast(TunerModel, self.component("tuner_model")).request_first_tuner_display()
        logger.info("Application started")

    def _log_banner(self) -> None:
        logger.info("*" * 60)
        logger.info("**** %s %s: trunked radio decoding", APP_NAME, __version__)
        logger.info("*" * 60)
        logger.info("Python: %s", sys.version.split()[0])
        logger.info("PySide6: %s", pyside_version)
        logger.info("Platform: %s", platform.platform())
        logger.info("Host CPU cores: %s", os.cpu_count())

    def _bootstrap(self) -> None:
        self._home = self._resolver.resolve()
        if self._home is None:
            logger.error("No home directory; running with default settings only")
        else:
            logger.info("Home path: %s", self._home)
            self._config.load(properties_path(self._home))
        self._config.log_current_settings()

        self._base_title = str(self._config.get(KEY_APPLICATION_NAME, APP_NAME))
        self._title = self._base_title

    def _declare(self, graph: ComponentGraph) -> None:
        """Declare every component with its dependencies."""
        resolver = self._resolver
        config = self._config

        # Configuration
        graph.declare("config_store", lambda: config)
        graph.declare("tuner_configuration_model", TunerConfigurationModel)
        graph.declare("tuner_model", TunerModel, depends_on=("tuner_configuration_model",))
        graph.declare(
            "settings_manager",
            SettingsManager,
            depends_on=("tuner_configuration_model", "config_store"),
        )
        graph.declare("icon_manager", IconManager)

        # Core data models
        graph.declare("channel_model", ChannelModel)
        graph.declare("alias_model", AliasModel)
        graph.declare("channel_map_model", ChannelMapModel)

        # Leaf managers
        graph.declare(
            "event_log_manager",
            lambda: EventLogManager(resolver.application_folder(EVENT_LOG_FOLDER)),
        )
        graph.declare(
            "recorder_manager",
            lambda: RecorderManager(resolver.application_folder(RECORDING_FOLDER)),
        )
        graph.declare(
            "source_manager", SourceManager, depends_on=("tuner_model", "settings_manager")
        )

        graph.declare(
            "channel_processing_manager",
            ChannelProcessingManager,
            depends_on=(
                "channel_model",
                "channel_map_model",
                "alias_model",
                "event_log_manager",
                "recorder_manager",
                "source_manager",
            ),
        )

        # Consumers of channel processing
        graph.declare(
            "channel_selection_manager",
            ChannelSelectionManager,
            depends_on=("channel_model", "channel_processing_manager"),
        )
        graph.declare(
            "audio_manager",
            lambda source_manager: AudioManager(source_manager.mixer_manager),
            depends_on=("source_manager",),
            after=_CHANNEL_PROCESSING,
        )
        graph.declare(
            "broadcast_model", BroadcastModel, depends_on=("icon_manager",), after=_CHANNEL_PROCESSING
        )
        graph.declare(
            "map_service", MapService, depends_on=("icon_manager",), after=_CHANNEL_PROCESSING
        )
        graph.declare("alias_action_manager", AliasActionManager, after=_CHANNEL_PROCESSING)
        graph.declare(
            "tuner_spectral_display_manager",
            TunerSpectralDisplayManager,
            depends_on=("channel_model", "channel_processing_manager", "settings_manager"),
        )

        # Aggregation
        graph.declare(
            "playlist_manager",
            PlaylistManager,
            depends_on=("alias_model", "broadcast_model", "channel_model", "channel_map_model"),
        )

    def _wire(self) -> None:
        """Register listeners. Order within each family is delivery order."""
        get = self._graph.get
        channel_model = cast(ChannelModel, get("channel_model"))
        tuner_model = cast(TunerModel, get("tuner_model"))
        processing = cast(ChannelProcessingManager, get("channel_processing_manager"))

        channel_model.add_listener(processing)
        channel_model.add_listener(cast(ChannelSelectionManager, get("channel_selection_manager")))

        processing.add_audio_packet_listener(cast(RecorderManager, get("recorder_manager")))
        processing.add_audio_packet_listener(cast(AudioManager, get("audio_manager")))
        processing.add_audio_packet_listener(cast(BroadcastModel, get("broadcast_model")))

        processing.add_message_listener(cast(AliasActionManager, get("alias_action_manager")))
        processing.add_message_listener(cast(MapService, get("map_service")))

        tuner_model.add_listener(
            cast(TunerSpectralDisplayManager, get("tuner_spectral_display_manager"))
        )
        tuner_model.add_listener(self)

    # -- Runtime ---------------------------------------------------------------

    def receive(self, event: TunerEvent) -> None:
        """Put the main spectral display tuner's name in the title."""
        if event.kind is TunerEventKind.REQUEST_MAIN_SPECTRAL_DISPLAY:
            self._title = f"{self._base_title} - {event.tuner.name}"
            self.title_changed.emit(self._title)

    def toggle_broadcast_status(self) -> bool:
        """Toggle the broadcast status panel.

        Returns:
            True if the panel is now visible.
        """
        return self.ui_state.toggle()

    def shutdown(self) -> None:
        """Stop processing and release files."""
        if not self._graph.is_built:
            return
        cast(ChannelProcessingManager, self.component("channel_processing_manager")).shutdown()
        cast(RecorderManager, self.component("recorder_manager")).stop()
        cast(EventLogManager, self.component("event_log_manager")).close_all()
        logger.info("Application stopped")
