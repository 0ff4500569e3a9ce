"""Tests for the message consumers: alias actions and the map service."""

from unittest.mock import MagicMock, patch

import pytest
from pytestqt.qtbot import QtBot

from trunkctrl.managers.alias_action import AliasActionManager
from trunkctrl.managers.map_service import MapService
from trunkctrl.models.alias import Alias, AliasAction
from trunkctrl.models.icon import IconManager
from trunkctrl.models.message import Message


class TestAliasActionManager:
    """Test AliasActionManager."""

    def test_runs_every_action(self) -> None:
        """Test that each action of each alias runs with the message."""
        beep, log = MagicMock(), MagicMock()
        alias = Alias("Engine 7", actions=(AliasAction("beep", beep), AliasAction("log", log)))
        message = Message(1, "P25", "Emergency", aliases=(alias,))

        AliasActionManager().receive(message)

        beep.assert_called_once_with(alias, message)
        log.assert_called_once_with(alias, message)

    def test_failing_action_isolated(self, caplog) -> None:
        """Test that one failing action doesn't stop the next."""
        after = MagicMock()
        alias = Alias(
            "Engine 7",
            actions=(
                AliasAction("script", MagicMock(side_effect=RuntimeError("boom"))),
                AliasAction("log", after),
            ),
        )

        AliasActionManager().receive(Message(1, "P25", "Emergency", aliases=(alias,)))

        after.assert_called_once()
        assert "Alias action script failed for Engine 7" in caplog.text

    def test_interval_throttles(self) -> None:
        """Test that an action with an interval waits between runs."""
        handler = MagicMock()
        alias = Alias("Engine 7", actions=(AliasAction("beep", handler, interval=30.0),))
        message = Message(1, "P25", "Emergency", aliases=(alias,))
        manager = AliasActionManager()

        with patch("trunkctrl.managers.alias_action.time.monotonic", side_effect=[100.0, 110.0, 131.0]):
            manager.receive(message)
            manager.receive(message)
            manager.receive(message)

        assert handler.call_count == 2


class TestMapService:
    """Test MapService."""

    @pytest.fixture
    def service(self, qtbot: QtBot) -> MapService:
        """Return a map service with the built-in icons."""
        return MapService(IconManager())

    def test_located_message(self, qtbot: QtBot, service: MapService) -> None:
        """Test that a located message becomes a plottable entity."""
        alias = Alias("Engine 7", icon="fire")
        message = Message(1, "LRRP", "Position", "1201", (alias,), 47.6, -122.3)

        with qtbot.waitSignal(service.entity_updated, timeout=1000) as blocker:
            service.receive(message)

        entity = blocker.args[0]
        assert entity.id == "Engine 7"
        assert (entity.latitude, entity.longitude) == (47.6, -122.3)
        assert entity.icon_path == IconManager().get_icon_path("fire")
        assert service.get_entity("Engine 7") == entity

    def test_unaliased_uses_entity_id(self, service: MapService) -> None:
        """Test that unaliased entities are keyed by identifier."""
        service.receive(Message(1, "LRRP", "Position", "1201", latitude=1.0, longitude=2.0))
        service.receive(Message(1, "LRRP", "Position", "1201", latitude=1.5, longitude=2.5))

        [entity] = service.entities
        assert entity.id == "1201"
        assert entity.latitude == 1.5

    def test_no_location_ignored(self, service: MapService) -> None:
        """Test that messages without coordinates are skipped."""
        service.receive(Message(1, "P25", "Group call", "1201"))
        service.receive(Message(1, "LRRP", "Position", latitude=1.0, longitude=2.0))
        assert service.entities == []
