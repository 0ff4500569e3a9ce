"""Tests for the channel model."""

import logging

import pytest

from trunkctrl.models.channel import Channel, ChannelEvent, ChannelEventKind, ChannelModel


@pytest.fixture
def model() -> ChannelModel:
    """Return an empty channel model."""
    return ChannelModel()


@pytest.fixture
def events(model: ChannelModel) -> list[ChannelEvent]:
    """Return the list of events the model delivers."""
    received: list[ChannelEvent] = []
    model.add_listener(received.append)
    return received


def test_display_name() -> None:
    """Test display name skips empty parts."""
    assert Channel(1, "Dispatch", 155_000_000, system="County", site="North").display_name == (
        "County/North/Dispatch"
    )
    assert Channel(1, "Dispatch", 155_000_000).display_name == "Dispatch"


def test_add_assigns_ids(model: ChannelModel, events: list[ChannelEvent]) -> None:
    """Test that added channels get increasing identifiers."""
    first = model.add_channel(Channel(0, "A", 155_000_000))
    second = model.add_channel(Channel(0, "B", 156_000_000))

    assert (first.id, second.id) == (1, 2)
    assert model.channels == [first, second]
    assert [e.kind for e in events] == [ChannelEventKind.ADD, ChannelEventKind.ADD]
    assert events[0].channel == first


def test_update(model: ChannelModel, events: list[ChannelEvent]) -> None:
    """Test that an update replaces the channel and emits CHANGE."""
    channel = model.add_channel(Channel(0, "A", 155_000_000))
    changed = Channel(channel.id, "A", 155_500_000)

    model.update_channel(changed)

    assert model.get_channel(channel.id) == changed
    assert events[-1] == ChannelEvent(changed, ChannelEventKind.CHANGE)


def test_update_unknown_ignored(model: ChannelModel, events: list[ChannelEvent], caplog) -> None:
    """Test that updating an unknown channel is a logged no-op."""
    with caplog.at_level(logging.WARNING):
        model.update_channel(Channel(42, "Ghost", 155_000_000))
    assert events == []
    assert "unknown channel 42" in caplog.text


def test_remove(model: ChannelModel, events: list[ChannelEvent]) -> None:
    """Test removal emits REMOVE with the removed channel."""
    channel = model.add_channel(Channel(0, "A", 155_000_000))

    assert model.remove_channel(channel.id) is True
    assert model.remove_channel(channel.id) is False
    assert model.get_channel(channel.id) is None
    assert events[-1] == ChannelEvent(channel, ChannelEventKind.REMOVE)
    assert len(events) == 2


@pytest.mark.parametrize(
    ("enabled", "kind"),
    [(True, ChannelEventKind.REQUEST_ENABLE), (False, ChannelEventKind.REQUEST_DISABLE)],
)
def test_set_enabled(
    model: ChannelModel, events: list[ChannelEvent], enabled: bool, kind: ChannelEventKind
) -> None:
    """Test enable and disable requests."""
    channel = model.add_channel(Channel(0, "A", 155_000_000, enabled=not enabled))

    model.set_enabled(channel.id, enabled)

    assert events[-1].kind is kind
    assert events[-1].channel.enabled is enabled
    assert model.get_channel(channel.id).enabled is enabled  # type: ignore[union-attr]


def test_listener_order(model: ChannelModel) -> None:
    """Test that listeners are called in registration order."""
    calls: list[str] = []
    model.add_listener(lambda e: calls.append("processing"))
    model.add_listener(lambda e: calls.append("selection"))

    model.add_channel(Channel(0, "A", 155_000_000))

    assert calls == ["processing", "selection"]
