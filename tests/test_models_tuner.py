"""Tests for tuner configurations and the tuner model."""

import pytest

from trunkctrl.models.model_event import ModelEvent, ModelEventKind
from trunkctrl.models.tuner import (
    Tuner,
    TunerConfiguration,
    TunerConfigurationModel,
    TunerEvent,
    TunerEventKind,
    TunerModel,
)


@pytest.fixture
def configurations() -> TunerConfigurationModel:
    """Return a configuration model with one assigned RTL2832 configuration."""
    model = TunerConfigurationModel()
    model.add_configuration(TunerConfiguration("spare", "rtl2832"))
    model.add_configuration(TunerConfiguration("vhf", "rtl2832", frequency=155_000_000, assigned=True))
    return model


@pytest.fixture
def tuners(configurations: TunerConfigurationModel) -> TunerModel:
    """Return an empty tuner model."""
    return TunerModel(configurations)


class TestTunerConfigurationModel:
    """Test TunerConfigurationModel."""

    def test_get_assigned(self, configurations: TunerConfigurationModel) -> None:
        """Test that the assigned configuration of a type is returned."""
        assigned = configurations.get_assigned("rtl2832")
        assert assigned is not None
        assert assigned.name == "vhf"
        assert configurations.get_assigned("airspy") is None

    def test_add_notifies(self) -> None:
        """Test that adding a configuration emits ADD."""
        model = TunerConfigurationModel()
        events: list[ModelEvent] = []
        model.add_listener(events.append)
        configuration = TunerConfiguration("uhf", "airspy")

        model.add_configuration(configuration)

        assert events == [ModelEvent("tuner-configuration", ModelEventKind.ADD, configuration)]
        assert model.configurations == [configuration]


class TestTuner:
    """Test Tuner capacity and range."""

    def test_can_tune(self) -> None:
        """Test frequency range and channel capacity."""
        tuner = Tuner("t", "rtl2832", 150_000_000, 160_000_000, max_channels=1)
        assert tuner.can_tune(155_000_000)
        assert tuner.can_tune(160_000_000)
        assert not tuner.can_tune(161_000_000)
        tuner.channel_count = 1
        assert not tuner.can_tune(155_000_000)


class TestTunerModel:
    """Test TunerModel."""

    def test_add_applies_configuration(self, tuners: TunerModel) -> None:
        """Test that an added tuner gets its type's assigned configuration."""
        events: list[TunerEvent] = []
        tuners.add_listener(events.append)
        tuner = Tuner("RTL #1", "rtl2832", 24_000_000, 1_766_000_000)

        tuners.add_tuner(tuner)

        assert tuner.configuration is not None
        assert tuner.configuration.name == "vhf"
        assert tuners.tuners == [tuner]
        assert events == [TunerEvent(tuner, TunerEventKind.ADD)]

    def test_add_without_configuration(self, tuners: TunerModel) -> None:
        """Test a tuner type with no assigned configuration."""
        tuner = Tuner("Airspy", "airspy", 24_000_000, 1_800_000_000)
        tuners.add_tuner(tuner)
        assert tuner.configuration is None

    def test_remove(self, tuners: TunerModel) -> None:
        """Test that removing emits REMOVE once."""
        tuner = Tuner("RTL #1", "rtl2832", 24_000_000, 1_766_000_000)
        tuners.add_tuner(tuner)
        events: list[TunerEvent] = []
        tuners.add_listener(events.append)

        tuners.remove_tuner(tuner)
        tuners.remove_tuner(tuner)

        assert tuners.tuners == []
        assert events == [TunerEvent(tuner, TunerEventKind.REMOVE)]

    def test_request_first_tuner_display(self, tuners: TunerModel) -> None:
        """Test that the first tuner is requested for the main display."""
        first = Tuner("RTL #1", "rtl2832", 24_000_000, 1_766_000_000)
        tuners.add_tuner(first)
        tuners.add_tuner(Tuner("RTL #2", "rtl2832", 24_000_000, 1_766_000_000))
        events: list[TunerEvent] = []
        tuners.add_listener(events.append)

        tuners.request_first_tuner_display()

        assert events == [TunerEvent(first, TunerEventKind.REQUEST_MAIN_SPECTRAL_DISPLAY)]

    def test_request_first_tuner_display_empty(self, tuners: TunerModel) -> None:
        """Test that the request is skipped without tuners."""
        events: list[TunerEvent] = []
        tuners.add_listener(events.append)
        tuners.request_first_tuner_display()
        assert events == []
