"""Tests for SettingsManager and SourceManager."""

import logging

import pytest

from trunkctrl.core.config import ConfigStore
from trunkctrl.managers.settings import DEFAULT_FFT_SIZE, DEFAULT_FRAME_RATE, SettingsManager
from trunkctrl.managers.source import DEFAULT_OUTPUT, MixerManager, SourceManager
from trunkctrl.models.channel import Channel
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
    """Return a tuner configuration model."""
    return TunerConfigurationModel()


@pytest.fixture
def settings(configurations: TunerConfigurationModel, config: ConfigStore) -> SettingsManager:
    """Return a settings manager over a fresh properties file."""
    return SettingsManager(configurations, config)


class TestSettingsManager:
    """Test spectral display settings."""

    def test_defaults(self, settings: SettingsManager) -> None:
        """Test default FFT size and frame rate."""
        assert settings.get_fft_size() == DEFAULT_FFT_SIZE
        assert settings.get_frame_rate() == DEFAULT_FRAME_RATE

    def test_set_fft_size(self, settings: SettingsManager, config: ConfigStore) -> None:
        """Test storing a supported FFT size."""
        settings.set_fft_size(8192)
        assert settings.get_fft_size() == 8192

    def test_set_fft_size_invalid(self, settings: SettingsManager) -> None:
        """Test rejecting an unsupported FFT size."""
        with pytest.raises(ValueError, match="FFT size"):
            settings.set_fft_size(1000)

    def test_stored_fft_size_invalid(self, settings: SettingsManager, config: ConfigStore, caplog) -> None:
        """Test that a bad stored size falls back to the default."""
        config.set("spectral.fft.size", 3000)
        with caplog.at_level(logging.WARNING):
            assert settings.get_fft_size() == DEFAULT_FFT_SIZE
        assert "Unsupported FFT size" in caplog.text

    @pytest.mark.parametrize(("rate", "expected"), [(0, 1), (30, 30), (100, 60)])
    def test_frame_rate_clamped(self, settings: SettingsManager, rate: int, expected: int) -> None:
        """Test frame rate clamping."""
        settings.set_frame_rate(rate)
        assert settings.get_frame_rate() == expected


class TestSourceManager:
    """Test tuner allocation."""

    @pytest.fixture
    def tuners(self, configurations: TunerConfigurationModel) -> TunerModel:
        """Return a tuner model with one VHF tuner taking two channels."""
        model = TunerModel(configurations)
        model.add_tuner(Tuner("RTL #1", "rtl2832", 150_000_000, 160_000_000, max_channels=2))
        return model

    @pytest.fixture
    def sources(self, tuners: TunerModel, settings: SettingsManager) -> SourceManager:
        """Return a source manager."""
        return SourceManager(tuners, settings)

    def test_get_source(self, sources: SourceManager, tuners: TunerModel) -> None:
        """Test allocating a tuner announces the new channel count."""
        events: list[TunerEvent] = []
        tuners.add_listener(events.append)

        source = sources.get_source(Channel(1, "Dispatch", 155_000_000))

        assert source is not None
        assert source.tuner.name == "RTL #1"
        assert source.frequency == 155_000_000
        assert source.tuner.channel_count == 1
        assert events == [TunerEvent(source.tuner, TunerEventKind.CHANNEL_COUNT)]

    def test_out_of_range(self, sources: SourceManager, caplog) -> None:
        """Test that no source is returned outside every tuner's range."""
        with caplog.at_level(logging.WARNING):
            assert sources.get_source(Channel(1, "Trunk", 851_000_000)) is None
        assert "No tuner available" in caplog.text

    def test_capacity_and_release(self, sources: SourceManager) -> None:
        """Test that released capacity can be reused."""
        first = sources.get_source(Channel(1, "A", 155_000_000))
        assert sources.get_source(Channel(2, "B", 155_100_000)) is not None
        assert sources.get_source(Channel(3, "C", 155_200_000)) is None

        assert first is not None
        sources.release_source(first)
        assert first.tuner.channel_count == 1
        assert sources.get_source(Channel(3, "C", 155_200_000)) is not None

    def test_late_configuration_applied(
        self, sources: SourceManager, configurations: TunerConfigurationModel
    ) -> None:
        """Test that a tuner without configuration gets the assigned one on first use."""
        configurations.add_configuration(TunerConfiguration("vhf", "rtl2832", assigned=True))
        source = sources.get_source(Channel(1, "A", 155_000_000))
        assert source is not None
        assert source.tuner.configuration is not None
        assert source.tuner.configuration.name == "vhf"


def test_mixer_outputs() -> None:
    """Test the mixer output registry."""
    mixer = MixerManager(("left", DEFAULT_OUTPUT))
    assert mixer.output_names == ["left", DEFAULT_OUTPUT]
    output = mixer.get_output()
    assert output is not None
    output.write(b"\x00" * 10)
    assert output.bytes_written == 10
    assert mixer.get_output("missing") is None
