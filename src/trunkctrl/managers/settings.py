"""Display and tuner settings shared by the spectral display components."""

import logging

from trunkctrl.core.config import ConfigStore
from trunkctrl.models.tuner import TunerConfigurationModel

logger = logging.getLogger(__name__)

_KEY_FFT_SIZE = "spectral.fft.size"
_KEY_FRAME_RATE = "spectral.frame.rate"

FFT_SIZES = (1024, 2048, 4096, 8192, 16384)
DEFAULT_FFT_SIZE = 4096
DEFAULT_FRAME_RATE = 20


class SettingsManager:
    """Typed settings on top of the application properties."""

    def __init__(self, tuner_configuration_model: TunerConfigurationModel, config: ConfigStore) -> None:
        """Initialize the settings manager.

        Args:
            tuner_configuration_model: Tuner configurations.
            config: Application properties.
        """
        self._tuner_configuration_model = tuner_configuration_model
        self._config = config

    @property
    def tuner_configuration_model(self) -> TunerConfigurationModel:
        """Return the tuner configuration model."""
        return self._tuner_configuration_model

    def get_fft_size(self) -> int:
        """Return the spectral display FFT size (default 4096)."""
        value = self._config.get(_KEY_FFT_SIZE, DEFAULT_FFT_SIZE)
        if value not in FFT_SIZES:
            logger.warning("Unsupported FFT size %s, using %d", value, DEFAULT_FFT_SIZE)
            return DEFAULT_FFT_SIZE
        return int(value)  # type: ignore[arg-type]

    def set_fft_size(self, size: int) -> None:
        """Set the spectral display FFT size.

        Raises:
            ValueError: If ``size`` is not one of FFT_SIZES.
        """
        if size not in FFT_SIZES:
            raise ValueError(f"FFT size must be one of {FFT_SIZES}")
        self._config.set(_KEY_FFT_SIZE, size)

    def get_frame_rate(self) -> int:
        """Return the spectral display frame rate (1-60, default 20)."""
        value = self._config.get(_KEY_FRAME_RATE, DEFAULT_FRAME_RATE)
        return max(1, min(60, int(value)))  # type: ignore[arg-type]

    def set_frame_rate(self, rate: int) -> None:
        """Set the spectral display frame rate (clamped to 1-60)."""
        self._config.set(_KEY_FRAME_RATE, max(1, min(60, rate)))
