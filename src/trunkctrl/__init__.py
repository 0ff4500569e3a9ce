"""TrunkCTRL - composition core for a trunked radio decoding application."""

APP_NAME = "TrunkCTRL"

__version__ = "0.1.0"
