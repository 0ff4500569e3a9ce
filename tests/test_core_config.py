"""Tests for ConfigStore using QSettings."""

import logging
import threading
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PySide6.QtCore import QSettings

from trunkctrl.core.config import (
    KEY_BROADCAST_STATUS_VISIBLE,
    ConfigStore,
    properties_path,
)


class TestConfigStoreLoad:
    """Test loading and first-run creation of the properties file."""

    def test_creates_missing_file(self, tmp_path: Path) -> None:
        """Test that an absent properties file is created empty."""
        path = properties_path(tmp_path)
        store = ConfigStore()

        assert store.load(path) is True
        assert path.exists()
        assert store.is_persistent
        assert store.path == path

    def test_fresh_file_returns_defaults(self, config: ConfigStore) -> None:
        """Test that a new file yields the default for the visibility key."""
        assert config.get(KEY_BROADCAST_STATUS_VISIBLE, False) is False
        assert config.keys() == []

    def test_reads_flat_key_value_lines(self, tmp_path: Path) -> None:
        """Test reading a file of flat key=value lines."""
        path = properties_path(tmp_path)
        path.write_text(
            "main.broadcast.status.visible=true\nspectral.fft.size=8192\nuser.name=dispatch\n"
        )
        store = ConfigStore()
        store.load(path)

        assert store.get(KEY_BROADCAST_STATUS_VISIBLE, False) is True
        assert store.get("spectral.fft.size", 4096) == 8192
        assert store.get("user.name", "") == "dispatch"

    def test_reads_value_with_commas(self, tmp_path: Path) -> None:
        """Test that an unquoted comma stays part of the value."""
        path = properties_path(tmp_path)
        path.write_text("recording.path=/data/a,b\nuser.name=Smith,John,Jr\n")
        store = ConfigStore()
        store.load(path)

        assert store.get("recording.path", "") == "/data/a,b"
        assert store.get("user.name") == "Smith,John,Jr"

    def test_creation_failure_is_memory_only(self, tmp_path: Path) -> None:
        """Test that a failed file creation leaves the store usable in memory."""
        store = ConfigStore()
        with patch.object(Path, "touch", side_effect=PermissionError("denied")):
            assert store.load(properties_path(tmp_path)) is False

        assert not store.is_persistent
        assert store.path is None
        assert store.get("anything", 7) == 7
        store.set("anything", 8)
        assert store.get("anything", 7) == 8

    def test_load_into_missing_directory(self, tmp_path: Path) -> None:
        """Test that a properties path in a missing directory is not fatal."""
        store = ConfigStore()
        assert store.load(tmp_path / "missing" / "TrunkCTRL.properties") is False
        assert store.get(KEY_BROADCAST_STATUS_VISIBLE, False) is False


class TestConfigStoreGet:
    """Test typed get with defaults."""

    def test_never_loaded_returns_defaults(self) -> None:
        """Test that an unloaded store returns the default for every key."""
        store = ConfigStore()
        assert store.get("a", "x") == "x"
        assert store.get("b", 3) == 3
        assert store.get("c", True) is True
        assert store.get("d") is None

    def test_get_is_stable(self, config: ConfigStore) -> None:
        """Test that repeated gets without a set return the same value."""
        config.set("spectral.frame.rate", 25)
        values = [config.get("spectral.frame.rate", 20) for _ in range(5)]
        assert values == [25] * 5

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("FALSE", False), ("1", True), ("0", False), ("yes", True), ("off", False)],
    )
    def test_bool_coercion(self, tmp_path: Path, raw: str, expected: bool) -> None:
        """Test boolean parsing of stored strings."""
        path = properties_path(tmp_path)
        path.write_text(f"flag={raw}\n")
        store = ConfigStore()
        store.load(path)
        assert store.get("flag", not expected) is expected

    def test_invalid_value_returns_default(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that an uncoercible value logs a warning and yields the default."""
        path = properties_path(tmp_path)
        path.write_text("rate=fast\nflag=maybe\n")
        store = ConfigStore()
        store.load(path)

        with caplog.at_level(logging.WARNING):
            assert store.get("rate", 20) == 20
            assert store.get("flag", False) is False
        assert "Ignoring invalid value" in caplog.text

    def test_float_coercion(self, config: ConfigStore) -> None:
        """Test float parsing."""
        config.set("gain", "29.7")
        assert config.get("gain", 0.0) == pytest.approx(29.7)

    def test_contains(self, config: ConfigStore) -> None:
        """Test key presence checks."""
        assert not config.contains("k")
        config.set("k", "v")
        assert config.contains("k")


class TestConfigStoreSet:
    """Test set and persistence."""

    def test_round_trip_through_fresh_load(self, config: ConfigStore) -> None:
        """Test that a set value is read back by a new store."""
        config.set(KEY_BROADCAST_STATUS_VISIBLE, True)
        config.set("spectral.fft.size", 2048)
        config.set("user.name", "dispatch")

        assert config.path is not None
        fresh = ConfigStore()
        fresh.load(config.path)

        assert fresh.get(KEY_BROADCAST_STATUS_VISIBLE, False) is True
        assert fresh.get("spectral.fft.size", 4096) == 2048
        assert fresh.get("user.name", "") == "dispatch"

    def test_last_write_wins(self, config: ConfigStore) -> None:
        """Test overriding a key."""
        config.set("k", "one")
        config.set("k", "two")
        assert config.get("k", "") == "two"

    def test_persist_failure_is_logged_not_raised(
        self, config: ConfigStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a failed write keeps the in-memory value and logs."""
        failing = MagicMock()
        failing.status.return_value = QSettings.Status.AccessError
        config._settings = failing

        with caplog.at_level(logging.ERROR):
            config.set("k", "v")

        assert config.get("k", "") == "v"
        failing.setValue.assert_called_once_with("k", "v")
        failing.sync.assert_called_once()
        assert "Couldn't persist property k" in caplog.text

    def test_log_current_settings(
        self, config: ConfigStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that current properties are logged sorted by key."""
        config.set("b.key", "2")
        config.set("a.key", "1")
        with caplog.at_level(logging.INFO):
            config.log_current_settings()
        assert caplog.text.index("a.key") < caplog.text.index("b.key")

    def test_written_file_escapes_values(self, config: ConfigStore) -> None:
        """Test the on-disk form of escaped values and reading it back."""
        config.set("k", "a,b")
        config.set("j", "@x")

        assert config.path is not None
        text = config.path.read_text()
        assert "[General]" in text
        assert 'k="a,b"' in text
        assert "j=@@x" in text

        fresh = ConfigStore()
        fresh.load(config.path)
        assert fresh.get("k", "") == "a,b"
        assert fresh.get("j", "") == "@x"

    def test_concurrent_sets_are_not_lost(self, config: ConfigStore) -> None:
        """Test that sets from many threads all reach the file."""

        def writer(n: int) -> None:
            for i in range(20):
                config.set(f"thread{n}.value", i)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert config.path is not None
        fresh = ConfigStore()
        fresh.load(config.path)
        assert fresh.keys() == sorted(f"thread{n}.value" for n in range(8))
        for n in range(8):
            assert fresh.get(f"thread{n}.value", -1) == 19
