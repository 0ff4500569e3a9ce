"""Test fixtures for trunkctrl tests."""

import os
from pathlib import Path

import pytest

# Qt without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from trunkctrl.core.config import ConfigStore, properties_path  # noqa: E402
from trunkctrl.core.home import HomeDirectoryResolver  # noqa: E402


@pytest.fixture
def user_home(tmp_path: Path) -> Path:
    """Return an empty directory standing in for the user's home."""
    home = tmp_path / "user"
    home.mkdir()
    return home


@pytest.fixture
def resolver(user_home: Path) -> HomeDirectoryResolver:
    """Return a resolver rooted at the temporary user home."""
    return HomeDirectoryResolver(user_home=user_home)


@pytest.fixture
def config(resolver: HomeDirectoryResolver) -> ConfigStore:
    """Return a ConfigStore loaded from a fresh properties file."""
    home = resolver.resolve()
    assert home is not None
    store = ConfigStore()
    assert store.load(properties_path(home))
    return store
