"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from devjanitor.adapters.mock import MockCommandRunner
from devjanitor.core.context import HostEnvironment
from devjanitor.core.discovery.path_cache import PathCache
from devjanitor.core.discovery.path_search import TieredPathSearch


@pytest.fixture
def runner() -> MockCommandRunner:
    """Process runner that never spawns anything."""
    return MockCommandRunner()


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def host_env(tmp_path: Path, home_dir: Path) -> HostEnvironment:
    """A Linux host whose PATH holds one empty bin dir under tmp_path."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return HostEnvironment(path=str(bin_dir), home=str(home_dir), platform="linux")


@pytest.fixture
def path_search(runner: MockCommandRunner, host_env: HostEnvironment) -> TieredPathSearch:
    return TieredPathSearch(PathCache(), runner=runner, environment=host_env)


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep tests away from the real ~/.config/dev-janitor."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("DEV_JANITOR_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def make_file():
    """Create an (empty) file, parents included; return its path."""

    def _make(path: Path) -> str:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
        return str(path)

    return _make
