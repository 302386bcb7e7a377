"""Shared test fixtures and factories."""

import json
import threading
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from ddns.config.paths import ENV_VAR, get_ddns_home

# =============================================================================
# Time Fixtures
# =============================================================================


class VirtualClock:
    """Clock whose waits complete instantly by jumping forward.

    Once a wait would cross ``horizon`` seconds after the start, the clock
    sets the stop event instead, which ends the dispatch loop.
    """

    def __init__(self, horizon: float | None = None):
        self.t = 0.0
        self.horizon = horizon
        self.wall_start = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        self.waits: list[float] = []

    def monotonic(self) -> float:
        return self.t

    def now(self) -> datetime:
        return self.wall_start + timedelta(seconds=self.t)

    def wait(self, timeout: float, event: threading.Event) -> bool:
        self.waits.append(timeout)
        if event.is_set():
            return True
        if self.horizon is not None and self.t + timeout > self.horizon:
            event.set()
            return True
        self.t += timeout
        return event.is_set()


def inline_spawn(target, name: str) -> None:
    """Run occurrences on the dispatch thread, in dispatch order."""
    target()


@pytest.fixture
def make_clock():
    """Factory for virtual clocks with a given horizon."""
    return VirtualClock


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock(horizon=7)


@pytest.fixture
def spawn():
    return inline_spawn


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point DDNS_HOME at a temp dir and clear credential env vars."""
    home = (tmp_path / "ddns-home").resolve()
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("CF_API_KEY", raising=False)
    monkeypatch.delenv("CF_API_EMAIL", raising=False)
    monkeypatch.delenv("DDNS_LOG_LEVEL", raising=False)
    get_ddns_home.cache_clear()
    yield home
    get_ddns_home.cache_clear()


@pytest.fixture
def config_data() -> dict[str, Any]:
    """Valid config content, in the JSON layout."""
    return {
        "cf_key": "0123456789abcdef0123456789abcdef01234",
        "cf_mail": "admin@example.com",
        "timeout": 5,
        "ip_refresh_interval": 120,
        "domains": [
            {
                "id": "rec-v4",
                "update_interval": 60,
                "zone_id": "zone-1",
                "record_type": "A",
                "name": "home.example.com",
                "ttl": 300,
            },
            {
                "id": "rec-v6",
                "update_interval": 90,
                "zone_id": "zone-1",
                "record_type": "AAAA",
                "name": "home.example.com",
                "ttl": 300,
            },
        ],
    }


@pytest.fixture
def config_file(tmp_path: Path, config_data: dict[str, Any]) -> Path:
    """Create a temporary JSON config file."""
    config_path = tmp_path / "ddns_config.json"
    config_path.write_text(json.dumps(config_data))
    return config_path


@pytest.fixture
def config(config_file: Path):
    from ddns.config import load_config

    return load_config(config_file)


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
