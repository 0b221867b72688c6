from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

from spotify_stats.config.database import HistoryStore
from spotify_stats.core.locator import ProcessLocator
from spotify_stats.core.sampler import NowPlayingSampler


class FakeWindowSource:
    """Window titles keyed by process id, editable by the test."""

    def __init__(self, windows: Optional[Dict[int, str]] = None) -> None:
        self.windows: Dict[int, str] = dict(windows or {})

    def iter_windows(self):
        return list(self.windows.items())

    def title_for(self, process_id: int) -> Optional[str]:
        return self.windows.get(process_id)


def spotify_title(artist: str, title: str) -> str:
    return f"Spotify - {artist} – {title}"


def wait_for(predicate: Callable[[], bool], timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch) -> Path:
    config_home = tmp_path / "config-home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("APPDATA", str(config_home))
    return config_home


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("spotify_stats.tests")


@pytest.fixture
def windows() -> FakeWindowSource:
    return FakeWindowSource()


@pytest.fixture
def store(tmp_path: Path) -> HistoryStore:
    return HistoryStore(tmp_path / "stats.db")


@pytest.fixture
def locator(windows: FakeWindowSource, logger: logging.Logger) -> ProcessLocator:
    return ProcessLocator(title_prefix="Spotify - ", window_source=windows, logger=logger)


@pytest.fixture
def sampler(locator: ProcessLocator, store: HistoryStore, logger: logging.Logger) -> NowPlayingSampler:
    return NowPlayingSampler(locator=locator, store=store, logger=logger)
