from __future__ import annotations

import time
from pathlib import Path

import pytest

from spotify_stats.config.settings import (
    DatabaseConfig,
    LoggingConfig,
    NotificationConfig,
    SchedulerConfig,
    Settings,
)
from spotify_stats.models.history import ViewMode
from spotify_stats.models.sampler import SamplerStatus
from spotify_stats.service import SpotifyStatsService

from conftest import FakeWindowSource, spotify_title, wait_for


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database=DatabaseConfig(path=tmp_path / "stats.db"),
        scheduler=SchedulerConfig(poll_interval_seconds=1),
        notifications=NotificationConfig(enabled=False),
        logging=LoggingConfig(path=tmp_path / "service.log", level="DEBUG"),
    )


@pytest.fixture
def service(settings: Settings, windows: FakeWindowSource):
    service = SpotifyStatsService(settings=settings, window_source=windows)
    ticks = []
    service.sampler.add_listener(ticks.append)
    service.ticks = ticks
    yield service
    service.poller.shutdown(wait=True)


def test_polling_records_current_song(service: SpotifyStatsService, windows: FakeWindowSource) -> None:
    windows.windows = {42: spotify_title("A", "x")}

    service.start_polling()

    assert wait_for(lambda: service.store.count() == 1)
    assert [track.title for track in service.feed.snapshot()] == ["x"]


def test_no_records_while_stopped(service: SpotifyStatsService, windows: FakeWindowSource) -> None:
    windows.windows = {42: spotify_title("A", "x")}
    service.start_polling()
    assert wait_for(lambda: service.store.count() == 1)

    service.stop_polling()
    windows.windows = {42: spotify_title("B", "y")}
    time.sleep(1.5)

    assert service.store.count() == 1

    resumed_at = time.monotonic()
    service.start_polling()

    assert wait_for(lambda: service.store.count() == 2, timeout=0.9)
    assert time.monotonic() - resumed_at < 1.0


def test_restart_without_change_records_nothing(service: SpotifyStatsService, windows: FakeWindowSource) -> None:
    windows.windows = {42: spotify_title("A", "x")}
    service.start_polling()
    assert wait_for(lambda: len(service.ticks) == 1)

    service.stop_polling()
    service.start_polling()

    assert wait_for(lambda: len(service.ticks) == 2)
    assert service.ticks[-1].status == SamplerStatus.UNCHANGED
    assert service.store.count() == 1


def test_toggle_polling(service: SpotifyStatsService) -> None:
    assert service.toggle_polling() is True
    assert service.is_polling() is True
    assert service.toggle_polling() is False
    assert service.is_polling() is False


def test_view_mode_does_not_affect_sampling(service: SpotifyStatsService, windows: FakeWindowSource) -> None:
    windows.windows = {42: spotify_title("A", "x")}
    service.sample_once()
    windows.windows = {42: spotify_title("B", "y")}
    service.sample_once()
    windows.windows = {42: spotify_title("A", "z")}
    service.sample_once()

    assert service.view_mode is ViewMode.RECENT_SONGS
    assert [track.title for track in service.current_view()] == ["x", "y", "z"]

    assert service.toggle_view_mode() is ViewMode.MOST_PLAYED_ARTISTS
    assert service.current_view() == [("A", 2), ("B", 1)]
    assert service.store.count() == 3


def test_most_played_covers_full_history(settings: Settings, windows: FakeWindowSource) -> None:
    first = SpotifyStatsService(settings=settings, window_source=windows)
    first.store.append("Old", "one")
    first.store.append("Old", "two")

    service = SpotifyStatsService(settings=settings, window_source=windows)
    windows.windows = {42: spotify_title("New", "x")}
    service.sample_once()
    service.set_view_mode("artists")

    assert service.current_view() == [("Old", 2), ("New", 1)]
    assert [track.artist for track in service.feed.snapshot()] == ["New"]


def test_resume_from_history_avoids_duplicate(settings: Settings, windows: FakeWindowSource) -> None:
    windows.windows = {42: spotify_title("A", "x")}
    SpotifyStatsService(settings=settings, window_source=windows).sample_once()

    service = SpotifyStatsService(settings=settings, window_source=windows)
    service.resume_from_history()
    result = service.sample_once()

    assert result.status == SamplerStatus.UNCHANGED
    assert service.store.count() == 1


def test_render_reports_status(service: SpotifyStatsService) -> None:
    service.sample_once()

    assert service.feed.status == "Spotify not running/not playing a song."
    assert service.render() is not None


def test_artist_ranking_is_aggregated_only_when_history_changes(
    service: SpotifyStatsService, windows: FakeWindowSource, monkeypatch
) -> None:
    reads = []
    read_all = service.store.all

    def counting_all():
        reads.append(True)
        return read_all()

    monkeypatch.setattr(service.store, "all", counting_all)
    windows.windows = {42: spotify_title("A", "x")}
    service.sample_once()
    service.set_view_mode(ViewMode.MOST_PLAYED_ARTISTS)

    for _ in range(5):
        service.render()
    assert len(reads) == 1

    # Unchanged ticks keep the cached ranking
    service.sample_once()
    assert service.current_view() == [("A", 1)]
    assert len(reads) == 1

    windows.windows = {42: spotify_title("B", "y")}
    service.sample_once()
    assert service.current_view() == [("A", 1), ("B", 1)]
    assert len(reads) == 2

    service.toggle_view_mode()
    service.toggle_view_mode()
    service.current_view()
    assert len(reads) == 3
