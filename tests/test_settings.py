from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from spotify_stats.config.settings import DisplayConfig, Settings, SpotifyConfig


def test_defaults(isolated_config_dir: Path) -> None:
    settings = Settings()

    assert settings.spotify.title_prefix == "Spotify - "
    assert settings.spotify.label_length == 10
    assert settings.spotify.separator == "–"
    assert settings.scheduler.poll_interval_seconds == 5
    assert settings.display.view_mode == "recent"
    assert settings.database.path == isolated_config_dir / "spotify-stats" / "stats.db"


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    settings = Settings()
    settings.scheduler.poll_interval_seconds = 10
    settings.display.view_mode = "artists"
    settings.database.path = tmp_path / "history.db"

    settings.save(config_path)
    loaded = Settings.from_file(config_path)

    assert loaded.scheduler.poll_interval_seconds == 10
    assert loaded.display.view_mode == "artists"
    assert loaded.database.path == tmp_path / "history.db"
    assert loaded.spotify.separator == "–"


def test_partial_file_uses_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump({"database": {"path": str(tmp_path / "x.db")}, "display": None}),
        encoding="utf-8",
    )

    settings = Settings.from_file(config_path)

    assert settings.database.path == tmp_path / "x.db"
    assert settings.scheduler.poll_interval_seconds == 5
    assert settings.display.recent_limit == 20


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Settings.from_file(tmp_path / "missing.yaml")


def test_invalid_file_falls_back_to_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("scheduler:\n  poll_interval_seconds: 0\n", encoding="utf-8")

    settings = Settings.from_file_or_default(config_path)

    assert settings.scheduler.poll_interval_seconds == 5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"separator": "--"},
        {"separator": ""},
        {"label_length": -1},
        {"title_prefix": ""},
    ],
)
def test_spotify_config_validation(kwargs) -> None:
    with pytest.raises(ValueError):
        SpotifyConfig(**kwargs)


def test_display_config_validation() -> None:
    with pytest.raises(ValueError):
        DisplayConfig(view_mode="grid")
    with pytest.raises(ValueError):
        DisplayConfig(recent_limit=0)
