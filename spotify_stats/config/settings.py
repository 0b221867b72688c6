"""Configuration management for Spotify Stats."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from ..utils.platform import get_config_dir

VALID_VIEW_MODES = ["recent", "artists"]


@dataclass
class SpotifyConfig:
    """How the player window is found and its title parsed."""

    title_prefix: str = "Spotify - "
    label_length: int = 10
    separator: str = "–"

    def __post_init__(self):
        """Validate configuration."""
        if not self.title_prefix:
            raise ValueError("title_prefix must not be empty")

        if self.label_length < 0:
            raise ValueError("label_length must be >= 0")

        if len(self.separator) != 1:
            raise ValueError("separator must be a single character")


@dataclass
class DatabaseConfig:
    """Database configuration."""

    path: Optional[Path] = None

    def __post_init__(self):
        """Set default database path if not specified."""
        if self.path is None:
            self.path = get_config_dir() / 'stats.db'
        elif isinstance(self.path, str):
            self.path = Path(self.path).expanduser()


@dataclass
class SchedulerConfig:
    """Scheduler configuration."""

    poll_interval_seconds: int = 5

    def __post_init__(self):
        """Validate configuration."""
        if self.poll_interval_seconds < 1:
            raise ValueError("poll_interval_seconds must be >= 1")


@dataclass
class DisplayConfig:
    """Live display configuration."""

    view_mode: str = "recent"
    recent_limit: int = 20

    def __post_init__(self):
        """Validate configuration."""
        if self.view_mode not in VALID_VIEW_MODES:
            raise ValueError(f"view_mode must be one of {VALID_VIEW_MODES}")

        if self.recent_limit < 1:
            raise ValueError("recent_limit must be >= 1")


@dataclass
class NotificationConfig:
    """Notification configuration."""

    enabled: bool = True
    desktop: bool = True
    on_track_change: bool = False
    on_error: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    path: Optional[Path] = None
    level: str = "INFO"
    max_size_mb: int = 10
    backup_count: int = 5

    def __post_init__(self):
        """Validate configuration and set defaults."""
        if self.path is None:
            self.path = get_config_dir() / 'service.log'
        elif isinstance(self.path, str):
            self.path = Path(self.path).expanduser()

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")


@dataclass
class Settings:
    """Main settings container."""

    spotify: SpotifyConfig = field(default_factory=SpotifyConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> 'Settings':
        """Load settings from YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            Settings instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls(
            spotify=SpotifyConfig(**(data.get('spotify') or {})),
            database=DatabaseConfig(**(data.get('database') or {})),
            scheduler=SchedulerConfig(**(data.get('scheduler') or {})),
            display=DisplayConfig(**(data.get('display') or {})),
            notifications=NotificationConfig(**(data.get('notifications') or {})),
            logging=LoggingConfig(**(data.get('logging') or {})),
        )

    @classmethod
    def from_file_or_default(cls, config_path: Optional[Path] = None) -> 'Settings':
        """Load settings from file or return defaults.

        Args:
            config_path: Path to configuration file (optional)

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        if config_path.exists():
            try:
                return cls.from_file(config_path)
            except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
                logging.warning(f"Failed to load config from {config_path}: {e}")
                logging.warning("Using default configuration")
                return cls()
        else:
            logging.info(f"Config file not found at {config_path}, using defaults")
            return cls()

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save settings to YAML file.

        Args:
            config_path: Path to save configuration (default: config.yaml in config dir)
        """
        if config_path is None:
            config_path = get_config_dir() / 'config.yaml'

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'spotify': {
                'title_prefix': self.spotify.title_prefix,
                'label_length': self.spotify.label_length,
                'separator': self.spotify.separator
            },
            'database': {
                'path': str(self.database.path) if self.database.path else None
            },
            'scheduler': {
                'poll_interval_seconds': self.scheduler.poll_interval_seconds
            },
            'display': {
                'view_mode': self.display.view_mode,
                'recent_limit': self.display.recent_limit
            },
            'notifications': {
                'enabled': self.notifications.enabled,
                'desktop': self.notifications.desktop,
                'on_track_change': self.notifications.on_track_change,
                'on_error': self.notifications.on_error
            },
            'logging': {
                'path': str(self.logging.path) if self.logging.path else None,
                'level': self.logging.level,
                'max_size_mb': self.logging.max_size_mb,
                'backup_count': self.logging.backup_count
            }
        }

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2, allow_unicode=True)
