"""Core functionality for Spotify Stats."""

from .aggregator import most_played_artists
from .feed import RecentTracksFeed
from .locator import ProcessLocator
from .notifier import Notifier
from .parser import parse_track_title
from .sampler import NowPlayingSampler
from .scheduler import PollScheduler

__all__ = [
    "most_played_artists",
    "NowPlayingSampler",
    "Notifier",
    "parse_track_title",
    "PollScheduler",
    "ProcessLocator",
    "RecentTracksFeed",
]
