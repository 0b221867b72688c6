"""Data models for Spotify Stats."""

from .history import ArtistPlayCount, ViewMode
from .sampler import SamplerState, SamplerStatus, TickResult
from .track import Track, TrackInfo

__all__ = [
    "ArtistPlayCount",
    "SamplerState",
    "SamplerStatus",
    "TickResult",
    "Track",
    "TrackInfo",
    "ViewMode",
]
