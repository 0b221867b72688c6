"""Derived history views."""

from enum import Enum
from typing import NamedTuple


class ViewMode(str, Enum):
    """Which derived view the display renders."""

    RECENT_SONGS = "recent"
    MOST_PLAYED_ARTISTS = "artists"

    def toggled(self) -> "ViewMode":
        if self is ViewMode.RECENT_SONGS:
            return ViewMode.MOST_PLAYED_ARTISTS
        return ViewMode.RECENT_SONGS


class ArtistPlayCount(NamedTuple):
    """Number of recorded plays for one artist."""

    artist: str
    count: int
