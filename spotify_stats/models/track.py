"""Track data models."""

from dataclasses import dataclass
from datetime import datetime

SONG_SEPARATOR = "–"


@dataclass(frozen=True)
class TrackInfo:
    """Artist and title as read from the player window."""

    artist: str
    title: str

    def __str__(self) -> str:
        return f"{self.artist} {SONG_SEPARATOR} {self.title}"


@dataclass(frozen=True)
class Track:
    """A recorded play, immutable once appended to the history."""

    id: int
    timestamp: datetime
    artist: str
    title: str

    @property
    def info(self) -> TrackInfo:
        """Artist/title pair used for change detection."""
        return TrackInfo(artist=self.artist, title=self.title)

    def matches(self, info: TrackInfo) -> bool:
        """Check whether this record is the same song as ``info``."""
        return self.artist == info.artist and self.title == info.title

    def __str__(self) -> str:
        return str(self.info)
