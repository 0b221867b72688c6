"""Track extraction from the player window title."""

from ..errors import MalformedTrackTitle
from ..models.track import SONG_SEPARATOR, TrackInfo

# Length of the "Spotify - " label in front of the track
LABEL_LENGTH = 10


def parse_track_title(
    raw_title: str,
    label_length: int = LABEL_LENGTH,
    separator: str = SONG_SEPARATOR
) -> TrackInfo:
    """Parse ``<label><artist> – <title>`` into artist and title.

    The label is dropped by length, then the remainder is split on the
    first separator and both halves are trimmed.

    Args:
        raw_title: Window title of the player
        label_length: Number of leading characters to drop
        separator: Single character between artist and title

    Returns:
        TrackInfo with non-empty artist and title

    Raises:
        MalformedTrackTitle: If the title is too short, has no separator,
            or either half is empty
    """
    if raw_title is None or len(raw_title) <= label_length:
        raise MalformedTrackTitle(raw_title or "", "title shorter than label")

    song = raw_title[label_length:]
    artist, found, title = song.partition(separator)
    if not found:
        raise MalformedTrackTitle(raw_title, f"separator {separator!r} not found")

    artist = artist.strip()
    title = title.strip()
    if not artist:
        raise MalformedTrackTitle(raw_title, "empty artist")
    if not title:
        raise MalformedTrackTitle(raw_title, "empty title")

    return TrackInfo(artist=artist, title=title)
