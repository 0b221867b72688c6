"""Play count aggregation over the stored history."""

from collections import Counter
from typing import Iterable, List, Optional

from ..models.history import ArtistPlayCount
from ..models.track import Track


def most_played_artists(
    history: Iterable[Track],
    limit: Optional[int] = None
) -> List[ArtistPlayCount]:
    """Rank artists by number of recorded plays.

    Artists are compared by exact, case-sensitive name. Ties keep the order
    in which the artists first appear in ``history``.

    Args:
        history: Tracks in append order
        limit: Only return the top ``limit`` artists

    Returns:
        List of ArtistPlayCount, highest count first
    """
    # Counter keeps first-insertion order and sorted() is stable
    counts = Counter(track.artist for track in history)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    if limit is not None:
        ranked = ranked[:limit]

    return [ArtistPlayCount(artist, count) for artist, count in ranked]
