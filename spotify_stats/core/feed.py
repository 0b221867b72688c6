"""Live view state shared between the sampler and the display."""

from typing import Sequence, Tuple

from rich.console import Group
from rich.table import Table
from rich.text import Text

from ..models.history import ArtistPlayCount, ViewMode
from ..models.sampler import TickResult
from ..models.track import Track


class RecentTracksFeed:
    """Tracks recorded this session plus the latest status line.

    Registered as a sampler listener. Only the sampler thread publishes;
    each publish swaps in a new immutable tuple, so readers on other
    threads always see a complete snapshot.
    """

    def __init__(self, limit: int = 20):
        self.limit = limit
        self._tracks: Tuple[Track, ...] = ()
        self._status: str = ""

    def __call__(self, result: TickResult) -> None:
        if result.track is not None:
            self._tracks = (self._tracks + (result.track,))[-self.limit:]

        self._status = result.message

    def snapshot(self) -> Tuple[Track, ...]:
        """Tracks recorded this session, oldest first."""
        return self._tracks

    @property
    def status(self) -> str:
        return self._status


def render_recent(tracks: Sequence[Track], title: str = "Recent Songs") -> Table:
    """Build a table of recorded plays, newest first."""
    table = Table(title=title)
    table.add_column("Time", style="cyan")
    table.add_column("Artist", style="green")
    table.add_column("Song")

    for track in reversed(tracks):
        table.add_row(
            track.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            track.artist,
            track.title
        )

    return table


def render_most_played(ranking: Sequence[ArtistPlayCount], title: str = "Most Played Artists") -> Table:
    """Build a table of artists ranked by play count."""
    table = Table(title=title)
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Artist", style="green")
    table.add_column("Plays", justify="right")

    for position, entry in enumerate(ranking, start=1):
        table.add_row(str(position), entry.artist, str(entry.count))

    return table


def render_view(
    view_mode: ViewMode,
    rows: Sequence,
    status: str = "",
    polling: bool = True
) -> Group:
    """Render the selected view with a status footer."""
    if view_mode is ViewMode.MOST_PLAYED_ARTISTS:
        table = render_most_played(rows)
    else:
        table = render_recent(rows)

    footer = Text()
    if not polling:
        footer.append("Paused ", style="yellow")
    if status:
        footer.append(status, style="red")

    return Group(table, footer)
