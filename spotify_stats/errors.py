"""Exception types for Spotify Stats."""


class SpotifyStatsError(Exception):
    """Base class for all Spotify Stats errors."""


class TargetNotFound(SpotifyStatsError):
    """No running process matches the player window title prefix."""


class TargetVanished(SpotifyStatsError):
    """A previously located player process is gone or now runs another program."""

    def __init__(self, process_id: int, reason: str = "process no longer exists"):
        self.process_id = process_id
        self.reason = reason
        super().__init__(f"Process {process_id} vanished: {reason}")


class MalformedTrackTitle(SpotifyStatsError, ValueError):
    """Window title could not be parsed into artist and title."""

    def __init__(self, raw_title: str, reason: str):
        self.raw_title = raw_title
        self.reason = reason
        super().__init__(f"Cannot parse track from {raw_title!r}: {reason}")


class PersistenceError(SpotifyStatsError):
    """Reading from or writing to the history database failed."""
