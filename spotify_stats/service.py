"""Main background service for Spotify Stats."""

import signal
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

from apscheduler.schedulers.background import BackgroundScheduler
from rich.console import Console, Group
from rich.live import Live

from .config.database import HistoryStore
from .config.settings import Settings
from .core.aggregator import most_played_artists
from .core.feed import RecentTracksFeed, render_view
from .core.locator import ProcessLocator, WindowSource
from .core.notifier import Notifier
from .core.sampler import NowPlayingSampler
from .core.scheduler import PollScheduler
from .errors import PersistenceError
from .models.history import ArtistPlayCount, ViewMode
from .models.sampler import SamplerStatus, TickResult
from .models.track import Track
from .utils.logger import setup_logger
from .utils.platform import is_windows


class SpotifyStatsService:
    """Polls the Spotify window and records the songs it plays."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
        window_source: Optional[WindowSource] = None,
        scheduler: Optional[BackgroundScheduler] = None,
        console: Optional[Console] = None
    ):
        """Initialize the service.

        Args:
            config_path: Path to configuration file (optional)
            settings: Settings to use instead of loading them
            window_source: Window title source (default: per platform)
            scheduler: APScheduler instance for the poll job
            console: Rich console for the live display
        """
        self.running = False
        self.settings = settings or Settings.from_file_or_default(config_path)
        self.console = console or Console()

        self.logger = self._setup_logger()
        self.logger.info("Initializing Spotify Stats service")

        spotify = self.settings.spotify
        self.store = HistoryStore(self.settings.database.path)
        self.locator = ProcessLocator(
            title_prefix=spotify.title_prefix,
            window_source=window_source,
            logger=self.logger
        )
        self.sampler = NowPlayingSampler(
            locator=self.locator,
            store=self.store,
            logger=self.logger,
            label_length=spotify.label_length,
            separator=spotify.separator
        )

        self.feed = RecentTracksFeed(limit=self.settings.display.recent_limit)
        self.notifier = Notifier(
            logger=self.logger,
            enabled=self.settings.notifications.enabled and self.settings.notifications.desktop,
            on_track_change=self.settings.notifications.on_track_change,
            on_error=self.settings.notifications.on_error
        )
        self.sampler.add_listener(self.feed)
        self.sampler.add_listener(self.notifier)
        self.sampler.add_listener(self._on_tick)

        self.view_mode = ViewMode(self.settings.display.view_mode)
        # Artist ranking, aggregated when the view switches or a song is recorded
        self._recorded = 0
        self._ranking: Optional[Tuple[int, List[ArtistPlayCount]]] = None
        self.poller = PollScheduler(
            logger=self.logger,
            action=self.sampler.sample,
            interval_seconds=self.settings.scheduler.poll_interval_seconds,
            scheduler=scheduler
        )

    def _setup_logger(self, stream=None):
        return setup_logger(self.settings.logging, console=True, stream=stream)

    # Operator controls

    def start_polling(self) -> bool:
        """Start (or resume) sampling with an immediate tick."""
        return self.poller.start()

    def stop_polling(self) -> bool:
        """Stop sampling after the tick in progress, if any."""
        return self.poller.stop()

    def toggle_polling(self) -> bool:
        """Flip between polling and paused.

        Returns:
            True if polling after the call
        """
        if self.poller.is_polling():
            self.stop_polling()
            return False
        self.start_polling()
        return True

    def is_polling(self) -> bool:
        return self.poller.is_polling()

    def set_view_mode(self, view_mode: Union[ViewMode, str]) -> None:
        """Select which view the display renders. Sampling is unaffected."""
        self.view_mode = ViewMode(view_mode)
        self._ranking = None
        self.logger.debug(f"View mode set to {self.view_mode.value}")

    def toggle_view_mode(self) -> ViewMode:
        self.set_view_mode(self.view_mode.toggled())
        return self.view_mode

    def resume_from_history(self) -> None:
        """Compare the next sample against the last stored song.

        Used for one-off samples, which have no previous tick this session.
        """
        last = self.store.last()
        if last is not None:
            self.sampler.state = self.sampler.state.with_last_track(last)

    def sample_once(self) -> TickResult:
        """Run a single tick outside of the schedule."""
        return self.sampler.sample()

    # Views

    def current_view(self) -> Union[List[Track], List[ArtistPlayCount]]:
        """Rows for the selected view.

        Raises:
            PersistenceError: If the history cannot be read
        """
        if self.view_mode is ViewMode.MOST_PLAYED_ARTISTS:
            cached = self._ranking
            if cached is None or cached[0] != self._recorded:
                recorded = self._recorded
                cached = (recorded, most_played_artists(self.store.all()))
                self._ranking = cached
            return list(cached[1])
        return list(self.feed.snapshot())

    def _on_tick(self, result: TickResult) -> None:
        # Each new record invalidates the cached ranking
        if result.status == SamplerStatus.RECORDED:
            self._recorded += 1

    def render(self) -> Group:
        """Render the selected view for the live display."""
        status = self.feed.status
        try:
            rows = self.current_view()
        except PersistenceError as e:
            self.logger.error(f"Failed to load history: {e}")
            rows = []
            status = str(e)

        return render_view(self.view_mode, rows, status=status, polling=self.is_polling())

    # Lifecycle

    def setup_signal_handlers(self) -> None:
        """Setup signal handlers for shutdown and operator controls."""

        def shutdown_handler(signum, frame):
            self.logger.info(f"Received signal {signum}, shutting down...")
            self.running = False

        def toggle_polling_handler(signum, frame):
            polling = self.toggle_polling()
            self.logger.info("Polling resumed" if polling else "Polling paused")

        def toggle_view_handler(signum, frame):
            self.toggle_view_mode()

        signal.signal(signal.SIGINT, shutdown_handler)

        # Windows uses SIGBREAK and has no user signals
        if is_windows():
            signal.signal(signal.SIGBREAK, shutdown_handler)
        else:
            signal.signal(signal.SIGTERM, shutdown_handler)
            signal.signal(signal.SIGUSR1, toggle_polling_handler)
            signal.signal(signal.SIGUSR2, toggle_view_handler)

    def run(self, display: bool = True, refresh_seconds: float = 0.5) -> None:
        """Run the service in the foreground until interrupted.

        Args:
            display: Show the live view in the terminal
            refresh_seconds: Display refresh interval
        """
        self.running = True

        try:
            self.setup_signal_handlers()
            self.start_polling()
            self.logger.info("Service started, press Ctrl+C to stop")

            if display:
                with Live(self.render(), console=self.console, refresh_per_second=4) as live:
                    # Log lines go through the live console's stdout proxy
                    self.logger = self._setup_logger(stream=sys.stdout)
                    while self.running:
                        live.update(self.render())
                        time.sleep(refresh_seconds)
            else:
                while self.running:
                    time.sleep(refresh_seconds)

        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Graceful shutdown."""
        self.running = False
        self.logger.info("Shutting down service...")
        self.poller.shutdown(wait=True)
        self.logger.info("Service stopped")


def main():
    """Main entry point."""
    service = SpotifyStatsService()
    service.run()


if __name__ == "__main__":
    main()
