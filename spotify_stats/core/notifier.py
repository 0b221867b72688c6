"""Desktop notifications for recorded songs and errors."""

import logging
import sys
from typing import Optional

from ..models.sampler import SamplerStatus, TickResult
from ..models.track import Track

try:
    from plyer import notification as plyer_notification
    PLYER_AVAILABLE = True
except ImportError:
    PLYER_AVAILABLE = False

if sys.platform == 'win32':
    try:
        from winotify import Notification as WinNotification
        WINOTIFY_AVAILABLE = True
    except ImportError:
        WINOTIFY_AVAILABLE = False
else:
    WINOTIFY_AVAILABLE = False


class Notifier:
    """Sends desktop notifications through winotify or plyer."""

    def __init__(
        self,
        logger: logging.Logger,
        enabled: bool = True,
        on_track_change: bool = False,
        on_error: bool = True,
        app_name: str = "Spotify Stats"
    ):
        """Initialize notifier.

        Args:
            logger: Logger instance
            enabled: Whether notifications are enabled at all
            on_track_change: Notify for every recorded song
            on_error: Notify when a song could not be saved
            app_name: Application name shown in notifications
        """
        self.logger = logger
        self.on_track_change = on_track_change
        self.on_error = on_error
        self.app_name = app_name
        self.backend = self._detect_backend()
        self.enabled = enabled and self.backend is not None

        if enabled and not self.enabled:
            self.logger.warning("No notification backend available, notifications disabled")

    @staticmethod
    def _detect_backend() -> Optional[str]:
        if sys.platform == 'win32' and WINOTIFY_AVAILABLE:
            return 'winotify'
        if PLYER_AVAILABLE:
            return 'plyer'
        return None

    def __call__(self, result: TickResult) -> None:
        """Sampler listener: notify according to the tick outcome."""
        if result.status == SamplerStatus.RECORDED and self.on_track_change:
            self.notify_track_recorded(result.track)
        elif result.status == SamplerStatus.PERSISTENCE_FAILED and self.on_error:
            self.notify_error(result.message)

    def send(self, title: str, message: str, duration: int = 5) -> bool:
        """Send a desktop notification.

        Args:
            title: Notification title
            message: Notification body
            duration: Seconds to show it (plyer only)

        Returns:
            True if the notification was sent
        """
        if not self.enabled:
            return False

        try:
            if self.backend == 'winotify':
                WinNotification(
                    app_id=self.app_name,
                    title=title,
                    msg=message,
                    duration="short"
                ).show()
            else:
                plyer_notification.notify(
                    title=title,
                    message=message,
                    app_name=self.app_name,
                    timeout=duration
                )
        except Exception as e:
            self.logger.error(f"Failed to send notification via {self.backend}: {e}")
            return False

        self.logger.debug(f"Notification sent: {title}")
        return True

    def notify_track_recorded(self, track: Track) -> bool:
        """Notify about a newly recorded song."""
        return self.send(
            title="Now Playing",
            message=f"{track.title}\n{track.artist}",
            duration=3
        )

    def notify_error(self, error_message: str) -> bool:
        """Notify about an error."""
        return self.send(
            title="Spotify Stats Error",
            message=error_message
        )
