"""Finding the player process and reading its window title."""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional, Protocol, Tuple

import psutil

from ..errors import TargetNotFound, TargetVanished
from ..utils.platform import is_windows

PLAYER_PROCESS_NAME = "spotify"


class WindowSource(Protocol):
    """Reads top-level window titles of running processes."""

    def iter_windows(self) -> Iterable[Tuple[int, str]]:
        """Yield ``(process_id, main_window_title)`` for every titled window."""

    def title_for(self, process_id: int) -> Optional[str]:
        """Main window title of a process, "" if it has none, None if it is gone."""


class _EnumeratingWindowSource(ABC):
    """Derives per-process lookups from a full window listing.

    A process id that now belongs to a program whose name lacks
    ``process_name`` is reported as gone.
    """

    def __init__(self, process_name: Optional[str] = PLAYER_PROCESS_NAME):
        self.process_name = process_name

    @abstractmethod
    def _titled_windows(self) -> List[Tuple[int, str]]:
        """``(process_id, title)`` for every visible titled window."""

    def iter_windows(self) -> Iterator[Tuple[int, str]]:
        return iter(self._titled_windows())

    def title_for(self, process_id: int) -> Optional[str]:
        try:
            name = psutil.Process(process_id).name()
        except psutil.NoSuchProcess:
            return None

        if self.process_name and self.process_name not in name.lower():
            return None

        for pid, title in self._titled_windows():
            if pid == process_id:
                return title
        return ""


class Win32WindowSource(_EnumeratingWindowSource):
    """Window titles through the Win32 API (pywin32)."""

    def __init__(self, process_name: Optional[str] = PLAYER_PROCESS_NAME):
        super().__init__(process_name)

        import win32gui
        import win32process

        self._win32gui = win32gui
        self._win32process = win32process

    def _titled_windows(self) -> List[Tuple[int, str]]:
        windows = []

        def callback(hwnd, _):
            if not self._win32gui.IsWindowVisible(hwnd):
                return True
            title = self._win32gui.GetWindowText(hwnd)
            if title:
                _, pid = self._win32process.GetWindowThreadProcessId(hwnd)
                windows.append((pid, title))
            return True

        self._win32gui.EnumWindows(callback, None)
        return windows


class WmctrlWindowSource(_EnumeratingWindowSource):
    """Window titles on X11 desktops through ``wmctrl -lp``."""

    def __init__(
        self,
        command: str = "wmctrl",
        timeout: int = 5,
        process_name: Optional[str] = PLAYER_PROCESS_NAME
    ):
        super().__init__(process_name)
        self.command = command
        self.timeout = timeout

    def _titled_windows(self) -> List[Tuple[int, str]]:
        result = subprocess.run(
            [self.command, "-lp"],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=self.timeout,
            check=True
        )
        return parse_wmctrl_output(result.stdout)


def parse_wmctrl_output(output: str) -> List[Tuple[int, str]]:
    """Parse ``wmctrl -lp`` lines: window id, desktop, pid, host, title."""
    windows = []
    for line in output.splitlines():
        parts = line.split(None, 4)
        if len(parts) < 5:
            continue
        try:
            pid = int(parts[2])
        except ValueError:
            continue
        if pid > 0 and parts[4]:
            windows.append((pid, parts[4]))
    return windows


def default_window_source() -> WindowSource:
    """Pick the window source for the current platform."""
    if is_windows():
        return Win32WindowSource()
    return WmctrlWindowSource()


class ProcessLocator:
    """Finds the player process by the prefix of its window title."""

    def __init__(
        self,
        title_prefix: str = "Spotify - ",
        window_source: Optional[WindowSource] = None,
        logger: Optional[logging.Logger] = None
    ):
        """Initialize locator.

        Args:
            title_prefix: Window title prefix identifying the player
            window_source: Where window titles come from (default: per platform)
            logger: Logger instance
        """
        self.title_prefix = title_prefix
        self.window_source = window_source or default_window_source()
        self.logger = logger or logging.getLogger(__name__)

    def locate(self) -> Optional[int]:
        """Find the player process.

        Returns:
            Process id of the first window whose title starts with the
            prefix, or None if the player is not running
        """
        try:
            for pid, title in self.window_source.iter_windows():
                if title.startswith(self.title_prefix):
                    self.logger.debug(f"Located player process {pid}: {title!r}")
                    return pid
        except Exception as e:
            self.logger.warning(f"Failed to enumerate windows: {e}")

        return None

    def window_title(self, process_id: int) -> str:
        """Read the current window title of a located process.

        The title is returned whatever it reads, so a paused player
        ("Spotify Premium") is left to the parser.

        Args:
            process_id: Process id returned by locate()

        Returns:
            Window title, "" if the process has no window

        Raises:
            TargetVanished: If the process is gone or its id now belongs
                to another program
        """
        try:
            title = self.window_source.title_for(process_id)
        except psutil.NoSuchProcess as e:
            raise TargetVanished(process_id) from e
        except Exception as e:
            raise TargetVanished(process_id, f"cannot read window title: {e}") from e

        if title is None:
            raise TargetVanished(process_id)

        return title

    def require(self) -> int:
        """Like locate(), but raise when the player is not running.

        Raises:
            TargetNotFound: If no window title starts with the prefix
        """
        process_id = self.locate()
        if process_id is None:
            raise TargetNotFound(f"No window title starts with {self.title_prefix!r}")
        return process_id
