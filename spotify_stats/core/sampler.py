"""Now-playing sampling and track change detection."""

import logging
from typing import Callable, List, Optional

from ..config.database import HistoryStore
from ..errors import MalformedTrackTitle, PersistenceError, TargetNotFound, TargetVanished
from ..models.sampler import SamplerState, SamplerStatus, TickResult
from ..models.track import SONG_SEPARATOR
from .locator import ProcessLocator
from .parser import LABEL_LENGTH, parse_track_title

NOT_RUNNING_MESSAGE = "Spotify not running/not playing a song."

TickListener = Callable[[TickResult], None]


class NowPlayingSampler:
    """Samples the player window and records track changes.

    Each tick is a transition of a small state machine. Without a target
    process id the sampler is unresolved and tries to locate the player;
    with one it reads that process's window title. A tick that finds the
    process gone drops the id and relocates within the same tick.

    A new record is appended only when the parsed artist/title differs from
    the last record appended this session, and ``last_track`` only moves
    after the append succeeded.
    """

    def __init__(
        self,
        locator: ProcessLocator,
        store: HistoryStore,
        logger: logging.Logger,
        label_length: int = LABEL_LENGTH,
        separator: str = SONG_SEPARATOR,
        state: Optional[SamplerState] = None
    ):
        """Initialize sampler.

        Args:
            locator: Finds the player process and reads its title
            store: History the detected changes are appended to
            logger: Logger instance
            label_length: Length of the window title label before the track
            separator: Character between artist and title
            state: Initial session state (default: unresolved, no last track)
        """
        self.locator = locator
        self.store = store
        self.logger = logger
        self.label_length = label_length
        self.separator = separator
        self.state = state or SamplerState()
        self._listeners: List[TickListener] = []

    def add_listener(self, listener: TickListener) -> None:
        """Register a callback that receives every TickResult."""
        self._listeners.append(listener)

    def tick(self, state: SamplerState) -> TickResult:
        """Run one sampling step against ``state``.

        Args:
            state: Session state from the previous tick

        Returns:
            TickResult with the next state
        """
        if state.resolved:
            try:
                return self._sample(state)
            except TargetVanished as e:
                self.logger.info(f"{e}, relocating player")
                state = state.with_target(None)

        return self._relocate_and_sample(state)

    def sample(self) -> TickResult:
        """Run one tick against the sampler's own state and publish it."""
        result = self.tick(self.state)
        self.state = result.state
        self._publish(result)
        return result

    def _relocate_and_sample(self, state: SamplerState) -> TickResult:
        try:
            process_id = self.locator.require()
        except TargetNotFound:
            return self._not_running(state)

        self.logger.info(f"Found Spotify process {process_id}")
        state = state.with_target(process_id)

        try:
            return self._sample(state)
        except TargetVanished as e:
            self.logger.info(f"{e} right after being located")
            return self._not_running(state.with_target(None))

    def _sample(self, state: SamplerState) -> TickResult:
        """Read, parse and compare the title of the resolved process.

        Raises:
            TargetVanished: If the target process is gone
        """
        raw_title = self.locator.window_title(state.target_process_id)

        try:
            info = parse_track_title(raw_title, self.label_length, self.separator)
        except MalformedTrackTitle as e:
            self.logger.debug(str(e))
            return TickResult(
                state=state,
                status=SamplerStatus.MALFORMED_TITLE,
                message=f"Unrecognized window title: {raw_title}"
            )

        if state.last_track is not None and state.last_track.matches(info):
            return TickResult(state=state, status=SamplerStatus.UNCHANGED)

        try:
            track = self.store.append(info.artist, info.title)
        except PersistenceError as e:
            self.logger.error(f"Failed to record '{info}': {e}")
            return TickResult(
                state=state,
                status=SamplerStatus.PERSISTENCE_FAILED,
                message=f"Could not save '{info}': {e}"
            )

        self.logger.info(f"Now playing: {track}")
        return TickResult(
            state=state.with_last_track(track),
            status=SamplerStatus.RECORDED,
            track=track
        )

    def _not_running(self, state: SamplerState) -> TickResult:
        self.logger.debug("Spotify process not found")
        return TickResult(
            state=state,
            status=SamplerStatus.NOT_RUNNING,
            message=NOT_RUNNING_MESSAGE
        )

    def _publish(self, result: TickResult) -> None:
        for listener in self._listeners:
            try:
                listener(result)
            except Exception as e:
                self.logger.error(f"Tick listener failed: {e}", exc_info=True)
