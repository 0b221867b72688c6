"""Sampler state models."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .track import Track


class SamplerStatus(str, Enum):
    """Outcome of a single sampling tick."""

    RECORDED = "recorded"
    UNCHANGED = "unchanged"
    NOT_RUNNING = "not_running"
    MALFORMED_TITLE = "malformed_title"
    PERSISTENCE_FAILED = "persistence_failed"


@dataclass(frozen=True)
class SamplerState:
    """Session state carried from one tick to the next."""

    target_process_id: Optional[int] = None
    last_track: Optional[Track] = None

    @property
    def resolved(self) -> bool:
        return self.target_process_id is not None

    def with_target(self, process_id: Optional[int]) -> "SamplerState":
        return replace(self, target_process_id=process_id)

    def with_last_track(self, track: Track) -> "SamplerState":
        return replace(self, last_track=track)


@dataclass(frozen=True)
class TickResult:
    """State after a tick plus what happened during it."""

    state: SamplerState
    status: SamplerStatus
    track: Optional[Track] = None  # Set only when a record was appended
    message: str = ""
