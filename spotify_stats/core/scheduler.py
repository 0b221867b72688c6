"""Scheduler for periodic now-playing samples."""

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger


class PollScheduler:
    """Runs an action immediately and then every ``interval`` seconds.

    The interval is measured from the end of one run to the start of the
    next. Every start() gets its own cancellation event; stop() sets it and
    removes the pending job, so a run that is already executing finishes but
    is not followed by another one. Runs never overlap, including a late run
    of a stopped poll and the first run of a restarted one.
    """

    JOB_ID = "now_playing_poll"

    def __init__(
        self,
        logger: logging.Logger,
        action: Callable[[], object],
        interval_seconds: float = 5,
        scheduler: Optional[BackgroundScheduler] = None
    ):
        """Initialize scheduler.

        Args:
            logger: Logger instance
            action: Function to call on every tick (should take no args)
            interval_seconds: Delay between the end of a tick and the next one
            scheduler: APScheduler instance to run jobs on
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self.logger = logger
        self.action = action
        self.interval_seconds = interval_seconds
        self.scheduler = scheduler or BackgroundScheduler()

        self._cancel: Optional[threading.Event] = None
        self._generation = 0
        self._control_lock = threading.Lock()
        self._tick_lock = threading.Lock()

    @property
    def _job_id(self) -> str:
        return f"{self.JOB_ID}-{self._generation}"

    def start(self) -> bool:
        """Start polling with an immediate tick.

        Returns:
            False if already polling, True otherwise
        """
        with self._control_lock:
            if self.is_polling():
                return False

            if not self.scheduler.running:
                self.scheduler.start()

            self._generation += 1
            self._cancel = threading.Event()
            self._schedule(self._cancel, self._job_id, delay=0)

        self.logger.info(f"Polling started (every {self.interval_seconds}s)")
        return True

    def stop(self) -> bool:
        """Request cancellation.

        A tick in progress is allowed to complete.

        Returns:
            False if not polling, True otherwise
        """
        with self._control_lock:
            if not self.is_polling():
                return False

            self._cancel.set()
            try:
                self.scheduler.remove_job(self._job_id)
            except JobLookupError:
                # Job is executing and will not re-arm itself
                pass

        self.logger.info("Polling stopped")
        return True

    def shutdown(self, wait: bool = True) -> None:
        """Stop polling and the underlying scheduler."""
        self.stop()
        try:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=wait)
                self.logger.debug("Scheduler shut down")
        except Exception as e:
            self.logger.error(f"Error stopping scheduler: {e}")

    def is_polling(self) -> bool:
        """Check whether ticks are currently scheduled.

        Returns:
            True between start() and stop()
        """
        return self._cancel is not None and not self._cancel.is_set()

    def _schedule(self, cancel: threading.Event, job_id: str, delay: float) -> None:
        run_date = datetime.now(timezone.utc) + timedelta(seconds=delay)
        self.scheduler.add_job(
            self._run,
            trigger=DateTrigger(run_date=run_date),
            args=[cancel, job_id],
            id=job_id,
            name="Now playing poll",
            replace_existing=True,
            misfire_grace_time=None,
            # The re-armed job may fire while its predecessor is returning
            max_instances=2
        )

    def _run(self, cancel: threading.Event, job_id: str) -> None:
        with self._tick_lock:
            if cancel.is_set():
                return
            self._safe_action()

        with self._control_lock:
            if not cancel.is_set():
                self._schedule(cancel, job_id, delay=self.interval_seconds)

    def _safe_action(self) -> None:
        """Wrapper for the action with error handling.

        This ensures that errors in the action don't stop polling.
        """
        try:
            self.action()
        except Exception as e:
            self.logger.error(f"Error in scheduled tick: {e}", exc_info=True)
