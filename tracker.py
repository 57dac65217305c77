"""Time accounting for the weekly tracker.

``WeeklyTracker`` owns no state of its own beyond a cached copy of the
ledger: every intent reads the snapshot from the repository, mutates it
through ``ledger`` and writes the full snapshot back. Rejected intents
never save.

``ResetScheduler`` drives the week rollover check from a timer.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Callable

import ledger as week_ledger
from models import ActionResult, ActiveSession, Config, NoSession, WeekLedger, WorkSession
from storage import LedgerRepository
from utils import (
    Progress,
    calculate_progress,
    date_key,
    display_label,
    format_minutes,
    parse_non_negative,
    week_start,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

MINUTES_PER_DAY = 24 * 60


class WeeklyTracker:
    """Session tracking, manual logging and week resets over a repository."""

    def __init__(
        self,
        repository: LedgerRepository,
        clock: Clock = datetime.now,
        config: Config | None = None,
    ):
        self.repository = repository
        self.clock = clock
        self.config = config or Config()
        self._ledger: WeekLedger | None = None

    @property
    def ledger(self) -> WeekLedger:
        """The most recently loaded or saved ledger."""
        if self._ledger is None:
            return self.load()
        return self._ledger

    def load(self) -> WeekLedger:
        """Read the stored ledger, creating a fresh one on first use."""
        stored = self.repository.load()
        if stored is None:
            stored = week_ledger.new_ledger(self.clock())
            self.repository.save(stored)
            logger.info("Created new ledger")
        self._ledger = stored
        return stored

    def _save(self, ledger: WeekLedger) -> None:
        self.repository.save(ledger)
        self._ledger = ledger

    # --- Session tracker ---

    def start_work(self, now: datetime | None = None) -> ActionResult:
        now = now or self.clock()
        ledger = self.load()
        if isinstance(ledger.session, ActiveSession):
            return ActionResult(False, "Already clocked in. End the current session first.")

        ledger.session = ActiveSession(start_time=now)
        self._save(ledger)
        logger.info("Clocked in at %s", now.isoformat())
        return ActionResult(True, "Clocked in! Work session started.")

    def end_work(self, now: datetime | None = None) -> ActionResult:
        now = now or self.clock()
        ledger = self.load()
        active = ledger.session
        if not isinstance(active, ActiveSession):
            return ActionResult(False, "No active session to end.")

        duration = active.elapsed_minutes(now)
        if duration < 1:
            return ActionResult(False, "Session too short. Must be at least 1 minute.")

        session = WorkSession(start_time=active.start_time, end_time=now, duration_minutes=duration)
        week_ledger.record_completed_session(ledger, session, date_key(now), display_label(now))
        ledger.session = NoSession()
        self._save(ledger)
        logger.info("Clocked out at %s after %d minutes", now.isoformat(), duration)
        return ActionResult(True, f"Session ended! Logged {format_minutes(duration)}", duration)

    def elapsed_minutes(self, now: datetime | None = None) -> int:
        """Live minutes of the active session, 0 when clocked out."""
        active = self.ledger.session
        if not isinstance(active, ActiveSession):
            return 0
        return active.elapsed_minutes(now or self.clock())

    # --- Entry recorder ---

    def log_manual_hours(self, hours_input, minutes_input, now: datetime | None = None) -> ActionResult:
        """Log hours worked today without a real start and end time.

        The daily minimum applies to this single log action, not to the
        day's accumulated total.
        """
        now = now or self.clock()
        hours = parse_non_negative(hours_input)
        minutes = parse_non_negative(minutes_input)
        raw_total = hours * 60 + minutes
        # A single log covers one day at most; this also rejects overflow to inf
        if not math.isfinite(raw_total) or raw_total > MINUTES_PER_DAY:
            return ActionResult(False, "Please enter valid hours/minutes.")
        total = int(raw_total)

        if total <= 0:
            return ActionResult(False, "Please enter valid hours/minutes.")
        if total < self.config.daily_minimum_minutes:
            minimum = self.config.daily_minimum_minutes
            required = f"{minimum // 60} hours" if minimum % 60 == 0 else format_minutes(minimum)
            return ActionResult(False, f"Minimum daily requirement is {required}.")

        ledger = self.load()
        week_ledger.record_manual_duration(ledger, total, date_key(now), display_label(now), now)
        self._save(ledger)
        logger.info("Logged %d minutes manually for %s", total, date_key(now))
        return ActionResult(True, f"Logged {format_minutes(total)}", total)

    def undo_last(self, now: datetime | None = None) -> ActionResult:
        ledger = self.load()
        removed = week_ledger.undo_last(ledger)
        if removed is None:
            return ActionResult(False, "Nothing to undo.")

        self._save(ledger)
        logger.info("Undid session of %d minutes", removed.duration_minutes)
        return ActionResult(
            True,
            f"Removed {format_minutes(removed.duration_minutes)}",
            removed.duration_minutes,
        )

    # --- Week rollover ---

    def check_week_reset(self, now: datetime | None = None) -> bool:
        """Reset the ledger when ``now`` falls in a later week than the last reset.

        Weeks start on Monday and are compared by the date of that Monday,
        so a second check on the same Monday does nothing while the next
        Monday resets. The first check on any later day of a new week also
        resets, even when no check ran on that week's Monday.
        """
        now = now or self.clock()
        ledger = self.load()
        if week_start(now.date()) <= week_start(ledger.last_reset.date()):
            return False

        self._save(week_ledger.reset(now))
        logger.info("New week started on %s; ledger reset", now.date().isoformat())
        return True

    # --- Progress ---

    def effective_total(self, now: datetime | None = None) -> int:
        """Committed minutes plus the live session's elapsed minutes."""
        return self.ledger.total_minutes + self.elapsed_minutes(now)

    def progress(self, now: datetime | None = None) -> Progress:
        return calculate_progress(self.effective_total(now), self.config.weekly_target_minutes)


class ResetScheduler:
    """Runs the week reset check once at start and then on a recurring timer.

    ``set_interval`` is any factory taking ``(seconds, callback)`` and
    returning a handle with ``stop()``, such as Textual's ``App.set_interval``.
    """

    def __init__(
        self,
        tracker: WeeklyTracker,
        interval: float = 60,
        on_reset: Callable[[WeekLedger], None] | None = None,
    ):
        self.tracker = tracker
        self.interval = interval
        self.on_reset = on_reset
        self._timer = None

    @property
    def running(self) -> bool:
        return self._timer is not None

    def tick(self) -> bool:
        if not self.tracker.check_week_reset():
            return False
        if self.on_reset is not None:
            self.on_reset(self.tracker.ledger)
        return True

    def start(self, set_interval) -> None:
        if self.running:
            return
        self.tick()
        self._timer = set_interval(self.interval, self.tick)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
