from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

WEEKLY_TARGET_MINUTES = 45 * 60
DAILY_MINIMUM_MINUTES = 6 * 60


@dataclass(frozen=True)
class WorkSession:
    start_time: datetime
    end_time: datetime
    duration_minutes: int


@dataclass
class DailyEntry:
    date_key: str
    display_label: str
    sessions: list[WorkSession] = field(default_factory=list)

    @property
    def total_minutes(self) -> int:
        """Minutes worked on this day, summed over its sessions."""
        return sum(s.duration_minutes for s in self.sessions)

    def meets_daily_minimum(self, minimum: int = DAILY_MINIMUM_MINUTES) -> bool:
        return self.total_minutes >= minimum


@dataclass(frozen=True)
class ActiveSession:
    start_time: datetime

    def elapsed_minutes(self, now: datetime) -> int:
        """Whole minutes since clock-in, never negative."""
        seconds = (now - self.start_time).total_seconds()
        return max(0, int(seconds // 60))


@dataclass(frozen=True)
class NoSession:
    pass


SessionState = ActiveSession | NoSession


@dataclass
class WeekLedger:
    last_reset: datetime
    entries: list[DailyEntry] = field(default_factory=list)
    session: SessionState = field(default_factory=NoSession)

    @property
    def total_minutes(self) -> int:
        """Committed minutes for the week. The active session is not included."""
        return sum(e.total_minutes for e in self.entries)

    @property
    def is_clocked_in(self) -> bool:
        return isinstance(self.session, ActiveSession)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a user intent. Rejections leave the ledger untouched."""

    ok: bool
    message: str
    minutes: int = 0


@dataclass
class Config:
    weekly_target_minutes: int = WEEKLY_TARGET_MINUTES
    daily_minimum_minutes: int = DAILY_MINIMUM_MINUTES
    reset_check_seconds: float = 60
    refresh_seconds: float = 1
