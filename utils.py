"""Utility functions for week boundaries, progress and formatting."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from models import WEEKLY_TARGET_MINUTES

# Monday = 0 in weekday()
WEEK_START_DAY = 0


def week_start(d: date) -> date:
    """Get the Monday that starts the week containing date d."""
    days_since_start = (d.weekday() - WEEK_START_DAY) % 7
    return d - timedelta(days=days_since_start)


def date_key(moment: datetime) -> str:
    """Calendar-day identity used to group sessions, e.g. '2026-01-26'."""
    return moment.date().isoformat()


def display_label(moment: datetime) -> str:
    """Human label for a day, e.g. 'Monday, Jan 26'."""
    return f"{moment.strftime('%A, %b')} {moment.day}"


def format_minutes(total_minutes: int) -> str:
    """Format minutes as 'Xh Ym'."""
    hrs, mins = divmod(int(total_minutes), 60)
    return f"{hrs}h {mins}m"


def format_clock(moment: datetime) -> str:
    return moment.strftime("%I:%M %p")


def parse_non_negative(value) -> float:
    """Parse user input as a non-negative number. Anything else counts as 0."""
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    # NaN fails every comparison, so check it explicitly
    if number != number or number < 0 or number == float("inf"):
        return 0.0
    return number


@dataclass(frozen=True)
class Progress:
    total: int
    target: int
    remaining: int
    percentage: float
    is_complete: bool
    overage: int


def calculate_progress(total_minutes: int, target: int = WEEKLY_TARGET_MINUTES) -> Progress:
    """Derive completion figures for a weekly total against the target."""
    percentage = min(100.0, 100 * total_minutes / target) if target > 0 else 100.0
    return Progress(
        total=total_minutes,
        target=target,
        remaining=max(0, target - total_minutes),
        percentage=percentage,
        is_complete=total_minutes >= target,
        overage=max(0, total_minutes - target),
    )
