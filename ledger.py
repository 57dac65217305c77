"""Week ledger operations.

Every function here mutates (or replaces) a ``WeekLedger`` in memory only.
Loading and saving the snapshot is left to ``tracker.WeeklyTracker``.
"""

from __future__ import annotations

from datetime import datetime

from models import DailyEntry, NoSession, WeekLedger, WorkSession


def new_ledger(now: datetime) -> WeekLedger:
    """Create an empty ledger whose week started at ``now``."""
    return WeekLedger(last_reset=now)


def find_entry(ledger: WeekLedger, date_key: str) -> DailyEntry | None:
    """Get the entry for a calendar day, if one exists."""
    for entry in ledger.entries:
        if entry.date_key == date_key:
            return entry
    return None


def record_completed_session(
    ledger: WeekLedger,
    session: WorkSession,
    occurs_on: str,
    display_label: str,
) -> DailyEntry:
    """Merge a finished session into the day bucket for ``occurs_on``.

    A new day is appended at the end so entries stay in the order the days
    occurred. Returns the entry the session landed in.
    """
    if session.duration_minutes < 0:
        raise ValueError(f"Negative session duration: {session.duration_minutes}")

    entry = find_entry(ledger, occurs_on)
    if entry is None:
        entry = DailyEntry(date_key=occurs_on, display_label=display_label)
        ledger.entries.append(entry)
    entry.sessions.append(session)
    return entry


def record_manual_duration(
    ledger: WeekLedger,
    duration_minutes: int,
    occurs_on: str,
    display_label: str,
    now: datetime,
) -> DailyEntry:
    """Record hours logged by hand. Start and end are both ``now`` as placeholders."""
    session = WorkSession(start_time=now, end_time=now, duration_minutes=duration_minutes)
    return record_completed_session(ledger, session, occurs_on, display_label)


def undo_last(ledger: WeekLedger) -> WorkSession | None:
    """Remove the most recently appended session.

    Returns the removed session, or None when there is nothing to undo.
    """
    if not ledger.entries:
        return None

    last_entry = ledger.entries[-1]
    removed = last_entry.sessions.pop() if last_entry.sessions else None
    if not last_entry.sessions:
        ledger.entries.pop()
    return removed


def reset(now: datetime) -> WeekLedger:
    """Start a new week. Any active session is discarded, not carried over."""
    return WeekLedger(last_reset=now, entries=[], session=NoSession())
