"""Tests for ledger.py - week ledger operations."""

from datetime import datetime

import pytest

import ledger as week_ledger
from models import ActiveSession, NoSession, WeekLedger, WorkSession


def _session(day: int, start_hour: int, end_hour: int) -> WorkSession:
    return WorkSession(
        start_time=datetime(2026, 1, day, start_hour, 0),
        end_time=datetime(2026, 1, day, end_hour, 0),
        duration_minutes=(end_hour - start_hour) * 60,
    )


@pytest.fixture
def empty_ledger():
    return week_ledger.new_ledger(datetime(2026, 1, 26, 8, 0))


class TestRecordCompletedSession:
    """Tests for record_completed_session."""

    def test_creates_entry_for_new_day(self, empty_ledger, sample_session):
        """Test the first session of a day creates its entry."""
        entry = week_ledger.record_completed_session(
            empty_ledger, sample_session, "2026-01-26", "Monday, Jan 26"
        )

        assert empty_ledger.entries == [entry]
        assert entry.date_key == "2026-01-26"
        assert entry.display_label == "Monday, Jan 26"
        assert entry.total_minutes == 510
        assert empty_ledger.total_minutes == 510

    def test_merges_into_existing_day(self, empty_ledger):
        """Test a second session on the same day joins the existing entry."""
        week_ledger.record_completed_session(empty_ledger, _session(26, 8, 12), "2026-01-26", "Monday, Jan 26")
        week_ledger.record_completed_session(empty_ledger, _session(26, 13, 17), "2026-01-26", "Monday, Jan 26")

        assert len(empty_ledger.entries) == 1
        assert len(empty_ledger.entries[0].sessions) == 2
        assert empty_ledger.entries[0].total_minutes == 480
        assert empty_ledger.total_minutes == 480

    def test_days_stay_in_order(self, empty_ledger):
        """Test new days are appended after existing ones."""
        week_ledger.record_completed_session(empty_ledger, _session(26, 9, 17), "2026-01-26", "Monday, Jan 26")
        week_ledger.record_completed_session(empty_ledger, _session(27, 9, 17), "2026-01-27", "Tuesday, Jan 27")
        week_ledger.record_completed_session(empty_ledger, _session(26, 18, 19), "2026-01-26", "Monday, Jan 26")

        assert [e.date_key for e in empty_ledger.entries] == ["2026-01-26", "2026-01-27"]
        assert empty_ledger.entries[0].total_minutes == 540
        assert empty_ledger.total_minutes == 1020

    def test_negative_duration_raises(self, empty_ledger):
        """Test a negative duration is a programming error."""
        bad = WorkSession(datetime(2026, 1, 26, 9), datetime(2026, 1, 26, 9), -5)
        with pytest.raises(ValueError):
            week_ledger.record_completed_session(empty_ledger, bad, "2026-01-26", "Monday, Jan 26")
        assert empty_ledger.entries == []


class TestRecordManualDuration:
    """Tests for record_manual_duration."""

    def test_placeholder_times(self, empty_ledger):
        """Test manual logs use now as both start and end."""
        now = datetime(2026, 1, 26, 18, 0)
        entry = week_ledger.record_manual_duration(empty_ledger, 480, "2026-01-26", "Monday, Jan 26", now)

        session = entry.sessions[0]
        assert session.start_time == now
        assert session.end_time == now
        assert session.duration_minutes == 480
        assert empty_ledger.total_minutes == 480

    def test_merges_with_tracked_sessions(self, empty_ledger):
        """Test a manual log lands in the same day bucket as tracked sessions."""
        week_ledger.record_completed_session(empty_ledger, _session(26, 9, 12), "2026-01-26", "Monday, Jan 26")
        week_ledger.record_manual_duration(
            empty_ledger, 360, "2026-01-26", "Monday, Jan 26", datetime(2026, 1, 26, 20, 0)
        )

        assert len(empty_ledger.entries) == 1
        assert empty_ledger.entries[0].total_minutes == 540


class TestFindEntry:
    """Tests for find_entry."""

    def test_found(self, sample_ledger):
        assert week_ledger.find_entry(sample_ledger, "2026-01-27") is sample_ledger.entries[1]

    def test_not_found(self, sample_ledger):
        assert week_ledger.find_entry(sample_ledger, "2026-01-30") is None


class TestUndoLast:
    """Tests for undo_last."""

    def test_nothing_to_undo(self, empty_ledger):
        """Test undo on an empty ledger returns None and changes nothing."""
        assert week_ledger.undo_last(empty_ledger) is None
        assert empty_ledger.entries == []
        assert empty_ledger.total_minutes == 0

    def test_removes_last_session_only(self, sample_ledger):
        """Test undo keeps a day that still has sessions."""
        removed = week_ledger.undo_last(sample_ledger)

        assert removed is not None
        assert removed.duration_minutes == 120
        assert len(sample_ledger.entries) == 2
        assert sample_ledger.entries[1].total_minutes == 240
        assert sample_ledger.total_minutes == 750

    def test_removes_emptied_entry(self, sample_ledger):
        """Test undo drops a day whose last session was removed."""
        week_ledger.undo_last(sample_ledger)
        week_ledger.undo_last(sample_ledger)

        assert [e.date_key for e in sample_ledger.entries] == ["2026-01-26"]
        assert sample_ledger.total_minutes == 510

    def test_keeps_active_session(self, sample_ledger):
        """Test undo does not touch the running session."""
        week_ledger.undo_last(sample_ledger)
        assert isinstance(sample_ledger.session, ActiveSession)

    def test_undo_everything(self, sample_ledger):
        """Test repeated undo empties the ledger and then reports nothing to undo."""
        for _ in range(3):
            assert week_ledger.undo_last(sample_ledger) is not None
        assert week_ledger.undo_last(sample_ledger) is None
        assert sample_ledger.total_minutes == 0


class TestReset:
    """Tests for reset."""

    def test_reset_clears_everything(self, sample_ledger):
        """Test reset drops entries and the active session."""
        now = datetime(2026, 2, 2, 0, 1)
        fresh = week_ledger.reset(now)

        assert fresh == WeekLedger(last_reset=now, entries=[], session=NoSession())
        assert fresh.total_minutes == 0
        # The old ledger is replaced, not mutated
        assert sample_ledger.total_minutes == 870
