#!/usr/bin/env python3
"""Weekly hours tracker TUI application."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Static, Footer

import storage
from models import ActionResult, WeekLedger
from screens import ConfirmScreen, LogHoursScreen
from tracker import ResetScheduler, WeeklyTracker
from utils import format_clock, format_minutes
from widgets import ClockPanel, ProgressPanel, WeeklyLog, WeeklySummary


class WeeklyTrackerApp(App):
    """Main weekly tracker application."""

    CSS = """
    Screen {
        background: $surface;
    }

    #title-header {
        height: auto;
        background: $primary;
        color: $text;
        padding: 0 1;
        text-style: bold;
    }

    #weekly-summary, #progress-panel, #clock-panel {
        height: auto;
        padding: 1 2;
        color: $text;
    }

    #clock-panel {
        border: round $success;
    }

    #log-container {
        height: 1fr;
        margin: 0 1;
    }

    #weekly-log {
        height: auto;
        padding: 1 1;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "start_work", "Start Work"),
        Binding("e", "end_work", "End Work"),
        Binding("l", "log_hours", "Log Hours"),
        Binding("u", "undo_last", "Undo"),
    ]

    def __init__(self, tracker: WeeklyTracker | None = None):
        super().__init__()
        if tracker is None:
            storage.init_db()
            tracker = WeeklyTracker(storage.SqliteLedgerRepository(), config=storage.get_config())
        self.tracker = tracker
        self.reset_scheduler = ResetScheduler(
            tracker,
            interval=tracker.config.reset_check_seconds,
            on_reset=self._on_week_reset,
        )
        self._refresh_timer = None

    def compose(self) -> ComposeResult:
        config = self.tracker.config
        yield Static(
            f"WEEKLY TRACKER  ·  Daily minimum {format_minutes(config.daily_minimum_minutes)}"
            f"  ·  Weekly target {format_minutes(config.weekly_target_minutes)}",
            id="title-header",
        )
        yield WeeklySummary(id="weekly-summary")
        yield ProgressPanel(id="progress-panel")
        yield ClockPanel(id="clock-panel")
        yield VerticalScroll(
            WeeklyLog(self.tracker.config.daily_minimum_minutes, id="weekly-log"),
            id="log-container",
        )
        yield Footer()

    def on_mount(self):
        self.tracker.load()
        self.reset_scheduler.start(self.set_interval)
        self._refresh_timer = self.set_interval(self.tracker.config.refresh_seconds, self._refresh_display)
        self._refresh_display()

    def on_unmount(self) -> None:
        self._stop_timers()

    def _stop_timers(self) -> None:
        """Cancel the recurring reset check and display refresh."""
        self.reset_scheduler.stop()
        if self._refresh_timer is not None:
            self._refresh_timer.stop()
            self._refresh_timer = None

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        """Offer Start or End depending on whether a session is running."""
        if action == "start_work":
            return not self.tracker.ledger.is_clocked_in
        elif action == "end_work":
            return self.tracker.ledger.is_clocked_in
        return True

    def _refresh_display(self) -> None:
        now = self.tracker.clock()
        ledger = self.tracker.ledger
        progress = self.tracker.progress(now)
        elapsed = self.tracker.elapsed_minutes(now)

        self.query_one("#weekly-summary", WeeklySummary).update_display(progress, elapsed)
        self.query_one("#progress-panel", ProgressPanel).update_display(progress)
        self.query_one("#clock-panel", ClockPanel).update_display(ledger.session, elapsed)
        self.query_one("#weekly-log", WeeklyLog).update_display(ledger, now, elapsed)

    def _report(self, result: ActionResult) -> None:
        """Notify the outcome of an intent and redraw."""
        if result.ok:
            self.notify(result.message)
        else:
            self.notify(result.message, severity="error")
        self.refresh_bindings()
        self._refresh_display()

    def _on_week_reset(self, ledger: WeekLedger) -> None:
        self.notify("New week started! Data has been reset.", severity="information")
        self.refresh_bindings()
        self._refresh_display()

    def action_start_work(self) -> None:
        """Clock in."""
        result = self.tracker.start_work()
        if result.ok:
            started = self.tracker.ledger.session.start_time  # type: ignore[union-attr]
            result = ActionResult(True, f"{result.message} Started at {format_clock(started)}")
        self._report(result)

    def action_end_work(self) -> None:
        """Clock out, logging the session."""
        self._report(self.tracker.end_work())

    def action_log_hours(self) -> None:
        """Open the manual hours modal."""

        def handle_result(result: tuple[str, str] | None) -> None:
            if result is None:
                return
            hours, minutes = result
            self._report(self.tracker.log_manual_hours(hours, minutes))

        self.push_screen(LogHoursScreen(self.tracker.config.daily_minimum_minutes), handle_result)

    def action_undo_last(self) -> None:
        """Remove the most recent session after confirmation."""
        ledger = self.tracker.ledger
        if not ledger.entries:
            self.notify("Nothing to undo.", severity="warning")
            return

        last = ledger.entries[-1].sessions[-1]

        def do_undo(confirmed: bool | None) -> None:
            if confirmed:
                self._report(self.tracker.undo_last())

        self.push_screen(
            ConfirmScreen(f"Remove the last entry ({format_minutes(last.duration_minutes)})?"),
            do_undo,
        )

    async def action_quit(self) -> None:
        self._stop_timers()
        self.exit()


def main():
    import sys
    if len(sys.argv) > 1 and sys.argv[1] == "--state-info":
        logging.basicConfig(level=logging.WARNING)
        db_path = storage.DB_PATH
        print(f"Database: {db_path}")
        if not db_path.exists():
            print("Status: Does not exist (will be created on first run)")
            return
        storage.init_db()
        ledger = storage.SqliteLedgerRepository().load()
        if ledger is None:
            print("Status: No stored week")
            return
        print(f"Week since: {ledger.last_reset.strftime('%Y-%m-%d %H:%M')}")
        print(f"Total: {format_minutes(ledger.total_minutes)} over {len(ledger.entries)} day(s)")
        print(f"Clocked in: {'yes' if ledger.is_clocked_in else 'no'}")
        return

    app = WeeklyTrackerApp()
    app.run()


if __name__ == "__main__":
    main()
