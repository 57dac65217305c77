"""Custom widgets for the weekly tracker application."""

from __future__ import annotations

from datetime import datetime

from textual.widgets import Static
from rich.text import Text

from models import DAILY_MINIMUM_MINUTES, ActiveSession, DailyEntry, WeekLedger
from utils import Progress, display_label, format_clock, format_minutes

BAR_WIDTH = 50


class WeeklySummary(Static):
    """Shows current total, weekly target and remaining time."""

    def update_display(self, progress: Progress, active_minutes: int = 0):
        text = Text()
        text.append("Current Total  ", style="dim")
        text.append(f"{format_minutes(progress.total):>9}", style="bold")
        if active_minutes:
            text.append(f"   +{format_minutes(active_minutes)} active", style="green")
        text.append("\n")

        text.append("Weekly Target  ", style="dim")
        text.append(f"{format_minutes(progress.target):>9}\n", style="bold")

        text.append("Remaining      ", style="dim")
        if progress.is_complete:
            text.append(f"{'Complete!':>9}", style="bold green")
        else:
            text.append(f"{format_minutes(progress.remaining):>9}", style="bold yellow")

        self.update(text)


class ProgressPanel(Static):
    """Percentage bar plus a goal message."""

    def update_display(self, progress: Progress):
        filled = int(BAR_WIDTH * progress.percentage / 100)

        text = Text()
        text.append("Weekly Progress", style="bold")
        text.append(f"  {progress.percentage:.1f}%\n")
        text.append("█" * filled, style="green" if progress.is_complete else "blue")
        text.append("░" * (BAR_WIDTH - filled), style="dim")
        text.append("\n")

        if progress.is_complete:
            text.append(
                f"Weekly Goal Complete! ({format_minutes(progress.overage)} extra)",
                style="bold green",
            )
        else:
            text.append(
                f"Keep going! You need {format_minutes(progress.remaining)} more to reach your goal.",
                style="dim",
            )

        self.update(text)


class ClockPanel(Static):
    """Clocked in / out status with the live session time."""

    def update_display(self, session, elapsed_minutes: int):
        text = Text()
        if isinstance(session, ActiveSession):
            text.append("● Clocked In\n", style="bold green")
            text.append(f"Started at {format_clock(session.start_time)}\n", style="dim")
            text.append(format_minutes(elapsed_minutes), style="bold")
        else:
            text.append("Clocked Out. Ready to start your next session.", style="dim")
        self.update(text)


class WeeklyLog(Static):
    """Per-day entries with their sessions, plus the session being recorded."""

    def __init__(self, daily_minimum: int = DAILY_MINIMUM_MINUTES, **kwargs):
        super().__init__(**kwargs)
        self.daily_minimum = daily_minimum

    def _append_entry(self, text: Text, entry: DailyEntry) -> None:
        short = not entry.meets_daily_minimum(self.daily_minimum)
        text.append(f"{entry.display_label:<28}", style="bold")
        text.append(format_minutes(entry.total_minutes), style="yellow" if short else "green")
        if short:
            text.append(" ⚠")
        text.append("\n")
        for session in entry.sessions:
            # Manual logs have no real time range
            if session.start_time == session.end_time:
                span = "Manual entry"
            else:
                span = f"{format_clock(session.start_time)} - {format_clock(session.end_time)}"
            text.append(f"  {span:<26}", style="dim")
            text.append(f"{format_minutes(session.duration_minutes)}\n")

    def update_display(self, ledger: WeekLedger, now: datetime, elapsed_minutes: int = 0):
        text = Text()
        text.append("This Week's Log\n\n", style="bold")

        active = ledger.session
        if not ledger.entries and not isinstance(active, ActiveSession):
            text.append('No entries yet. Press "s" to start work or "l" to log hours.', style="dim")
            self.update(text)
            return

        for entry in ledger.entries:
            self._append_entry(text, entry)
            text.append("\n")

        if isinstance(active, ActiveSession):
            text.append(f"{display_label(now):<28}", style="bold green")
            text.append(f"{format_minutes(elapsed_minutes)}\n", style="green")
            text.append(f"  {format_clock(active.start_time) + ' - Now':<26}", style="dim")
            text.append("Recording...", style="green")

        self.update(text)
