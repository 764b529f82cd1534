"""Display formatting utilities for habitlog."""

from datetime import date, datetime
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from ..core.completion import CompletionProgress
from ..core.insights import CorrelationInsight
from ..core.models import STATUS_SYMBOLS, Completion, Habit, HabitStatistics
from ..core.report import WeeklyReport


def format_date_header(day: date, date_format: str = "%B %d, %Y") -> str:
    """Format a date as a header."""
    return f"{day.strftime('%A')}, {day.strftime(date_format)}"


def format_progress_bar(progress: CompletionProgress) -> str:
    """Render [##.] for multi-completion habits, empty otherwise."""
    if progress.target <= 1:
        return ""
    filled = min(progress.completed, progress.target)
    empty = progress.target - filled
    return f" [{'#' * filled}{'.' * empty}]"


def format_habit_status(
    habit: Habit,
    progress: CompletionProgress,
    complete: bool,
    streak: int = 0,
) -> str:
    """Format a habit's status for display."""
    status_indicator = "[x]" if complete else "[ ]"
    polarity = "" if habit.is_positive else " (break)"

    streak_text = ""
    if streak > 0:
        streak_text = f" ({streak} streak)"

    return f"{status_indicator} {habit.title}{polarity}{format_progress_bar(progress)}{streak_text}"


def format_habits_list(
    habits: List[Habit],
    progress_map: Dict[str, CompletionProgress],
    complete_map: Dict[str, bool],
    streak_map: Optional[Dict[str, int]] = None,
) -> str:
    """Format a list of habits with their status.

    Args:
        habits: List of habits
        progress_map: Dict mapping habit.id to today's progress
        complete_map: Dict mapping habit.id to bool (complete today)
        streak_map: Dict mapping habit.id to current streak

    Returns:
        Formatted string
    """
    streak_map = streak_map or {}
    lines = ["== HABITS ==", ""]

    if not habits:
        lines.append("  (no habits)")
        return "\n".join(lines)

    for habit in habits:
        progress = progress_map.get(habit.id, CompletionProgress(0, habit.target_completions_per_day, 0.0))
        line = format_habit_status(
            habit,
            progress,
            complete_map.get(habit.id, False),
            streak_map.get(habit.id, 0),
        )
        lines.append(f"  {line}  <{habit.id[:8]}>")

    lines.append("")
    return "\n".join(lines)


def format_completion(completion: Completion) -> str:
    symbol = STATUS_SYMBOLS.get(completion.status, "[ ]")
    line = f"{symbol} {completion.time.strftime('%H:%M')}  <{completion.id[:8]}>"
    if completion.notes:
        line += f"  {completion.notes}"
    return line


def format_completions(habit: Habit, day: date, completions: List[Completion]) -> str:
    """Format the completions logged for a day."""
    lines = [f"== {habit.title}: {day.isoformat()} ==", ""]
    if not completions:
        lines.append("  (no completions)")
    for completion in completions:
        lines.append(f"  {format_completion(completion)}")
    return "\n".join(lines)


def statistics_table(stats: HabitStatistics, progress: Optional[float] = None) -> Table:
    """Build a rich table for one habit's statistics."""
    table = Table(title=escape(stats.habit.title), show_header=False, box=None)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Days logged", str(stats.total_days))
    table.add_row("Completed", str(stats.completed_days))
    table.add_row("Failed", str(stats.failed_days))
    table.add_row("No completions", str(stats.skipped_days))
    table.add_row("Completion rate", f"{stats.completion_rate:.1f}%")
    table.add_row("Current streak", str(stats.current_streak))
    table.add_row("Longest streak", str(stats.longest_streak))
    if progress is not None:
        table.add_row("Overall progress", f"{progress * 100:.0f}%")
    return table


STRENGTH_STYLES = {
    "Strong": "green",
    "Moderate": "yellow",
    "Weak": "dim",
}


def insights_table(insights: List[CorrelationInsight]) -> Table:
    """Build a rich table of correlation insights."""
    table = Table(title="Habit Correlations")
    table.add_column("Insight")
    table.add_column("r", justify="right")
    table.add_column("Strength")

    for insight in insights:
        style = STRENGTH_STYLES.get(insight.strength_label, "")
        table.add_row(
            escape(insight.description),
            f"{insight.correlation:.2f}",
            f"[{style}]{insight.strength_label}[/{style}] {int(insight.strength * 100)}%",
        )
    return table


def report_table(report: WeeklyReport) -> Table:
    """Build a rich table with the report's per-day breakdown."""
    table = Table(title="Daily Breakdown")
    table.add_column("Day")
    table.add_column("Date")
    table.add_column("Completed", justify="right")

    for day in report.daily:
        table.add_row(day.name, day.day.isoformat(), f"{day.completion_rate:.0f}%")
    return table


def format_time(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")
