"""Statistics, insights and report commands for habitlog"""

from datetime import date
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from ..core.models import DateRange
from ..utils.dates import parse_date_arg
from .common import AppContext, pass_app, resolve_habit
from .display import insights_table, report_table, statistics_table

console = Console()

INSIGHT_STYLES = {
    "success": "green",
    "good": "cyan",
    "warning": "yellow",
}


@click.command("stats")
@click.argument("name_or_id", required=False)
@click.option("--days", type=int, help="Look-back window in days")
@click.option("--since", "since_arg", help="Start of the range (overrides --days)")
@pass_app
def stats(app: AppContext, name_or_id: Optional[str], days: Optional[int], since_arg: Optional[str]):
    """Show statistics for one habit, or all of them."""
    tracker = app.tracker
    today = date.today()

    if since_arg:
        date_range = DateRange(parse_date_arg(since_arg), today)
    else:
        date_range = DateRange.last_n_days(days if days is not None else app.config.stats_days, today)

    if name_or_id:
        habit_list = [resolve_habit(tracker, name_or_id)]
    else:
        habit_list = tracker.all_habits()

    if not habit_list:
        console.print("[dim]No habits found[/dim]")
        return

    console.print()
    console.print(f"[bold]habitlog Stats: {date_range.start.isoformat()} to {date_range.end.isoformat()}[/bold]")
    console.print()

    for habit in habit_list:
        habit_stats = tracker.statistics(habit, date_range, today)
        progress = None if habit.duration.is_unlimited else tracker.overall_progress(habit)
        console.print(statistics_table(habit_stats, progress))
        console.print()


@click.command("insights")
@click.option("--days", type=int, help="Look-back window in days")
@click.option("--threshold", type=float, help="Minimum |r| to report")
@pass_app
def insights(app: AppContext, days: Optional[int], threshold: Optional[float]):
    """Show which habits tend to happen together."""
    tracker = app.tracker
    window = days if days is not None else app.config.insight_days
    date_range = DateRange.last_n_days(window)
    minimum = threshold if threshold is not None else app.config.insight_threshold

    console.print()
    console.print(f"[bold]Insights: last {window} days[/bold]")
    console.print(f"Overall completion: {tracker.completion_rate(date_range):.1f}%")
    console.print()

    found = tracker.insights(date_range, minimum)
    if not found:
        console.print("[dim]No notable correlations yet[/dim]")
        return

    console.print(insights_table(found))


@click.command("report")
@click.option("--week", "week_arg", default="today", help="Any day in the week to report on")
@pass_app
def report(app: AppContext, week_arg: str):
    """Show the weekly report."""
    weekly = app.tracker.weekly_report(parse_date_arg(week_arg), app.config.week_start)

    console.print()
    console.print(
        f"[bold]Week of {weekly.week.start.strftime(app.config.date_format)}"
        f" - {weekly.week.end.strftime(app.config.date_format)}[/bold]"
    )
    console.print("─" * 38)
    console.print(f"Habits:          {weekly.habit_count:>4}")
    console.print(f"Completion rate: {weekly.completion_rate:>5.1f}%")
    console.print(f"Streaks kept:    {len(weekly.streaks_kept):>4}")
    console.print(f"Streaks broken:  {len(weekly.streaks_broken):>4}")
    console.print()

    if weekly.streaks_kept:
        console.print("[bold]Streaks Kept[/bold]")
        for info in weekly.streaks_kept:
            console.print(f"  {escape(info.habit.title)}: {info.length} days")
        console.print()

    if weekly.streaks_broken:
        console.print("[bold]Streaks Broken[/bold]")
        for info in weekly.streaks_broken:
            console.print(f"  {escape(info.habit.title)}")
        console.print()

    if weekly.skipped:
        console.print("[bold]Skipped[/bold]")
        for skipped in weekly.skipped:
            console.print(f"  {escape(skipped.habit.title)}: {skipped.count} times")
        console.print()

    console.print(report_table(weekly))
    console.print()

    for insight in weekly.insights:
        style = INSIGHT_STYLES.get(insight.kind, "")
        console.print(f"[{style}]{insight.title}[/{style}] {insight.message}")
