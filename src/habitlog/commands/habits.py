"""Habit-related CLI commands for habitlog."""

from calendar import monthrange
from datetime import date
from typing import Optional

import click

from ..core.completion import get_completions
from ..core.models import STATUS_VALUES, Completion, Habit, HabitDuration, HabitFrequency
from ..utils.dates import parse_date_arg, parse_month
from .common import AppContext, pass_app, resolve_habit
from .display import format_completions, format_habit_status, format_habits_list, format_time


@click.group()
def habits():
    """Manage habit tracking."""


def _find_completion(habit: Habit, completions, completion_ref: str) -> Completion:
    matches = [c for c in completions if c.id.startswith(completion_ref)]
    if len(matches) != 1:
        raise click.ClickException(f"Completion not found for {habit.title}: {completion_ref}")
    return matches[0]


def _record(app: AppContext, name_or_id: str, date_arg: str, note: Optional[str], status: str) -> None:
    tracker = app.tracker
    habit = resolve_habit(tracker, name_or_id)
    day = parse_date_arg(date_arg)

    if not habit.is_multi_completion and status == "completed" and tracker.is_day_complete(habit, day):
        click.echo(f"Already completed on {day.isoformat()}")
        return

    tracker.record(habit, day, status, note or "")

    progress = tracker.progress(habit, day)
    if habit.is_multi_completion:
        click.echo(f"Logged {status}: {habit.title} ({day.isoformat()}) {progress.completed}/{progress.target}")
    else:
        click.echo(f"Marked {status}: {habit.title} ({day.isoformat()})")

    streak = tracker.current_streak(habit)
    if streak > 1:
        click.echo(f"  Streak: {streak}")


@habits.command("list")
@pass_app
def list_habits(app: AppContext):
    """List habits with today's progress."""
    tracker = app.tracker
    habit_list = tracker.all_habits()

    if not habit_list:
        click.echo("No habits found.")
        return

    today = date.today()
    progress_map = {h.id: tracker.progress(h, today) for h in habit_list}
    complete_map = {h.id: tracker.is_day_complete(h, today) for h in habit_list}
    streak_map = {h.id: tracker.current_streak(h, today) for h in habit_list}

    click.echo(format_habits_list(habit_list, progress_map, complete_map, streak_map))


@habits.command("add")
@click.argument("title")
@click.option("--description", "-D", default="", help="Longer description")
@click.option("--negative", is_flag=True, help="A habit to break rather than build")
@click.option("--target", "-t", default=1, type=int, help="Completions needed per day")
@click.option("--days", type=int, help="Run for a fixed number of days")
@click.option("--until", "until_arg", help="Run until this date")
@click.option("--start", "start_arg", default="today", help="Start date")
@click.option("--frequency", "-f", type=click.Choice([f.value for f in HabitFrequency]), default="daily")
@click.option("--color", default="blue", help="Color token")
@click.option("--icon", default="star.fill", help="Icon token")
@pass_app
def add_habit(
    app: AppContext,
    title: str,
    description: str,
    negative: bool,
    target: int,
    days: Optional[int],
    until_arg: Optional[str],
    start_arg: str,
    frequency: str,
    color: str,
    icon: str,
):
    """Add a new habit."""
    if days is not None and until_arg:
        raise click.UsageError("Use either --days or --until, not both")

    start_date = parse_date_arg(start_arg)
    try:
        if days is not None:
            duration = HabitDuration.fixed(days)
        elif until_arg:
            duration = HabitDuration.custom(parse_date_arg(until_arg))
        else:
            duration = HabitDuration.unlimited()

        habit = app.tracker.create_habit(
            title,
            description=description,
            polarity="negative" if negative else "positive",
            target_completions_per_day=target,
            duration=duration,
            start_date=start_date,
            frequency=frequency,
            color=color,
            icon=icon,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    target_text = f", {habit.target_completions_per_day}x per day" if habit.is_multi_completion else ""
    click.echo(f"Created habit: {habit.title} ({habit.duration.get_display()}{target_text})")


@habits.command("edit")
@click.argument("name_or_id")
@click.option("--title", "-n", "new_title", help="New title")
@click.option("--description", "-D", help="New description")
@click.option("--target", "-t", type=int, help="New completions per day")
@click.option("--color", help="New color token")
@click.option("--icon", help="New icon token")
@pass_app
def edit_habit(
    app: AppContext,
    name_or_id: str,
    new_title: Optional[str],
    description: Optional[str],
    target: Optional[int],
    color: Optional[str],
    icon: Optional[str],
):
    """Edit a habit. History is kept as is."""
    habit = resolve_habit(app.tracker, name_or_id)

    changes = {}
    if new_title is not None:
        changes["title"] = new_title
    if description is not None:
        changes["description"] = description
    if target is not None:
        changes["target_completions_per_day"] = target
    if color is not None:
        changes["color"] = color
    if icon is not None:
        changes["icon"] = icon

    if not changes:
        click.echo("Nothing to change.")
        return

    try:
        updated = app.tracker.update_habit(habit.id, **changes)
    except ValueError as e:
        raise click.ClickException(str(e))

    if updated:
        click.echo(f"Updated: {updated.title}")


@habits.command("delete")
@click.argument("name_or_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@pass_app
def delete(app: AppContext, name_or_id: str, yes: bool):
    """Delete a habit and all its history."""
    habit = resolve_habit(app.tracker, name_or_id)

    if not yes:
        click.confirm(f"Delete '{habit.title}' and all its history?", abort=True)

    if app.tracker.delete_habit(habit.id):
        click.echo(f"Deleted: {habit.title}")


@habits.command("done")
@click.argument("name_or_id")
@click.option("--date", "-d", "date_arg", default="today", help="Date")
@click.option("--note", "-n", help="Optional note")
@pass_app
def mark_done(app: AppContext, name_or_id: str, date_arg: str, note: Optional[str]):
    """Mark a habit as done for today (or a specific date)."""
    _record(app, name_or_id, date_arg, note, "completed")


@habits.command("fail")
@click.argument("name_or_id")
@click.option("--date", "-d", "date_arg", default="today", help="Date")
@click.option("--note", "-n", help="Optional note")
@pass_app
def mark_failed(app: AppContext, name_or_id: str, date_arg: str, note: Optional[str]):
    """Mark a habit as failed."""
    _record(app, name_or_id, date_arg, note, "failed")


@habits.command("skip")
@click.argument("name_or_id")
@click.option("--date", "-d", "date_arg", default="today", help="Date")
@click.option("--note", "-n", help="Optional note")
@pass_app
def mark_skipped(app: AppContext, name_or_id: str, date_arg: str, note: Optional[str]):
    """Mark a habit as skipped."""
    _record(app, name_or_id, date_arg, note, "skipped")


@habits.command("log")
@click.argument("name_or_id")
@click.option("--status", "-s", type=click.Choice(STATUS_VALUES), default="completed")
@click.option("--date", "-d", "date_arg", default="today", help="Date")
@click.option("--note", "-n", default="", help="Optional note")
@pass_app
def log_completion(app: AppContext, name_or_id: str, status: str, date_arg: str, note: str):
    """Add one completion to a day, whatever the habit's target."""
    habit = resolve_habit(app.tracker, name_or_id)
    day = parse_date_arg(date_arg)

    completion = app.tracker.add_completion(habit, day, status, note)
    progress = app.tracker.progress(habit, day)
    click.echo(
        f"Logged {status}: {habit.title} ({day.isoformat()}) "
        f"<{completion.id[:8]}> {progress.completed}/{progress.target}"
    )


@habits.command("completions")
@click.argument("name_or_id")
@click.option("--date", "-d", "date_arg", default="today", help="Date")
@pass_app
def list_completions(app: AppContext, name_or_id: str, date_arg: str):
    """Show the completions logged on a day."""
    habit = resolve_habit(app.tracker, name_or_id)
    day = parse_date_arg(date_arg)
    click.echo(format_completions(habit, day, get_completions(app.tracker.entries, habit, day)))


@habits.command("undo")
@click.argument("name_or_id")
@click.option("--date", "-d", "date_arg", default="today", help="Date")
@click.option("--completion", "-c", "completion_ref", help="Completion id (defaults to the latest)")
@pass_app
def undo_completion(app: AppContext, name_or_id: str, date_arg: str, completion_ref: Optional[str]):
    """Remove a completion from a day."""
    habit = resolve_habit(app.tracker, name_or_id)
    day = parse_date_arg(date_arg)
    completions = get_completions(app.tracker.entries, habit, day)

    if not completions:
        click.echo(f"No completions found for {day.isoformat()}")
        return

    if completion_ref:
        completion = _find_completion(habit, completions, completion_ref)
    else:
        completion = completions[-1]

    app.tracker.remove_completion(habit, completion.id, day)
    click.echo(f"Removed completion: {habit.title} ({day.isoformat()}) <{completion.id[:8]}>")


@habits.command("update")
@click.argument("name_or_id")
@click.argument("completion_ref")
@click.option("--status", "-s", type=click.Choice(STATUS_VALUES), required=True)
@click.option("--date", "-d", "date_arg", default="today", help="Date")
@click.option("--note", "-n", default="", help="Replacement note")
@pass_app
def update_completion(
    app: AppContext,
    name_or_id: str,
    completion_ref: str,
    status: str,
    date_arg: str,
    note: str,
):
    """Change the status or note of a logged completion."""
    habit = resolve_habit(app.tracker, name_or_id)
    day = parse_date_arg(date_arg)
    completion = _find_completion(habit, get_completions(app.tracker.entries, habit, day), completion_ref)

    app.tracker.update_completion(habit, completion.id, day, status, note)
    click.echo(f"Updated completion <{completion.id[:8]}>: {status}")


@habits.command("status")
@click.argument("name_or_id")
@pass_app
def status(app: AppContext, name_or_id: str):
    """Show detailed status for a habit."""
    tracker = app.tracker
    habit = resolve_habit(tracker, name_or_id)

    today = date.today()
    progress = tracker.progress(habit, today)
    complete = tracker.is_day_complete(habit, today)
    streak = tracker.current_streak(habit, today)

    click.echo(f"\n== {habit.title} ==")
    if habit.description:
        click.echo(habit.description)
    click.echo(f"Polarity: {habit.polarity}")
    click.echo(f"Target: {habit.target_completions_per_day} per day")
    click.echo(f"Duration: {habit.duration.get_display()} from {habit.start_date.isoformat()}")
    click.echo(f"Created: {format_time(habit.created_at)}")
    click.echo()

    click.echo("Today:")
    click.echo(f"  Completed: {progress.completed}/{progress.target}")
    click.echo(f"  Progress: {int(progress.percentage * 100)}%")
    click.echo(f"  Streak: {streak}")

    if not habit.duration.is_unlimited:
        click.echo(f"  Overall: {int(tracker.overall_progress(habit) * 100)}%")
        if habit.is_finished(today):
            click.echo("  Finished")
    click.echo()

    click.echo(format_habit_status(habit, progress, complete, streak))


@habits.command("calendar")
@click.argument("name_or_id")
@click.option("--month", "-m", help="Month to show (YYYY-MM), defaults to current")
@pass_app
def calendar(app: AppContext, name_or_id: str, month: Optional[str]):
    """Show habit completion calendar for a month."""
    habit = resolve_habit(app.tracker, name_or_id)
    year, mon = parse_month(month)
    days_in_month = monthrange(year, mon)[1]

    cal = {
        day: app.tracker.is_day_complete(habit, date(year, mon, day))
        for day in range(1, days_in_month + 1)
    }

    month_name = date(year, mon, 1).strftime("%B %Y")
    click.echo(f"\n== {habit.title}: {month_name} ==\n")
    click.echo(" Mo Tu We Th Fr Sa Su")

    first_day = date(year, mon, 1).weekday()  # 0=Monday
    row = " " + "   " * first_day

    for day in range(1, days_in_month + 1):
        mark = " X" if cal[day] else " ."
        row += f"{mark:>3}"

        if (first_day + day - 1) % 7 == 6:
            click.echo(row)
            row = " "

    if row.strip():
        click.echo(row)

    completed_count = sum(1 for v in cal.values() if v)
    click.echo(f"\nCompleted: {completed_count}/{days_in_month} days")
