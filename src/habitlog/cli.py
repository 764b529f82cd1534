"""Main CLI for habitlog."""

from datetime import date

import click

from . import __version__
from .core.config import get_default_config_yaml, load_config
from .core.db import init_db
from .core.tracker import open_tracker
from .commands.common import AppContext, pass_app, resolve_habit
from .commands.display import format_date_header, format_habit_status
from .commands.habits import habits
from .commands.stats import insights, report, stats
from .logging_setup import setup_logging


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option("--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, version, verbose):
    """habitlog - habit tracking with streaks and insights.

    Run without arguments to see today's habits.
    """
    if version:
        click.echo(f"habitlog v{__version__}")
        return

    config = load_config()
    setup_logging("DEBUG" if verbose else config.log_level)
    ctx.obj = AppContext(config=config, tracker=open_tracker())

    if ctx.invoked_subcommand is None:
        ctx.invoke(view_today)


@cli.command("today")
@pass_app
def view_today(app: AppContext):
    """Show today's habits (default command)."""
    tracker = app.tracker
    today = date.today()

    click.echo(f"\n{format_date_header(today, app.config.date_format)}\n")

    habit_list = tracker.all_habits()
    if not habit_list:
        click.echo("  (no habits yet - add one with 'habitlog habits add')")
        return

    for habit in habit_list:
        if habit.is_finished(today):
            continue
        progress = tracker.progress(habit, today)
        complete = tracker.is_day_complete(habit, today)
        streak = tracker.current_streak(habit, today)
        click.echo(f"  {format_habit_status(habit, progress, complete, streak)}")


@cli.command("done")
@click.argument("name_or_id")
@pass_app
def quick_done(app: AppContext, name_or_id: str):
    """Mark a habit as done today."""
    tracker = app.tracker
    habit = resolve_habit(tracker, name_or_id)
    today = date.today()

    if not habit.is_multi_completion and tracker.is_day_complete(habit, today):
        click.echo(f"Already done today: {habit.title}")
        return

    tracker.record(habit, today, "completed")
    progress = tracker.progress(habit, today)
    if habit.is_multi_completion:
        click.echo(f"Marked done: {habit.title} ({progress.completed}/{progress.target})")
    else:
        click.echo(f"Marked done: {habit.title}")


@cli.command("init")
@pass_app
def init(app: AppContext):
    """Initialize the database and write a default config."""
    init_db()
    config_file = app.config.config_file
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(get_default_config_yaml())
        click.echo(f"Wrote config: {config_file}")
    click.echo("Database initialized.")


cli.add_command(habits)
cli.add_command(stats)
cli.add_command(insights)
cli.add_command(report)


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
