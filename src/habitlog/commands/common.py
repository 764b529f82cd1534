"""Shared state and helpers for habitlog commands."""

from dataclasses import dataclass

import click

from ..core.config import Config
from ..core.models import Habit
from ..core.tracker import Tracker


@dataclass
class AppContext:
    """Passed to every command as the click context object."""
    config: Config
    tracker: Tracker


pass_app = click.make_pass_decorator(AppContext)


def resolve_habit(tracker: Tracker, ref: str) -> Habit:
    """Find a habit by title or id.

    Raises:
        click.ClickException: If no habit matches
    """
    habit = tracker.find_habit(ref)
    if habit is None:
        raise click.ClickException(f"Habit not found: {ref}")
    return habit
