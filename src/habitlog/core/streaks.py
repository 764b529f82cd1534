"""Streak calculation for habitlog.

The two streaks treat days without completions differently. The current
streak stops at any day that is not complete, logged or not. The longest
streak only resets on a day that has completions but is not complete; an
entry with no completions is stepped over without resetting.
"""

from datetime import date, timedelta
from typing import Optional

from .completion import is_day_complete
from .models import DateRange, Habit
from .store import EntryStore


def current_streak(entries: EntryStore, habit: Habit, today: Optional[date] = None) -> int:
    """Count consecutive complete days walking back from today."""
    current_date = today or date.today()
    streak = 0

    while is_day_complete(entries, habit, current_date):
        streak += 1
        current_date -= timedelta(days=1)

    return streak


def longest_streak(entries: EntryStore, habit: Habit, date_range: DateRange) -> int:
    """Longest run of complete days among the habit's entries in a range."""
    habit_entries = sorted(entries.get_entries(habit.id, date_range), key=lambda e: e.day)
    max_streak = 0
    running = 0

    for entry in habit_entries:
        if is_day_complete(entries, habit, entry.day):
            running += 1
            max_streak = max(max_streak, running)
        elif entry.total_completions > 0:
            running = 0

    return max_streak
