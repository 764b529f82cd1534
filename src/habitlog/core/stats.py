"""Statistics and progress for habitlog."""

from datetime import date, timedelta
from typing import Optional

from .completion import is_day_complete
from .models import DateRange, Habit, HabitStatistics
from .store import EntryStore
from .streaks import current_streak, longest_streak


def get_statistics(
    entries: EntryStore,
    habit: Habit,
    date_range: DateRange,
    today: Optional[date] = None,
) -> HabitStatistics:
    """Roll up a habit's entries over a date range.

    Days are counted from entries only: a day with no entry does not count
    towards any total. The current streak ignores the range and is always
    measured back from today.
    """
    habit_entries = entries.get_entries(habit.id, date_range)

    total_days = len(habit_entries)
    completed_days = 0
    failed_days = 0
    skipped_days = 0

    for entry in habit_entries:
        complete = is_day_complete(entries, habit, entry.day)
        if complete:
            completed_days += 1
        elif entry.total_completions > 0:
            failed_days += 1
        if entry.total_completions == 0:
            skipped_days += 1

    completion_rate = completed_days / total_days * 100 if total_days > 0 else 0.0

    return HabitStatistics(
        habit=habit,
        total_days=total_days,
        completed_days=completed_days,
        failed_days=failed_days,
        skipped_days=skipped_days,
        current_streak=current_streak(entries, habit, today),
        longest_streak=longest_streak(entries, habit, date_range),
        completion_rate=completion_rate,
    )


def overall_progress(entries: EntryStore, habit: Habit) -> float:
    """Fraction of a fixed-duration habit's days that were completed.

    Returns 0 for unlimited habits and zero-length durations.
    """
    total_days = habit.total_days
    if not total_days or total_days <= 0:
        return 0.0

    completed = sum(
        1 for offset in range(total_days)
        if is_day_complete(entries, habit, habit.start_date + timedelta(days=offset))
    )
    return completed / total_days
