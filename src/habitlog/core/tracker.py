"""Tracker: habits, entries and persistence wired together."""

import logging
from datetime import date
from typing import List, Optional

from .completion import CompletionProgress, completion_progress, is_day_complete
from .db import KeyValueBackend, SQLiteBackend
from .events import EventBus
from .insights import CorrelationInsight, correlation_insights, overall_completion_rate
from .models import (
    Completion,
    DateRange,
    Entry,
    Habit,
    HabitDuration,
    HabitStatistics,
)
from .report import WeeklyReport, weekly_report
from .stats import get_statistics, overall_progress
from .store import EntryStore, HabitStore, validate_habit_changes
from .streaks import current_streak, longest_streak

logger = logging.getLogger(__name__)

PRESENTATION_FIELDS = {"frequency", "custom_days", "color", "icon"}


class Tracker:
    """Entry point for everything the CLI does with habits.

    The backend is passed in; use `MemoryBackend` for tests and
    `open_tracker()` for the on-disk store.
    """

    def __init__(self, backend: KeyValueBackend, events: Optional[EventBus] = None):
        self.events = events or EventBus()
        self.habits = HabitStore(backend, self.events)
        self.entries = EntryStore(backend, self.events)

    # Habits

    def create_habit(
        self,
        title: str,
        description: str = "",
        polarity: str = "positive",
        target_completions_per_day: int = 1,
        duration: Optional[HabitDuration] = None,
        start_date: Optional[date] = None,
        **presentation,
    ) -> Habit:
        """Create and store a new habit.

        `presentation` may only hold frequency, custom_days, color and icon.

        Raises:
            ValueError: If title is empty, target is below 1, polarity unknown
                or a presentation field is unknown or invalid
        """
        unknown = set(presentation) - PRESENTATION_FIELDS
        if unknown:
            raise ValueError(f"Unknown habit fields: {', '.join(sorted(unknown))}")

        fields = validate_habit_changes(dict(
            presentation,
            title=title,
            description=description or "",
            polarity=polarity,
            target_completions_per_day=target_completions_per_day,
            duration=duration or HabitDuration.unlimited(),
            start_date=start_date or date.today(),
        ))
        habit = Habit(**fields)
        self.habits.add_habit(habit)
        logger.info("Created habit %s (%s)", habit.title, habit.id)
        return habit

    def find_habit(self, ref: str) -> Optional[Habit]:
        return self.habits.find_habit(ref)

    def update_habit(self, habit_id: str, **changes) -> Optional[Habit]:
        return self.habits.update_habit(habit_id, **changes)

    def delete_habit(self, habit_id: str) -> bool:
        """Delete a habit and all its entries."""
        if not self.habits.delete_habit(habit_id):
            return False
        removed = self.entries.delete_entries_for_habit(habit_id)
        logger.info("Deleted habit %s and %d entries", habit_id, removed)
        return True

    def all_habits(self) -> List[Habit]:
        return self.habits.habits

    # Logging activity

    def record(self, habit: Habit, day: date, status: str = "completed", notes: str = "") -> Entry:
        """Log a status for a day the way the habit expects it.

        Multi-completion habits get a new completion; others have the day's
        status overwritten.
        """
        if habit.is_multi_completion:
            self.entries.add_completion(habit, day, status, notes)
            return self.entries.get_entry(habit.id, day)
        return self.entries.set_status(habit, day, status, notes)

    def add_completion(self, habit: Habit, day: date, status: str = "completed", notes: str = "") -> Completion:
        return self.entries.add_completion(habit, day, status, notes)

    def remove_completion(self, habit: Habit, completion_id: str, day: date) -> bool:
        return self.entries.remove_completion(habit, completion_id, day)

    def update_completion(
        self, habit: Habit, completion_id: str, day: date, status: str, notes: str = ""
    ) -> Optional[Completion]:
        return self.entries.update_completion(habit, completion_id, day, status, notes)

    # Queries

    def is_day_complete(self, habit: Habit, day: Optional[date] = None) -> bool:
        return is_day_complete(self.entries, habit, day)

    def progress(self, habit: Habit, day: Optional[date] = None) -> CompletionProgress:
        return completion_progress(self.entries, habit, day)

    def current_streak(self, habit: Habit, today: Optional[date] = None) -> int:
        return current_streak(self.entries, habit, today)

    def longest_streak(self, habit: Habit, date_range: DateRange) -> int:
        return longest_streak(self.entries, habit, date_range)

    def statistics(self, habit: Habit, date_range: DateRange, today: Optional[date] = None) -> HabitStatistics:
        return get_statistics(self.entries, habit, date_range, today)

    def overall_progress(self, habit: Habit) -> float:
        return overall_progress(self.entries, habit)

    def insights(self, date_range: DateRange, threshold: float = 0.3) -> List[CorrelationInsight]:
        return correlation_insights(self.entries, self.all_habits(), date_range, threshold)

    def completion_rate(self, date_range: DateRange) -> float:
        return overall_completion_rate(self.entries, self.all_habits(), date_range)

    def weekly_report(
        self,
        week_of: Optional[date] = None,
        week_start: int = 0,
        today: Optional[date] = None,
    ) -> WeeklyReport:
        return weekly_report(self.entries, self.all_habits(), week_of, week_start, today)


def open_tracker(events: Optional[EventBus] = None) -> Tracker:
    """Open the tracker backed by the on-disk database."""
    return Tracker(SQLiteBackend(), events)
