"""Cross-habit analysis for habitlog: correlations and completion rates."""

import math
from dataclasses import dataclass
from itertools import combinations
from typing import List, Sequence

from .models import DateRange, Habit, HabitStatus
from .store import EntryStore

DEFAULT_THRESHOLD = 0.3
STRONG = 0.7
MODERATE = 0.5


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson product-moment correlation of two equal-length series.

    Returns 0 for unequal lengths, fewer than two points, or when either
    series has no variance.
    """
    if len(x) != len(y) or len(x) <= 1:
        return 0.0

    n = len(x)
    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_x2 = sum(a * a for a in x)
    sum_y2 = sum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    denominator = math.sqrt((n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y))

    if denominator == 0:
        return 0.0
    return numerator / denominator


def completion_series(entries: EntryStore, habit: Habit, date_range: DateRange) -> List[float]:
    """One value per day in the range: 1.0 if the day's entry is completed."""
    by_day = {e.day: e for e in entries.get_entries(habit.id, date_range)}
    series = []
    for day in date_range.days():
        entry = by_day.get(day)
        series.append(1.0 if entry is not None and entry.status == HabitStatus.COMPLETED.value else 0.0)
    return series


@dataclass
class CorrelationInsight:
    """A notable relationship between two habits."""
    habit1: Habit
    habit2: Habit
    correlation: float

    @property
    def strength(self) -> float:
        return abs(self.correlation)

    @property
    def strength_label(self) -> str:
        if self.strength > STRONG:
            return "Strong"
        elif self.strength > MODERATE:
            return "Moderate"
        return "Weak"

    @property
    def description(self) -> str:
        first = self.habit1.title.lower()
        second = self.habit2.title.lower()
        if self.correlation > 0:
            return f"You {first} more often on days when you also {second}"
        return f"You {first} less often on days when you {second}"


def correlation_insights(
    entries: EntryStore,
    habits: List[Habit],
    date_range: DateRange,
    threshold: float = DEFAULT_THRESHOLD,
) -> List[CorrelationInsight]:
    """Correlate every pair of habits and keep those above the threshold.

    Sorted strongest first.
    """
    if len(habits) < 2:
        return []

    series = {h.id: completion_series(entries, h, date_range) for h in habits}
    insights = []

    for first, second in combinations(habits, 2):
        r = pearson_correlation(series[first.id], series[second.id])
        if abs(r) > threshold:
            insights.append(CorrelationInsight(first, second, r))

    return sorted(insights, key=lambda i: i.strength, reverse=True)


def completed_entry_count(entries: EntryStore, habit: Habit, date_range: DateRange) -> int:
    return sum(
        1 for e in entries.get_entries(habit.id, date_range)
        if e.status == HabitStatus.COMPLETED.value
    )


def overall_completion_rate(entries: EntryStore, habits: List[Habit], date_range: DateRange) -> float:
    """Percentage of possible habit-days in the range with a completed entry."""
    possible = len(habits) * len(date_range)
    if possible <= 0:
        return 0.0
    completed = sum(completed_entry_count(entries, h, date_range) for h in habits)
    return completed / possible * 100
