"""Day completion rules for habitlog."""

from datetime import date
from typing import List, NamedTuple, Optional

from .models import Completion, Habit, HabitStatus
from .store import EntryStore


class CompletionProgress(NamedTuple):
    """How much of a day's target is done."""
    completed: int
    target: int
    percentage: float


def get_completions(entries: EntryStore, habit: Habit, day: Optional[date] = None) -> List[Completion]:
    """Get a day's completions, empty if nothing was logged."""
    entry = entries.get_entry(habit.id, day or date.today())
    if entry is None:
        return []
    return list(entry.completions)


def count_completed(entries: EntryStore, habit: Habit, day: Optional[date] = None) -> int:
    return sum(
        1 for c in get_completions(entries, habit, day)
        if c.status == HabitStatus.COMPLETED.value
    )


def is_day_complete(entries: EntryStore, habit: Habit, day: Optional[date] = None) -> bool:
    """Check if a habit met its target on a day.

    Multi-completion habits need `target` completed completions. Others need
    the day's entry to have status completed; no entry means not complete.
    """
    if day is None:
        day = date.today()

    if habit.target_completions_per_day > 1:
        return count_completed(entries, habit, day) >= habit.target_completions_per_day

    entry = entries.get_entry(habit.id, day)
    if entry is None:
        return False
    return entry.status == HabitStatus.COMPLETED.value


def completion_progress(
    entries: EntryStore,
    habit: Habit,
    day: Optional[date] = None,
) -> CompletionProgress:
    """Get (completed, target, percentage) for a day.

    The completed count is not capped; the percentage is capped at 1.0.
    """
    if day is None:
        day = date.today()

    target = habit.target_completions_per_day
    if target > 1:
        completed = count_completed(entries, habit, day)
        percentage = min(completed / target, 1.0)
        return CompletionProgress(completed, target, percentage)

    if target <= 0:
        return CompletionProgress(0, target, 0.0)

    done = is_day_complete(entries, habit, day)
    return CompletionProgress(1 if done else 0, 1, 1.0 if done else 0.0)
