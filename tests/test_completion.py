"""Tests for day completion and progress."""

from datetime import date

import pytest

from habitlog.core.completion import (
    CompletionProgress,
    completion_progress,
    count_completed,
    get_completions,
    is_day_complete,
)
from habitlog.core.models import Habit

DAY = date(2025, 1, 10)


class TestSingleCompletion:
    """Tests for habits with a target of one."""

    def test_no_entry(self, tracker, habit):
        """No entry means not complete."""
        assert not tracker.is_day_complete(habit, DAY)
        assert tracker.progress(habit, DAY) == CompletionProgress(0, 1, 0.0)

    def test_completed_status(self, tracker, habit):
        """A completed status completes the day."""
        tracker.entries.set_status(habit, DAY, "completed")

        assert tracker.is_day_complete(habit, DAY)
        assert tracker.progress(habit, DAY) == CompletionProgress(1, 1, 1.0)

    @pytest.mark.parametrize("status", ["failed", "skipped"])
    def test_other_statuses(self, tracker, habit, status):
        """Failed and skipped days are not complete."""
        tracker.entries.set_status(habit, DAY, status)

        assert not tracker.is_day_complete(habit, DAY)

    def test_completion_on_single_habit(self, tracker, habit):
        """A completed completion derives a completed day."""
        tracker.add_completion(habit, DAY, "completed")

        assert tracker.is_day_complete(habit, DAY)


class TestMultiCompletion:
    """Tests for habits with a target above one."""

    def test_partial_progress(self, tracker, multi_habit):
        """Two of three done is 2/3 and not complete."""
        tracker.add_completion(multi_habit, DAY, "completed")
        tracker.add_completion(multi_habit, DAY, "completed")
        tracker.add_completion(multi_habit, DAY, "failed")

        progress = tracker.progress(multi_habit, DAY)

        assert progress.completed == 2
        assert progress.target == 3
        assert progress.percentage == pytest.approx(0.667, abs=0.001)
        assert not tracker.is_day_complete(multi_habit, DAY)

    def test_target_reached(self, tracker, multi_habit):
        """Reaching the target completes the day."""
        for _ in range(3):
            tracker.add_completion(multi_habit, DAY)

        assert tracker.is_day_complete(multi_habit, DAY)
        assert tracker.progress(multi_habit, DAY).percentage == 1.0

    def test_over_target_is_capped(self, tracker, multi_habit):
        """Count is not capped but the percentage is."""
        for _ in range(5):
            tracker.add_completion(multi_habit, DAY)

        progress = tracker.progress(multi_habit, DAY)

        assert progress.completed == 5
        assert progress.percentage == 1.0

    def test_percentage_never_decreases(self, tracker, multi_habit):
        """Adding completed completions only raises progress."""
        previous = tracker.progress(multi_habit, DAY).percentage
        for _ in range(4):
            tracker.add_completion(multi_habit, DAY)
            current = tracker.progress(multi_habit, DAY).percentage
            assert current >= previous
            previous = current

    def test_percentage_never_increases_on_removal(self, tracker, multi_habit):
        """Removing completed completions only lowers progress."""
        added = [tracker.add_completion(multi_habit, DAY) for _ in range(4)]
        tracker.add_completion(multi_habit, DAY, "failed")

        previous = tracker.progress(multi_habit, DAY).percentage
        assert previous == 1.0
        for completion in added:
            assert tracker.remove_completion(multi_habit, completion.id, DAY)
            current = tracker.progress(multi_habit, DAY).percentage
            assert current <= previous
            previous = current

        assert previous == 0.0
        assert not tracker.is_day_complete(multi_habit, DAY)

    def test_status_alone_does_not_complete(self, tracker, multi_habit):
        """Multi-completion days count completions, not the status."""
        tracker.entries.set_status(multi_habit, DAY, "completed")

        assert not tracker.is_day_complete(multi_habit, DAY)
        assert tracker.progress(multi_habit, DAY).completed == 0


class TestHelpers:
    """Tests for lower-level helpers."""

    def test_get_completions_empty(self, tracker, habit):
        """No entry yields no completions."""
        assert get_completions(tracker.entries, habit, DAY) == []

    def test_count_completed(self, tracker, multi_habit):
        """Only completed completions count."""
        tracker.add_completion(multi_habit, DAY, "completed")
        tracker.add_completion(multi_habit, DAY, "skipped")

        assert count_completed(tracker.entries, multi_habit, DAY) == 1

    def test_zero_target(self, tracker):
        """A zero target never completes and reports no progress."""
        habit = Habit(title="Broken", target_completions_per_day=0)

        assert completion_progress(tracker.entries, habit, DAY) == CompletionProgress(0, 0, 0.0)
        assert not is_day_complete(tracker.entries, habit, DAY)
