"""Tests for streak calculation."""

from datetime import date, timedelta

from habitlog.core.models import DateRange


def days_ago(today, n):
    return today - timedelta(days=n)


class TestCurrentStreak:
    """Tests for the streak ending today."""

    def test_no_entries(self, tracker, habit, today):
        """Nothing logged means no streak."""
        assert tracker.current_streak(habit, today) == 0

    def test_simple_streak(self, tracker, habit, today):
        """Two completed days before a failed one."""
        tracker.entries.set_status(habit, today, "completed")
        tracker.entries.set_status(habit, days_ago(today, 1), "completed")
        tracker.entries.set_status(habit, days_ago(today, 2), "failed")

        assert tracker.current_streak(habit, today) == 2

    def test_today_not_done(self, tracker, habit, today):
        """An incomplete today ends the streak at zero."""
        tracker.entries.set_status(habit, days_ago(today, 1), "completed")

        assert tracker.current_streak(habit, today) == 0

    def test_gap_breaks_streak(self, tracker, habit, today):
        """A day without an entry stops the walk."""
        tracker.entries.set_status(habit, today, "completed")
        tracker.entries.set_status(habit, days_ago(today, 2), "completed")

        assert tracker.current_streak(habit, today) == 1

    def test_multi_completion(self, tracker, multi_habit, today):
        """Partial days don't count."""
        for _ in range(3):
            tracker.add_completion(multi_habit, today)
        tracker.add_completion(multi_habit, days_ago(today, 1))

        assert tracker.current_streak(multi_habit, today) == 1


class TestLongestStreak:
    """Tests for the longest run within a range."""

    def test_empty(self, tracker, habit, today):
        """No entries, no streak."""
        assert tracker.longest_streak(habit, DateRange.last_n_days(30, today)) == 0

    def test_missing_day_bridges(self, tracker, habit):
        """A day with no entry doesn't reset; a failed completion does."""
        day1 = date(2025, 1, 1)
        tracker.add_completion(habit, day1, "completed")
        tracker.add_completion(habit, day1 + timedelta(days=2), "completed")
        tracker.add_completion(habit, day1 + timedelta(days=3), "failed")
        tracker.add_completion(habit, day1 + timedelta(days=4), "completed")

        date_range = DateRange(day1, day1 + timedelta(days=4))

        assert tracker.longest_streak(habit, date_range) == 2

    def test_entry_without_completions_bridges(self, tracker, habit):
        """A failed status with no completions doesn't reset."""
        day1 = date(2025, 1, 1)
        tracker.entries.set_status(habit, day1, "completed")
        tracker.entries.set_status(habit, day1 + timedelta(days=1), "failed")
        tracker.entries.set_status(habit, day1 + timedelta(days=2), "completed")

        date_range = DateRange(day1, day1 + timedelta(days=2))

        assert tracker.longest_streak(habit, date_range) == 2

    def test_range_limits_entries(self, tracker, habit):
        """Entries outside the range are ignored."""
        day1 = date(2025, 1, 1)
        for offset in range(5):
            tracker.entries.set_status(habit, day1 + timedelta(days=offset), "completed")

        date_range = DateRange(day1 + timedelta(days=3), day1 + timedelta(days=10))

        assert tracker.longest_streak(habit, date_range) == 2

    def test_store_order_does_not_matter(self, tracker, habit):
        """Entries logged out of order are walked by day."""
        day1 = date(2025, 1, 1)
        tracker.add_completion(habit, day1 + timedelta(days=2), "completed")
        tracker.add_completion(habit, day1 + timedelta(days=1), "failed")
        tracker.add_completion(habit, day1, "completed")

        assert tracker.longest_streak(habit, DateRange(day1, day1 + timedelta(days=2))) == 1

    def test_never_negative(self, tracker, habit, today):
        """Only failures still give zero."""
        for offset in range(3):
            tracker.add_completion(habit, days_ago(today, offset), "failed")

        assert tracker.longest_streak(habit, DateRange.last_n_days(7, today)) == 0
        assert tracker.current_streak(habit, today) == 0
