"""Tests for correlations, completion rates and weekly reports."""

from datetime import date, timedelta

import pytest

from habitlog.core.insights import CorrelationInsight, pearson_correlation
from habitlog.core.models import DateRange, Habit


@pytest.fixture
def month(today):
    """Thirty days ending today."""
    return DateRange.last_n_days(29, today)


class TestPearson:
    """Tests for the correlation coefficient."""

    def test_identical(self):
        """A series correlates perfectly with itself."""
        x = [1.0, 0.0, 1.0, 1.0, 0.0]

        assert pearson_correlation(x, x) == pytest.approx(1.0)

    def test_opposite(self):
        """Inverted series correlate at -1."""
        x = [1.0, 0.0, 1.0, 0.0]
        y = [0.0, 1.0, 0.0, 1.0]

        assert pearson_correlation(x, y) == pytest.approx(-1.0)

    def test_symmetric(self):
        """corr(x, y) == corr(y, x)."""
        x = [1.0, 0.0, 1.0, 1.0, 0.0, 1.0]
        y = [1.0, 1.0, 0.0, 1.0, 0.0, 0.0]

        assert pearson_correlation(x, y) == pytest.approx(pearson_correlation(y, x))

    def test_bounded(self):
        """Results stay within [-1, 1]."""
        x = [1.0, 0.0, 0.0, 1.0, 1.0, 0.0, 1.0]
        y = [0.0, 0.0, 1.0, 1.0, 1.0, 0.0, 0.0]

        assert -1.0 <= pearson_correlation(x, y) <= 1.0

    @pytest.mark.parametrize("x,y", [
        ([], []),
        ([1.0], [1.0]),
        ([1.0, 0.0], [1.0]),
        ([1.0, 1.0, 1.0], [1.0, 0.0, 1.0]),
    ])
    def test_degenerate(self, x, y):
        """Short, unequal or constant series give 0."""
        assert pearson_correlation(x, y) == 0.0


class TestCorrelationInsights:
    """Tests for pairwise habit insights."""

    def test_identical_habits_strong(self, tracker, habit, multi_habit, month):
        """Habits done on the same days are strongly correlated."""
        for offset, day in enumerate(month.days()):
            if offset % 2 == 0:
                tracker.entries.set_status(habit, day, "completed")
                tracker.add_completion(multi_habit, day)

        insights = tracker.insights(month)

        assert len(insights) == 1
        assert insights[0].correlation == pytest.approx(1.0)
        assert insights[0].strength_label == "Strong"
        assert insights[0].description == "You exercise more often on days when you also drink water"

    def test_opposite_habits(self, tracker, habit, multi_habit, month):
        """Alternating habits are negatively correlated."""
        for offset, day in enumerate(month.days()):
            target = habit if offset % 2 == 0 else multi_habit
            tracker.entries.set_status(target, day, "completed")

        insights = tracker.insights(month)

        assert insights[0].correlation == pytest.approx(-1.0)
        assert "less often" in insights[0].description

    def test_constant_habit_excluded(self, tracker, habit, multi_habit, month):
        """A habit never done has no variance and no insight."""
        for offset, day in enumerate(month.days()):
            if offset % 3 == 0:
                tracker.entries.set_status(habit, day, "completed")

        assert tracker.insights(month) == []

    def test_single_habit(self, tracker, habit, month):
        """One habit has nothing to correlate with."""
        assert tracker.insights(month) == []

    def test_threshold(self, tracker, habit, multi_habit, month):
        """Correlations at or below the threshold are dropped."""
        for offset, day in enumerate(month.days()):
            if offset % 2 == 0:
                tracker.entries.set_status(habit, day, "completed")
                tracker.entries.set_status(multi_habit, day, "completed")

        assert tracker.insights(month, threshold=1.0) == []

    def test_sorted_strongest_first(self, tracker, month):
        """Insights come back by descending strength."""
        first = tracker.create_habit("Read")
        second = tracker.create_habit("Write")
        third = tracker.create_habit("Walk")
        for offset, day in enumerate(month.days()):
            if offset % 2 == 0:
                tracker.entries.set_status(first, day, "completed")
                tracker.entries.set_status(second, day, "completed")
            if offset % 2 == 0 or offset % 5 == 0:
                tracker.entries.set_status(third, day, "completed")

        insights = tracker.insights(month, threshold=0.0)
        strengths = [i.strength for i in insights]

        assert strengths == sorted(strengths, reverse=True)

    @pytest.mark.parametrize("r,label", [
        (0.9, "Strong"),
        (-0.75, "Strong"),
        (0.6, "Moderate"),
        (0.4, "Weak"),
    ])
    def test_strength_label(self, r, label):
        """Labels by absolute strength."""
        insight = CorrelationInsight(Habit(title="A"), Habit(title="B"), r)

        assert insight.strength_label == label


class TestCompletionRate:
    """Tests for the cross-habit completion rate."""

    def test_no_habits(self, tracker, month):
        """Nothing to complete gives zero."""
        assert tracker.completion_rate(month) == 0.0

    def test_half(self, tracker, habit, multi_habit, month):
        """Every other day for both habits is 50%."""
        for offset, day in enumerate(month.days()):
            if offset % 2 == 0:
                tracker.entries.set_status(habit, day, "completed")
                tracker.add_completion(multi_habit, day)

        assert tracker.completion_rate(month) == pytest.approx(50.0)


class TestWeeklyReport:
    """Tests for the weekly report."""

    @pytest.fixture
    def report(self, tracker, habit, multi_habit, today):
        monday = date(2025, 1, 13)
        for offset in range(3):
            tracker.entries.set_status(habit, monday + timedelta(days=offset), "completed")
        tracker.entries.set_status(multi_habit, monday, "skipped")
        tracker.add_completion(multi_habit, monday + timedelta(days=1), "failed")
        return tracker.weekly_report(today, today=today)

    def test_week(self, report):
        """Week runs Monday to Sunday."""
        assert report.week == DateRange(date(2025, 1, 13), date(2025, 1, 19))
        assert report.habit_count == 2

    def test_completion_rate(self, report):
        """Three completed out of fourteen habit-days."""
        assert report.completion_rate == pytest.approx(3 / 14 * 100)

    def test_streaks(self, report, habit, multi_habit):
        """Kept and broken streaks."""
        assert [(s.habit, s.length) for s in report.streaks_kept] == [(habit, 3)]
        assert [s.habit for s in report.streaks_broken] == [multi_habit]

    def test_skipped(self, report, multi_habit):
        """Skipped entries are counted per habit."""
        assert [(s.habit, s.count) for s in report.skipped] == [(multi_habit, 1)]

    def test_daily(self, report):
        """One row per weekday."""
        assert [d.name for d in report.daily] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
        assert [d.completion_rate for d in report.daily[:4]] == [50.0, 50.0, 50.0, 0.0]

    def test_insights(self, report):
        """A low week gets a warning plus streak notes."""
        titles = [i.title for i in report.insights]

        assert titles == ["Room for Improvement", "Streaks Maintained", "Streaks Broken"]
        assert report.insights[0].kind == "warning"

    def test_excellent_week(self, tracker, habit, today):
        """Every day done is an excellent week."""
        for day in DateRange.week_of(today).days():
            tracker.entries.set_status(habit, day, "completed")

        report = tracker.weekly_report(today, today=today)

        assert report.completion_rate == 100.0
        assert report.insights[0].title == "Excellent Week!"

    def test_sunday_start(self, tracker, habit, today):
        """Weeks can start on Sunday."""
        report = tracker.weekly_report(today, week_start=6, today=today)

        assert report.week.start == date(2025, 1, 12)
        assert report.daily[0].name == "Sun"

    def test_no_habits(self, tracker, today):
        """An empty tracker reports zero."""
        report = tracker.weekly_report(today, today=today)

        assert report.habit_count == 0
        assert report.completion_rate == 0.0
        assert all(d.completion_rate == 0.0 for d in report.daily)
