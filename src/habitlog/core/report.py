"""Weekly report across all habits."""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from .insights import overall_completion_rate
from .models import WEEKDAY_NAMES, DateRange, Habit, HabitStatus
from .stats import get_statistics
from .store import EntryStore

EXCELLENT_RATE = 80
GOOD_RATE = 60


@dataclass
class StreakInfo:
    habit: Habit
    length: int


@dataclass
class SkippedHabit:
    habit: Habit
    count: int


@dataclass
class DailyBreakdown:
    day: date
    name: str
    completion_rate: float


@dataclass
class WeeklyInsight:
    kind: str  # success, good or warning
    title: str
    message: str


@dataclass
class WeeklyReport:
    week: DateRange
    habit_count: int
    completion_rate: float
    streaks_kept: List[StreakInfo] = field(default_factory=list)
    streaks_broken: List[StreakInfo] = field(default_factory=list)
    skipped: List[SkippedHabit] = field(default_factory=list)
    daily: List[DailyBreakdown] = field(default_factory=list)
    insights: List[WeeklyInsight] = field(default_factory=list)


def _daily_breakdown(entries: EntryStore, habits: List[Habit], week: DateRange) -> List[DailyBreakdown]:
    daily = []
    for day in week.days():
        completed = 0
        for habit in habits:
            entry = entries.get_entry(habit.id, day)
            if entry is not None and entry.status == HabitStatus.COMPLETED.value:
                completed += 1
        rate = completed / len(habits) * 100 if habits else 0.0
        daily.append(DailyBreakdown(day, WEEKDAY_NAMES[day.weekday()], rate))
    return daily


def _weekly_insights(report: WeeklyReport) -> List[WeeklyInsight]:
    rate = int(report.completion_rate)
    insights = []

    if report.completion_rate >= EXCELLENT_RATE:
        insights.append(WeeklyInsight(
            "success",
            "Excellent Week!",
            f"You completed {rate}% of your habits this week. Keep up the great work!",
        ))
    elif report.completion_rate >= GOOD_RATE:
        insights.append(WeeklyInsight(
            "good",
            "Good Progress",
            f"You completed {rate}% of your habits. Try to improve next week!",
        ))
    else:
        insights.append(WeeklyInsight(
            "warning",
            "Room for Improvement",
            f"You completed {rate}% of your habits. Focus on consistency!",
        ))

    if report.streaks_kept:
        insights.append(WeeklyInsight(
            "success",
            "Streaks Maintained",
            f"You kept {len(report.streaks_kept)} habit streak(s) alive this week!",
        ))

    if report.streaks_broken:
        insights.append(WeeklyInsight(
            "warning",
            "Streaks Broken",
            f"{len(report.streaks_broken)} habit streak(s) were broken. Don't worry, start fresh!",
        ))

    return insights


def weekly_report(
    entries: EntryStore,
    habits: List[Habit],
    week_of: Optional[date] = None,
    week_start: int = 0,
    today: Optional[date] = None,
) -> WeeklyReport:
    """Build the report for the week containing `week_of`.

    Args:
        week_of: Any day in the week, defaults to today
        week_start: First weekday of the week (0=Monday, 6=Sunday)
        today: Day current streaks are measured from
    """
    today = today or date.today()
    week = DateRange.week_of(week_of or today, week_start)

    report = WeeklyReport(
        week=week,
        habit_count=len(habits),
        completion_rate=overall_completion_rate(entries, habits, week),
    )

    for habit in habits:
        stats = get_statistics(entries, habit, week, today)
        if stats.current_streak > 0:
            report.streaks_kept.append(StreakInfo(habit, stats.current_streak))
        if stats.failed_days > 0:
            report.streaks_broken.append(StreakInfo(habit, stats.current_streak))

        skip_count = sum(
            1 for e in entries.get_entries(habit.id, week)
            if e.status == HabitStatus.SKIPPED.value
        )
        if skip_count > 0:
            report.skipped.append(SkippedHabit(habit, skip_count))

    report.daily = _daily_breakdown(entries, habits, week)
    report.insights = _weekly_insights(report)
    return report
