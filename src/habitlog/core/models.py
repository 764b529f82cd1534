"""Data models for habitlog."""

import json
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, List, Dict, Any, Iterator


class HabitStatus(Enum):
    """Status of a day or a single completion."""
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


class Polarity(Enum):
    """Whether a habit is one to build or one to break."""
    POSITIVE = "positive"
    NEGATIVE = "negative"


class HabitFrequency(Enum):
    """Display frequency of a habit."""
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"


class DurationKind(Enum):
    """How long a habit runs for."""
    UNLIMITED = "unlimited"
    FIXED = "fixed"
    CUSTOM = "custom"


STATUS_VALUES = [s.value for s in HabitStatus]
POLARITY_VALUES = [p.value for p in Polarity]


def validate_status(status: str) -> str:
    """Validate a status string.

    Raises:
        ValueError: If status is not completed, failed or skipped
    """
    if status not in STATUS_VALUES:
        raise ValueError(f"Invalid status '{status}'. Use: {', '.join(STATUS_VALUES)}")
    return status


def new_id() -> str:
    return uuid.uuid4().hex


def _parse_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class HabitDuration:
    """Duration policy of a habit, measured from its start date."""
    kind: str = "unlimited"
    days: Optional[int] = None  # Only for fixed
    end_date: Optional[date] = None  # Only for custom

    @classmethod
    def unlimited(cls) -> "HabitDuration":
        return cls()

    @classmethod
    def fixed(cls, days: int) -> "HabitDuration":
        if days < 0:
            raise ValueError(f"Duration must be zero or more days, got {days}")
        return cls(kind="fixed", days=days)

    @classmethod
    def custom(cls, end_date: date) -> "HabitDuration":
        return cls(kind="custom", end_date=end_date)

    @property
    def is_unlimited(self) -> bool:
        return self.kind == DurationKind.UNLIMITED.value

    def days_from_start(self, start_date: date) -> Optional[int]:
        """Number of days the habit runs, or None if unlimited."""
        if self.kind == "fixed":
            return self.days or 0
        if self.kind == "custom" and self.end_date is not None:
            return (self.end_date - start_date).days
        return None

    def end_from(self, start_date: date) -> Optional[date]:
        """Last day of the habit, or None if unlimited."""
        if self.kind == "fixed":
            return start_date + timedelta(days=(self.days or 0) - 1)
        if self.kind == "custom":
            return self.end_date
        return None

    def get_display(self) -> str:
        """Get human-readable duration."""
        if self.kind == "fixed":
            return f"{self.days} days"
        if self.kind == "custom":
            return f"until {self.end_date.isoformat()}" if self.end_date else "custom range"
        return "unlimited"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "days": self.days,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HabitDuration":
        kind = data.get("kind", "unlimited")
        if kind not in [k.value for k in DurationKind]:
            raise ValueError(f"Unknown duration kind: {kind}")
        return cls(
            kind=kind,
            days=data.get("days"),
            end_date=_parse_date(data.get("end_date")),
        )


@dataclass
class Habit:
    """A habit to track."""
    id: str = field(default_factory=new_id)
    title: str = ""
    description: str = ""
    polarity: str = "positive"
    target_completions_per_day: int = 1
    duration: HabitDuration = field(default_factory=HabitDuration)
    start_date: date = field(default_factory=date.today)
    created_at: datetime = field(default_factory=datetime.now)
    frequency: str = "daily"
    custom_days: List[int] = field(default_factory=list)  # 0 = Sunday, 1 = Monday, ...
    color: str = "blue"
    icon: str = "star.fill"

    @property
    def is_positive(self) -> bool:
        return self.polarity == Polarity.POSITIVE.value

    @property
    def is_multi_completion(self) -> bool:
        return self.target_completions_per_day > 1

    @property
    def end_date(self) -> Optional[date]:
        return self.duration.end_from(self.start_date)

    @property
    def total_days(self) -> Optional[int]:
        return self.duration.days_from_start(self.start_date)

    def is_finished(self, today: Optional[date] = None) -> bool:
        """Check if the habit's duration has run out."""
        end = self.end_date
        if end is None:
            return False
        return (today or date.today()) > end

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "polarity": self.polarity,
            "target_completions_per_day": self.target_completions_per_day,
            "duration": self.duration.to_dict(),
            "start_date": self.start_date.isoformat(),
            "created_at": self.created_at.isoformat(),
            "frequency": self.frequency,
            "custom_days": list(self.custom_days),
            "color": self.color,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        """Create Habit from dictionary."""
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description", ""),
            polarity=data.get("polarity", "positive"),
            target_completions_per_day=int(data.get("target_completions_per_day", 1)),
            duration=HabitDuration.from_dict(data.get("duration") or {}),
            start_date=_parse_date(data["start_date"]),
            created_at=_parse_datetime(data["created_at"]),
            frequency=data.get("frequency", "daily"),
            custom_days=list(data.get("custom_days", [])),
            color=data.get("color", "blue"),
            icon=data.get("icon", "star.fill"),
        )

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "Habit":
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))


@dataclass
class Completion:
    """One logged occurrence of a habit within a day."""
    id: str = field(default_factory=new_id)
    time: datetime = field(default_factory=datetime.now)
    status: str = "completed"
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "time": self.time.isoformat(),
            "status": self.status,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Completion":
        return cls(
            id=data["id"],
            time=_parse_datetime(data["time"]),
            status=validate_status(data.get("status", "completed")),
            notes=data.get("notes", ""),
        )


def derive_status(completions: List[Completion]) -> str:
    """Collapse completions into one status: completed > failed > skipped."""
    statuses = {c.status for c in completions}
    if HabitStatus.COMPLETED.value in statuses:
        return HabitStatus.COMPLETED.value
    if HabitStatus.FAILED.value in statuses:
        return HabitStatus.FAILED.value
    return HabitStatus.SKIPPED.value


@dataclass
class Entry:
    """Activity of one habit on one calendar day."""
    habit_id: str = ""
    day: date = field(default_factory=date.today)
    id: str = field(default_factory=new_id)
    status: str = "skipped"
    notes: str = ""
    completions: List[Completion] = field(default_factory=list)

    @property
    def completed_count(self) -> int:
        return sum(1 for c in self.completions if c.status == HabitStatus.COMPLETED.value)

    @property
    def failed_count(self) -> int:
        return sum(1 for c in self.completions if c.status == HabitStatus.FAILED.value)

    @property
    def total_completions(self) -> int:
        return len(self.completions)

    @property
    def derived_status(self) -> str:
        """Status implied by completions, or the stored one when there are none."""
        if not self.completions:
            return self.status
        return derive_status(self.completions)

    def refresh_status(self) -> None:
        """Overwrite the stored status with the derived one."""
        self.status = self.derived_status

    def find_completion(self, completion_id: str) -> Optional[Completion]:
        for completion in self.completions:
            if completion.id == completion_id:
                return completion
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "habit_id": self.habit_id,
            "day": self.day.isoformat(),
            "status": self.status,
            "notes": self.notes,
            "completions": [c.to_dict() for c in self.completions],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        """Create Entry from dictionary."""
        return cls(
            id=data["id"],
            habit_id=data["habit_id"],
            day=_parse_date(data["day"]),
            status=validate_status(data.get("status", "skipped")),
            notes=data.get("notes", ""),
            completions=[Completion.from_dict(c) for c in data.get("completions", [])],
        )


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""
    start: date
    end: date

    @classmethod
    def last_n_days(cls, days: int, today: Optional[date] = None) -> "DateRange":
        """Range covering today and the `days` days before it."""
        today = today or date.today()
        return cls(today - timedelta(days=days), today)

    @classmethod
    def week_of(cls, day: date, week_start: int = 0) -> "DateRange":
        """Seven-day week containing `day`; week_start 0=Monday ... 6=Sunday."""
        offset = (day.weekday() - week_start) % 7
        start = day - timedelta(days=offset)
        return cls(start, start + timedelta(days=6))

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __len__(self) -> int:
        return max((self.end - self.start).days + 1, 0)

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)


@dataclass
class HabitStatistics:
    """Summary of a habit over a date range. Computed, never persisted."""
    habit: Habit
    total_days: int = 0
    completed_days: int = 0
    failed_days: int = 0
    skipped_days: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    completion_rate: float = 0.0

    @property
    def success_rate(self) -> float:
        if self.total_days <= 0:
            return 0.0
        return self.completed_days / self.total_days * 100


# Status symbols for display
STATUS_SYMBOLS = {
    "completed": "[x]",
    "failed": "[-]",
    "skipped": "[~]",
}

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
