"""Habit and entry stores for habitlog.

Both stores keep the full collection in memory, load it once from the
key-value backend and rewrite it in full after every mutation.
"""

import json
import logging
import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, List, Dict, Tuple, Any, Callable, TypeVar

from .db import ENTRIES_KEY, HABITS_KEY, KeyValueBackend, MemoryBackend
from .events import (
    ENTRIES_DELETED,
    ENTRY_CHANGED,
    HABIT_ADDED,
    HABIT_DELETED,
    HABIT_UPDATED,
    EventBus,
)
from .models import (
    POLARITY_VALUES,
    Completion,
    DateRange,
    Entry,
    Habit,
    HabitDuration,
    HabitFrequency,
    validate_status,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def encode_habits(habits: List[Habit]) -> str:
    return json.dumps([h.to_dict() for h in habits])


def encode_entries(entries: List[Entry]) -> str:
    return json.dumps([e.to_dict() for e in entries])


def _decode(blob: Optional[str], key: str, factory: Callable[[Dict[str, Any]], T]) -> List[T]:
    """Decode a stored list. Malformed data yields an empty list."""
    if blob is None:
        return []
    try:
        return [factory(item) for item in json.loads(blob)]
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.warning("Could not decode %s, starting empty: %s", key, e)
        return []


def decode_habits(blob: Optional[str]) -> List[Habit]:
    return _decode(blob, HABITS_KEY, Habit.from_dict)


def decode_entries(blob: Optional[str]) -> List[Entry]:
    return _decode(blob, ENTRIES_KEY, Entry.from_dict)


def validate_habit_title(title: str) -> str:
    """Validate and clean habit title.

    Raises:
        ValueError: If title is empty or whitespace-only
    """
    if not isinstance(title, str) or not title.strip():
        raise ValueError("Habit title cannot be empty or whitespace-only")
    return title.strip()


def validate_target(target: int) -> int:
    """Validate completions-per-day target.

    Raises:
        ValueError: If target is not a whole number or is below 1
    """
    if not isinstance(target, int) or isinstance(target, bool):
        raise ValueError(f"Target completions per day must be a whole number, got {target!r}")
    if target < 1:
        raise ValueError(f"Target completions per day must be at least 1, got {target}")
    return target


def validate_polarity(polarity: str) -> str:
    """Validate habit polarity.

    Raises:
        ValueError: If polarity is not positive or negative
    """
    if polarity not in POLARITY_VALUES:
        raise ValueError(f"Invalid polarity '{polarity}'. Use: {', '.join(POLARITY_VALUES)}")
    return polarity


def validate_habit_changes(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Check edited habit fields before any of them is applied.

    Raises:
        ValueError: If a value is invalid or of the wrong type
    """
    cleaned = dict(changes)
    if "title" in cleaned:
        cleaned["title"] = validate_habit_title(cleaned["title"])
    if "target_completions_per_day" in cleaned:
        cleaned["target_completions_per_day"] = validate_target(cleaned["target_completions_per_day"])
    if "polarity" in cleaned:
        validate_polarity(cleaned["polarity"])
    if "duration" in cleaned and not isinstance(cleaned["duration"], HabitDuration):
        raise ValueError(f"duration must be a HabitDuration, got {cleaned['duration']!r}")
    if "start_date" in cleaned and (
        not isinstance(cleaned["start_date"], date) or isinstance(cleaned["start_date"], datetime)
    ):
        raise ValueError(f"start_date must be a date, got {cleaned['start_date']!r}")
    if "frequency" in cleaned and cleaned["frequency"] not in [f.value for f in HabitFrequency]:
        raise ValueError(f"Invalid frequency '{cleaned['frequency']}'")
    if "custom_days" in cleaned:
        days = cleaned["custom_days"]
        if not isinstance(days, (list, tuple)) or not all(isinstance(d, int) and 0 <= d <= 6 for d in days):
            raise ValueError(f"custom_days must be weekday numbers 0-6, got {days!r}")
        cleaned["custom_days"] = list(days)
    for name in ("description", "color", "icon"):
        if name in cleaned and not isinstance(cleaned[name], str):
            raise ValueError(f"{name} must be a string, got {cleaned[name]!r}")
    return cleaned


class HabitStore:
    """Ordered collection of habits."""

    EDITABLE_FIELDS = {
        "title",
        "description",
        "polarity",
        "target_completions_per_day",
        "duration",
        "start_date",
        "frequency",
        "custom_days",
        "color",
        "icon",
    }

    def __init__(self, backend: KeyValueBackend, events: Optional[EventBus] = None):
        self.backend = backend
        self.events = events or EventBus()
        self._lock = threading.RLock()
        self._habits: List[Habit] = decode_habits(backend.load(HABITS_KEY))

    @property
    def habits(self) -> List[Habit]:
        with self._lock:
            return list(self._habits)

    def _save(self) -> None:
        self.backend.save(HABITS_KEY, encode_habits(self._habits))

    def add_habit(self, habit: Habit) -> Habit:
        with self._lock:
            if self.get_habit(habit.id) is not None:
                raise ValueError(f"Habit already exists: {habit.id}")
            self._habits.append(habit)
            self._save()
        self.events.publish(HABIT_ADDED, habit_id=habit.id)
        return habit

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        with self._lock:
            for habit in self._habits:
                if habit.id == habit_id:
                    return habit
        return None

    def find_habit(self, ref: str) -> Optional[Habit]:
        """Find a habit by id, unique id prefix or title (case-insensitive)."""
        if not ref or not ref.strip():
            return None
        with self._lock:
            habit = self.get_habit(ref)
            if habit:
                return habit

            lowered = ref.strip().lower()
            for habit in self._habits:
                if habit.title.lower() == lowered:
                    return habit

            matches = [h for h in self._habits if h.id.startswith(ref)]
            if len(matches) == 1:
                return matches[0]
        return None

    def update_habit(self, habit_id: str, **changes: Any) -> Optional[Habit]:
        """Update habit attributes in place. Entries are untouched."""
        unknown = set(changes) - self.EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        changes = validate_habit_changes(changes)

        with self._lock:
            habit = self.get_habit(habit_id)
            if habit is None:
                return None
            # The live habit changes only after the edited copy is saved
            edited = replace(habit, **changes)
            self.backend.save(HABITS_KEY, encode_habits([edited if h is habit else h for h in self._habits]))
            for name, value in changes.items():
                setattr(habit, name, value)
        self.events.publish(HABIT_UPDATED, habit_id=habit_id, fields=sorted(changes))
        return habit

    def delete_habit(self, habit_id: str) -> bool:
        with self._lock:
            before = len(self._habits)
            self._habits = [h for h in self._habits if h.id != habit_id]
            if len(self._habits) == before:
                return False
            self._save()
        self.events.publish(HABIT_DELETED, habit_id=habit_id)
        return True


class EntryStore:
    """Entries indexed by (habit id, day), at most one per pair."""

    def __init__(self, backend: KeyValueBackend, events: Optional[EventBus] = None):
        self.backend = backend
        self.events = events or EventBus()
        self._lock = threading.RLock()
        self._entries: List[Entry] = []
        self._index: Dict[Tuple[str, date], Entry] = {}

        for entry in decode_entries(backend.load(ENTRIES_KEY)):
            key = (entry.habit_id, entry.day)
            if key in self._index:
                logger.warning("Dropping duplicate entry for %s on %s", entry.habit_id, entry.day)
                continue
            self._entries.append(entry)
            self._index[key] = entry

    @property
    def entries(self) -> List[Entry]:
        with self._lock:
            return list(self._entries)

    def _save(self) -> None:
        self.backend.save(ENTRIES_KEY, encode_entries(self._entries))

    def _changed(self, entry: Entry) -> None:
        self._save()
        self.events.publish(ENTRY_CHANGED, habit_id=entry.habit_id, day=entry.day)

    # Reads

    def get_entry(self, habit_id: str, day: date) -> Optional[Entry]:
        with self._lock:
            return self._index.get((habit_id, day))

    def get_entries(self, habit_id: str, date_range: Optional[DateRange] = None) -> List[Entry]:
        """Entries for a habit, optionally limited to a range, in store order."""
        with self._lock:
            return [
                e for e in self._entries
                if e.habit_id == habit_id and (date_range is None or date_range.contains(e.day))
            ]

    def snapshot(self) -> "EntryStore":
        """Independent copy for reading while this store keeps changing."""
        with self._lock:
            return EntryStore(MemoryBackend({ENTRIES_KEY: encode_entries(self._entries)}))

    # Mutations

    def _find_or_create(self, habit: Habit, day: date) -> Entry:
        key = (habit.id, day)
        entry = self._index.get(key)
        if entry is None:
            entry = Entry(habit_id=habit.id, day=day)
            self._entries.append(entry)
            self._index[key] = entry
        return entry

    def set_status(self, habit: Habit, day: date, status: str, notes: str = "") -> Entry:
        """Overwrite a day's status and notes. Completions are untouched.

        Once a day has completions its status is derived from them, so the
        requested status is ignored for such days.
        """
        validate_status(status)
        with self._lock:
            entry = self._find_or_create(habit, day)
            if entry.completions:
                logger.warning(
                    "Ignoring status %s for %s on %s: status follows its completions",
                    status, habit.id, day,
                )
                entry.refresh_status()
            else:
                entry.status = status
            entry.notes = notes
            self._changed(entry)
        return entry

    def add_completion(
        self,
        habit: Habit,
        day: date,
        status: str = "completed",
        notes: str = "",
    ) -> Completion:
        """Append a completion stamped now and re-derive the day's status."""
        validate_status(status)
        with self._lock:
            entry = self._find_or_create(habit, day)
            completion = Completion(time=datetime.now(), status=status, notes=notes)
            entry.completions.append(completion)
            entry.refresh_status()
            self._changed(entry)
        return completion

    def remove_completion(self, habit: Habit, completion_id: str, day: date) -> bool:
        """Remove a completion by id. Missing entry or completion is a no-op."""
        with self._lock:
            entry = self._index.get((habit.id, day))
            if entry is None or entry.find_completion(completion_id) is None:
                return False
            entry.completions = [c for c in entry.completions if c.id != completion_id]
            entry.refresh_status()
            self._changed(entry)
        return True

    def update_completion(
        self,
        habit: Habit,
        completion_id: str,
        day: date,
        status: str,
        notes: str = "",
    ) -> Optional[Completion]:
        """Overwrite a completion's status and notes. Missing is a no-op."""
        validate_status(status)
        with self._lock:
            entry = self._index.get((habit.id, day))
            if entry is None:
                return None
            completion = entry.find_completion(completion_id)
            if completion is None:
                return None
            completion.status = status
            completion.notes = notes
            entry.refresh_status()
            self._changed(entry)
        return completion

    def delete_entries_for_habit(self, habit_id: str) -> int:
        """Remove every entry of a habit. Returns how many were removed."""
        with self._lock:
            removed = [e for e in self._entries if e.habit_id == habit_id]
            if not removed:
                return 0
            self._entries = [e for e in self._entries if e.habit_id != habit_id]
            for entry in removed:
                del self._index[(entry.habit_id, entry.day)]
            self._save()
        self.events.publish(ENTRIES_DELETED, habit_id=habit_id, count=len(removed))
        return len(removed)

