#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Engine - Core Data Models
Habit records, drafts and their validation and wire serialization
"""

import re
import uuid
import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, tzinfo
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from habit_engine.exceptions import HabitEngineError, HabitNotFoundError, ValidationError
from habit_engine.utils.datetime_utils import WEEKDAY_KEYS, parse_iso, to_calendar_date, weekday_key

logger = logging.getLogger(__name__)

COLOR_OPTIONS = (
    "#4f46e5",  # indigo
    "#10b981",  # green
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#8b5cf6",  # purple
    "#06b6d4",  # cyan
)

DEFAULT_COLOR = COLOR_OPTIONS[0]

COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

REMINDER_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# ===== ENUMS =====

class Frequency(Enum):
    """How often a habit recurs"""
    DAILY = "daily"
    WEEKLY = "weekly"
    CUSTOM = "custom"

# ===== VALIDATION HELPERS =====

def validate_text(text: str, min_length: int = 1, max_length: int = 200, field_name: str = "text") -> str:
    """Strip and length-check a text field"""
    if not isinstance(text, str):
        raise ValidationError(f"{field_name} must be a string")

    text = text.strip()
    if len(text) < min_length:
        raise ValidationError(f"{field_name} must contain at least {min_length} non-blank characters")

    if len(text) > max_length:
        raise ValidationError(f"{field_name} must contain at most {max_length} characters")

    return text

def validate_enum_value(value: str, enum_class: type, field_name: str = "value") -> str:
    """Check that value is one of enum_class's values"""
    if isinstance(value, enum_class):
        return value.value
    try:
        enum_class(value)
        return value
    except ValueError:
        valid_values = [e.value for e in enum_class]
        raise ValidationError(f"{field_name} must be one of: {valid_values}")

def validate_reminder_time(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not REMINDER_TIME_RE.match(value):
        raise ValidationError(f"reminder_time must be HH:MM, got {value!r}")
    return value

def validate_color(value: Optional[str]) -> str:
    """#rrggbb color; empty falls back to the first palette color"""
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_COLOR
    if not isinstance(value, str) or not COLOR_RE.match(value.strip()):
        raise ValidationError(f"color must be a #rrggbb hex color, got {value!r}")
    return value.strip().lower()

def validate_timestamp(value: Any, field_name: str = "timestamp") -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be an ISO-8601 string, got {type(value).__name__}")
    try:
        parse_iso(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not an ISO-8601 timestamp: {value!r}")
    return value

# ===== CORE MODELS =====

@dataclass
class SelectedDays:
    """Weekday flags consulted by custom-frequency habits"""
    mon: bool = True
    tue: bool = True
    wed: bool = True
    thu: bool = True
    fri: bool = True
    sat: bool = True
    sun: bool = True

    def is_selected(self, day: date) -> bool:
        return bool(getattr(self, weekday_key(day)))

    @property
    def selected_keys(self) -> List[str]:
        return [key for key in WEEKDAY_KEYS if getattr(self, key)]

    def to_dict(self) -> Dict[str, bool]:
        return {key: bool(getattr(self, key)) for key in WEEKDAY_KEYS}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SelectedDays":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValidationError(f"selectedDays must be an object, got {type(data).__name__}")

        flags = {key: data.get(key, False) for key in WEEKDAY_KEYS}
        invalid = sorted(key for key, value in flags.items() if not isinstance(value, bool))
        if invalid:
            raise ValidationError(f"selectedDays flags must be booleans: {invalid}")
        return cls(**flags)

    @classmethod
    def only(cls, *keys: str) -> "SelectedDays":
        """Flags with just the given weekday keys set"""
        unknown = set(keys) - set(WEEKDAY_KEYS)
        if unknown:
            raise ValidationError(f"Unknown weekday keys: {sorted(unknown)}")
        return cls(**{key: key in keys for key in WEEKDAY_KEYS})


@dataclass
class HabitDraft:
    """User-editable habit fields, as submitted by a create form"""
    name: str
    frequency: str = Frequency.DAILY.value
    selected_days: SelectedDays = field(default_factory=SelectedDays)
    reminder_time: Optional[str] = None
    color: str = DEFAULT_COLOR

    def validated(self) -> "HabitDraft":
        """Normalized copy; raises ValidationError on bad input"""
        return HabitDraft(
            name=validate_text(self.name, field_name="name"),
            frequency=validate_enum_value(self.frequency, Frequency, "frequency"),
            selected_days=self.selected_days or SelectedDays(),
            reminder_time=validate_reminder_time(self.reminder_time),
            color=validate_color(self.color),
        )


@dataclass
class Habit:
    """A user-defined recurring habit with its completion history"""
    id: str
    name: str
    frequency: str = Frequency.DAILY.value
    selected_days: SelectedDays = field(default_factory=SelectedDays)
    reminder_time: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    completed_dates: List[date] = field(default_factory=list)
    streak: int = 0
    best_streak: int = 0
    color: str = DEFAULT_COLOR

    # Fields an edit may change; history and counters are engine-owned
    EDITABLE_FIELDS = ("name", "frequency", "selected_days", "reminder_time", "color")

    def __post_init__(self):
        self.name = validate_text(self.name, field_name="name")
        self.created_at = validate_timestamp(self.created_at, "created_at")

        if not isinstance(self.streak, int) or self.streak < 0:
            raise ValidationError("streak must be a non-negative integer")
        if not isinstance(self.best_streak, int) or self.best_streak < 0:
            raise ValidationError("best_streak must be a non-negative integer")

        # One completion per calendar day, kept in order
        self.completed_dates = sorted(set(self.completed_dates))

        if self.best_streak < self.streak:
            self.best_streak = self.streak

    # ===== PROPERTIES =====

    @property
    def frequency_enum(self) -> Optional[Frequency]:
        try:
            return Frequency(self.frequency)
        except ValueError:
            return None

    @property
    def created_datetime(self) -> datetime:
        value = parse_iso(self.created_at)
        if not isinstance(value, datetime):
            value = datetime.combine(value, time())
        return value

    # ===== METHODS =====

    def is_completed_on(self, day: date) -> bool:
        return day in self.completed_dates

    def completed_between(self, start: date, end: date) -> bool:
        """True if any completion falls in [start, end]"""
        return any(start <= d <= end for d in self.completed_dates)

    def with_edits(self, edited: "HabitDraft") -> "Habit":
        """Copy of self with the user-editable fields taken from edited"""
        changes = {name: getattr(edited, name) for name in self.EDITABLE_FIELDS}
        return replace(self, **changes)

    # ===== SERIALIZATION =====

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation"""
        return {
            "id": self.id,
            "name": self.name,
            "frequency": self.frequency,
            "selectedDays": self.selected_days.to_dict(),
            "reminderTime": self.reminder_time,
            "createdAt": self.created_at,
            "completedDates": [d.isoformat() for d in self.completed_dates],
            "streak": self.streak,
            "bestStreak": self.best_streak,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], tz: Optional[tzinfo] = None) -> "Habit":
        """Build a Habit from its wire representation.

        Completion entries may be plain dates or full timestamps; aware
        timestamps are mapped onto the calendar day in `tz`.
        """
        try:
            habit = cls(
                id=str(data["id"]),
                name=data["name"],
                frequency=data.get("frequency", Frequency.DAILY.value),
                selected_days=SelectedDays.from_dict(data.get("selectedDays")),
                reminder_time=data.get("reminderTime"),
                created_at=data.get("createdAt", datetime.now().isoformat()),
                completed_dates=[
                    to_calendar_date(value, tz) for value in data.get("completedDates", [])
                ],
                streak=int(data.get("streak", 0)),
                best_streak=int(data.get("bestStreak", 0)),
                color=data.get("color") or DEFAULT_COLOR,
            )
        except ValidationError:
            raise
        except Exception as e:
            raise ValidationError(f"Could not load habit: {e}") from e

        if habit.frequency_enum is None:
            logger.warning(f"Habit {habit.id} has unknown frequency {habit.frequency!r}")

        return habit

    @classmethod
    def create(cls, draft: HabitDraft, created_at: Optional[datetime] = None) -> "Habit":
        """New habit with a fresh id and empty history"""
        draft = draft.validated()
        return cls(
            id=str(uuid.uuid4()),
            name=draft.name,
            frequency=draft.frequency,
            selected_days=draft.selected_days,
            reminder_time=draft.reminder_time,
            created_at=(created_at or datetime.now()).isoformat(),
            color=draft.color,
        )


def habits_to_list(habits: Iterable[Habit]) -> List[Dict[str, Any]]:
    return [habit.to_dict() for habit in habits]


__all__ = [
    "COLOR_OPTIONS",
    "DEFAULT_COLOR",
    "Frequency",
    "Habit",
    "HabitDraft",
    "HabitEngineError",
    "HabitNotFoundError",
    "SelectedDays",
    "ValidationError",
    "habits_to_list",
    "validate_enum_value",
    "validate_reminder_time",
    "validate_text",
]
