#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Engine - Habit Store
Owns the habit collection, persists it after every mutation and answers
the queries of the today, calendar and statistics views
"""

import copy
import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, Dict, List, Optional, Sequence, Union

import pytz

from habit_engine.config import HabitEngineSettings
from habit_engine.core import analytics, schedule, streaks
from habit_engine.core.analytics import DaySummary, StatsSummary
from habit_engine.core.models import Habit, HabitDraft, habits_to_list
from habit_engine.database.storage import SlotStorage, create_storage
from habit_engine.exceptions import HabitNotFoundError, StorageError, ValidationError
from habit_engine.utils.datetime_utils import DateLike, ensure_aware, to_calendar_date

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "habits"

Clock = Callable[[], datetime]


def _detached(habit: Optional[Habit]) -> Optional[Habit]:
    # Callers get copies; stored records change only through the store
    return copy.deepcopy(habit)


def _detached_list(habits: Sequence[Habit]) -> List[Habit]:
    return [copy.deepcopy(habit) for habit in habits]


class HabitStore:
    """Ordered habit collection backed by one storage slot.

    Every mutation builds the new collection, writes it in full and only
    then replaces the in-memory state, so a failed write leaves the store
    as it was.
    """

    def __init__(self, storage: SlotStorage, slot: str = DEFAULT_SLOT,
                 timezone: Optional[tzinfo] = None, clock: Optional[Clock] = None,
                 autoload: bool = True):
        self.storage = storage
        self.slot = slot
        self.timezone = timezone or pytz.utc
        self._clock = clock or (lambda: datetime.now(self.timezone))
        self._habits: List[Habit] = []

        if autoload:
            self.load()

    @classmethod
    def from_settings(cls, settings: HabitEngineSettings, clock: Optional[Clock] = None) -> "HabitStore":
        settings.ensure_directories()
        return cls(
            create_storage(settings),
            slot=settings.storage_slot,
            timezone=settings.tzinfo,
            clock=clock,
        )

    # ===== LIFECYCLE =====

    def load(self) -> int:
        """Replace the in-memory collection with the stored one.

        Never raises: unreadable storage gives an empty collection and
        malformed records are skipped.
        """
        try:
            records = self.storage.read(self.slot)
        except StorageError as e:
            logger.error(f"Failed to load habits, starting empty: {e}")
            self._habits = []
            return 0

        if records is None:
            logger.info(f"No stored habits in slot {self.slot!r}, starting empty")
            self._habits = []
            return 0

        if not isinstance(records, list):
            logger.error(f"Slot {self.slot!r} holds {type(records).__name__}, expected a list; starting empty")
            self._habits = []
            return 0

        habits = []
        seen_ids = set()
        for record in records:
            try:
                habit = Habit.from_dict(record, self.timezone)
            except (ValidationError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping unreadable habit record: {e}")
                continue
            if habit.id in seen_ids:
                logger.warning(f"Skipping duplicate habit id {habit.id}")
                continue
            seen_ids.add(habit.id)
            habits.append(habit)

        self._habits = habits
        logger.info(f"Loaded {len(habits)} habits from slot {self.slot!r}")
        return len(habits)

    def save(self) -> None:
        self._persist(self._habits)

    def _persist(self, habits: Sequence[Habit]) -> None:
        self.storage.write(self.slot, habits_to_list(habits))

    def _commit(self, habits: List[Habit]) -> None:
        self._persist(habits)
        self._habits = habits

    # ===== TIME =====

    def now(self) -> datetime:
        return ensure_aware(self._clock(), self.timezone)

    def today(self) -> date:
        return to_calendar_date(self.now(), self.timezone)

    def _as_date(self, value: Optional[DateLike]) -> date:
        if value is None:
            return self.today()
        return to_calendar_date(value, self.timezone)

    # ===== LOOKUP =====

    @property
    def habits(self) -> List[Habit]:
        return _detached_list(self._habits)

    def __len__(self) -> int:
        return len(self._habits)

    def __iter__(self):
        return iter(_detached_list(self._habits))

    def __contains__(self, habit_id: object) -> bool:
        return self._index_of(habit_id) is not None

    def _index_of(self, habit_id) -> Optional[int]:
        for index, habit in enumerate(self._habits):
            if habit.id == habit_id:
                return index
        return None

    def _get(self, habit_id: str) -> Habit:
        index = self._index_of(habit_id)
        if index is None:
            raise HabitNotFoundError(habit_id)
        return self._habits[index]

    def get(self, habit_id: str) -> Habit:
        return _detached(self._get(habit_id))

    def find(self, habit_id: str) -> Optional[Habit]:
        index = self._index_of(habit_id)
        return _detached(self._habits[index]) if index is not None else None

    # ===== MUTATIONS =====

    def create(self, draft: HabitDraft) -> Habit:
        habit = Habit.create(draft, created_at=self.now())
        self._commit(self._habits + [habit])
        logger.info(f"Habit created: {habit.id} ({habit.name!r}, {habit.frequency})")
        return _detached(habit)

    def update(self, habit: Habit) -> Habit:
        """Apply the editable fields of `habit` to the stored record.

        Completion history and streak counters of the stored record are
        kept whatever `habit` carries.
        """
        index = self._index_of(habit.id)
        if index is None:
            raise HabitNotFoundError(habit.id)

        draft = HabitDraft(
            name=habit.name,
            frequency=habit.frequency,
            selected_days=habit.selected_days,
            reminder_time=habit.reminder_time,
            color=habit.color,
        ).validated()

        updated = self._habits[index].with_edits(draft)
        habits = list(self._habits)
        habits[index] = updated
        self._commit(habits)
        logger.info(f"Habit updated: {updated.id}")
        return _detached(updated)

    def delete(self, habit_id: str) -> Habit:
        index = self._index_of(habit_id)
        if index is None:
            raise HabitNotFoundError(habit_id)

        habits = list(self._habits)
        removed = habits.pop(index)
        self._commit(habits)
        logger.info(f"Habit deleted: {habit_id}")
        return _detached(removed)

    def toggle_completion(self, habit_id: str, on_date: Optional[DateLike] = None) -> Habit:
        index = self._index_of(habit_id)
        if index is None:
            raise HabitNotFoundError(habit_id)

        day = self._as_date(on_date)
        updated = streaks.toggle_completion(self._habits[index], day, self.today())

        habits = list(self._habits)
        habits[index] = updated
        self._commit(habits)

        state = "completed" if updated.is_completed_on(day) else "not completed"
        logger.info(f"Habit {habit_id} marked {state} for {day.isoformat()} (streak {updated.streak})")
        return _detached(updated)

    # ===== QUERIES =====

    def is_completed_on_date(self, habit_id: str, on_date: DateLike) -> bool:
        return self._get(habit_id).is_completed_on(self._as_date(on_date))

    def is_completed_today(self, habit_id: str) -> bool:
        return self._get(habit_id).is_completed_on(self.today())

    def is_due(self, habit: Union[Habit, str], on_date: Optional[DateLike] = None) -> bool:
        if not isinstance(habit, Habit):
            habit = self._get(habit)
        return schedule.is_due(habit, self._as_date(on_date))

    def active_habits(self) -> List[Habit]:
        return _detached_list(analytics.active_habits(self._habits, self.today()))

    def todays_progress(self) -> int:
        return analytics.todays_progress(self._habits, self.today())

    def completion_rate(self, habit_id: str, window_days: int) -> int:
        return analytics.completion_rate(self._get(habit_id), window_days, self.today())

    def longest_streak_habit(self) -> Optional[Habit]:
        return _detached(analytics.longest_streak_habit(self._habits))

    def most_consistent_habit(self, window_days: int) -> Optional[Habit]:
        return _detached(analytics.most_consistent_habit(self._habits, window_days, self.today()))

    def habits_for_date(self, on_date: DateLike, eligible_only: bool = False) -> List[Habit]:
        """Habits listed by the calendar view for one day.

        Today lists the active habits. Other days list every habit unless
        `eligible_only` asks for the due rule to be applied to that day.
        """
        day = self._as_date(on_date)
        if day == self.today():
            return self.active_habits()
        if eligible_only:
            return _detached_list([habit for habit in self._habits if schedule.is_due(habit, day)])
        return self.habits

    def calendar_summary(self, start: DateLike, end: DateLike) -> Dict[date, DaySummary]:
        return analytics.calendar_summary(self._habits, self._as_date(start), self._as_date(end))

    def month_summary(self, year: int, month: int) -> Dict[date, DaySummary]:
        start = date(year, month, 1)
        next_month = date(year + month // 12, month % 12 + 1, 1)
        return analytics.calendar_summary(self._habits, start, next_month - timedelta(days=1))

    def total_days_tracked(self) -> int:
        return analytics.total_days_tracked(self._habits, self.now())

    def stats_summary(self, window_days: int = 7) -> StatsSummary:
        return analytics.build_stats_summary(_detached_list(self._habits), window_days, self.now(), self.today())
