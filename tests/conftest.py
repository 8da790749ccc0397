from datetime import date, datetime, timedelta

import pytest
import pytz

from habit_engine.core.models import Habit, SelectedDays
from habit_engine.core.store import HabitStore
from habit_engine.database.storage import MemoryStorage

# A Monday; the week around it starts on Sunday 2026-10-18
TODAY = date(2026, 10, 19)
NOW = pytz.utc.localize(datetime(2026, 10, 19, 9, 0))


class FakeClock:
    def __init__(self, current: datetime):
        self.current = current

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


def make_habit(name="Read", frequency="daily", completed=(), streak=0, best_streak=0,
               selected_days=None, habit_id=None, created_at="2026-10-01T08:00:00+00:00"):
    return Habit(
        id=habit_id or f"habit-{name.lower().replace(' ', '-')}",
        name=name,
        frequency=frequency,
        selected_days=selected_days or SelectedDays(),
        created_at=created_at,
        completed_dates=list(completed),
        streak=streak,
        best_streak=best_streak,
    )


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, clock):
    return HabitStore(storage, clock=clock)


@pytest.fixture
def seeded_store(storage, clock):
    """Store loaded from a slot that already holds habits"""
    habits = [
        make_habit("Read", completed=[days_ago(1), TODAY], streak=2, best_streak=5),
        make_habit("Gym", frequency="weekly"),
        make_habit("Hike", frequency="custom", selected_days=SelectedDays.only("sat", "sun")),
    ]
    storage.write("habits", [habit.to_dict() for habit in habits])
    return HabitStore(storage, clock=clock)
