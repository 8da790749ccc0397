"""
Habit Engine
Recurring habits, daily completions, streaks and consistency statistics
"""

from habit_engine.config import HabitEngineSettings, get_settings
from habit_engine.core import Frequency, Habit, HabitDraft, HabitStore, SelectedDays
from habit_engine.exceptions import (
    HabitEngineError,
    HabitNotFoundError,
    StorageCorruptionError,
    StorageError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    'Frequency',
    'Habit',
    'HabitDraft',
    'HabitEngineError',
    'HabitEngineSettings',
    'HabitNotFoundError',
    'HabitStore',
    'SelectedDays',
    'StorageCorruptionError',
    'StorageError',
    'ValidationError',
    'get_settings',
]
