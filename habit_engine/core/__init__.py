from habit_engine.core.models import COLOR_OPTIONS, DEFAULT_COLOR, Frequency, Habit, HabitDraft, SelectedDays
from habit_engine.core.schedule import is_due
from habit_engine.core.streaks import toggle_completion
from habit_engine.core.analytics import DaySummary, StatsSummary, completion_rate
from habit_engine.core.store import HabitStore

__all__ = [
    'COLOR_OPTIONS',
    'DEFAULT_COLOR',
    'DaySummary',
    'Frequency',
    'Habit',
    'HabitDraft',
    'HabitStore',
    'SelectedDays',
    'StatsSummary',
    'completion_rate',
    'is_due',
    'toggle_completion',
]
