# habit_engine/core/schedule.py

import logging
from datetime import date

from habit_engine.core.models import Frequency, Habit
from habit_engine.utils.datetime_utils import week_start

logger = logging.getLogger(__name__)


def is_due(habit: Habit, on_date: date) -> bool:
    """Whether the habit should be actioned on `on_date`.

    daily  - always.
    weekly - unless already completed in the calendar week that starts on
             the most recent Sunday and ends at `on_date`.
    custom - when the weekday flag for `on_date` is set.
    Anything else is never due.
    """
    frequency = habit.frequency_enum

    if frequency is Frequency.DAILY:
        return True
    if frequency is Frequency.WEEKLY:
        return not habit.completed_between(week_start(on_date), on_date)
    if frequency is Frequency.CUSTOM:
        return habit.selected_days.is_selected(on_date)

    logger.debug(f"Habit {habit.id} has no usable frequency, treating as not due")
    return False


def counts_toward_rate(habit: Habit, check_date: date, offset: int) -> bool:
    """Eligibility of one day in a trailing completion-rate window.

    `offset` is the number of days before today. Weekly habits get one
    eligible day per 7-day block counted back from today, which is not the
    calendar week used by is_due().
    """
    frequency = habit.frequency_enum

    if frequency is Frequency.DAILY:
        return True
    if frequency is Frequency.WEEKLY:
        return offset % 7 == 0
    if frequency is Frequency.CUSTOM:
        return habit.selected_days.is_selected(check_date)
    return False
