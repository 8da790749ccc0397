# habit_engine/core/streaks.py

import logging
from dataclasses import replace
from datetime import date, timedelta

from habit_engine.core.models import Habit

logger = logging.getLogger(__name__)


def toggle_completion(habit: Habit, on_date: date, today: date) -> Habit:
    """Flip the completion of `on_date` and return the updated habit.

    The input habit is left untouched. Only toggles of `today` move the
    cached counters:
      * un-completing today zeroes the streak, whatever history remains;
      * completing today extends the streak if yesterday was completed, or
        starts it when the streak is 0. A non-zero streak without yesterday
        stays as it is.
    """
    completed = list(habit.completed_dates)
    streak = habit.streak
    best_streak = habit.best_streak

    if on_date in completed:
        completed.remove(on_date)
        if on_date == today:
            streak = 0
    else:
        completed.append(on_date)
        if on_date == today:
            was_yesterday_completed = habit.is_completed_on(today - timedelta(days=1))
            if was_yesterday_completed or streak == 0:
                streak += 1
            if streak > best_streak:
                best_streak = streak

    updated = replace(habit, completed_dates=completed, streak=streak, best_streak=best_streak)
    logger.debug(
        f"Habit {habit.id} toggled for {on_date.isoformat()}: "
        f"streak {habit.streak} -> {updated.streak}, best {updated.best_streak}"
    )
    return updated
