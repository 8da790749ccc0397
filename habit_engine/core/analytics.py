#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Habit Engine - Analytics
Completion rates, daily progress and statistics-view aggregates
"""

import math
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence

from habit_engine.core.models import Habit
from habit_engine.core.schedule import counts_toward_rate, is_due
from habit_engine.utils.datetime_utils import days_between, ensure_aware

logger = logging.getLogger(__name__)


@dataclass
class DaySummary:
    """Completions recorded on one calendar day"""
    total: int = 0
    completed: int = 0

    @property
    def percentage(self) -> int:
        return percentage(self.completed, self.total)

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.completed == self.total


@dataclass
class StatsSummary:
    """Figures shown by the statistics view for one window"""
    window_days: int
    total_habits: int = 0
    days_tracked: int = 0
    longest_streak_habit: Optional[Habit] = None
    most_consistent_habit: Optional[Habit] = None
    most_consistent_rate: int = 0
    completion_rates: Dict[str, int] = field(default_factory=dict)

    @property
    def longest_streak(self) -> int:
        return self.longest_streak_habit.best_streak if self.longest_streak_habit else 0


def percentage(part: int, whole: int) -> int:
    """part/whole as a whole percentage, halves rounded up; 0 if whole is 0"""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def completion_rate(habit: Habit, window_days: int, today: date) -> int:
    """Share of eligible days in the trailing window that were completed"""
    total_days = 0
    completed_count = 0

    for offset in range(max(window_days, 0)):
        check_date = today - timedelta(days=offset)
        if not counts_toward_rate(habit, check_date, offset):
            continue
        total_days += 1
        if habit.is_completed_on(check_date):
            completed_count += 1

    return percentage(completed_count, total_days)


def active_habits(habits: Sequence[Habit], today: date) -> List[Habit]:
    return [habit for habit in habits if is_due(habit, today)]


def todays_progress(habits: Sequence[Habit], today: date) -> int:
    active = active_habits(habits, today)
    if not active:
        return 0
    done = sum(1 for habit in active if habit.is_completed_on(today))
    return percentage(done, len(active))


def longest_streak_habit(habits: Sequence[Habit]) -> Optional[Habit]:
    """Habit with the highest best streak; the earliest wins ties"""
    if not habits:
        return None
    best = habits[0]
    for habit in habits[1:]:
        if habit.best_streak > best.best_streak:
            best = habit
    return best


def most_consistent_habit(habits: Sequence[Habit], window_days: int, today: date) -> Optional[Habit]:
    """Habit with the highest completion rate; the earliest wins ties.

    A habit only qualifies with a rate above zero, so a store with no
    completions in the window has no most consistent habit.
    """
    best: Optional[Habit] = None
    highest_rate = 0
    for habit in habits:
        rate = completion_rate(habit, window_days, today)
        if rate > highest_rate:
            highest_rate = rate
            best = habit
    return best


def total_days_tracked(habits: Sequence[Habit], now: datetime) -> int:
    """Days since the oldest habit was created, rounded up"""
    if not habits:
        return 0
    oldest = min(ensure_aware(habit.created_datetime, now.tzinfo) for habit in habits)
    return days_between(oldest, now)


def calendar_summary(habits: Sequence[Habit], start: date, end: date) -> Dict[date, DaySummary]:
    """Per-day completion counts between start and end inclusive.

    Only days with at least one completion appear; every completion counts
    towards both total and completed, matching the calendar view.
    """
    summary: Dict[date, DaySummary] = {}
    for habit in habits:
        for completed_on in habit.completed_dates:
            if not start <= completed_on <= end:
                continue
            day = summary.setdefault(completed_on, DaySummary())
            day.total += 1
            day.completed += 1
    return dict(sorted(summary.items()))


def build_stats_summary(habits: Sequence[Habit], window_days: int, now: datetime, today: date) -> StatsSummary:
    rates = {habit.id: completion_rate(habit, window_days, today) for habit in habits}
    consistent = most_consistent_habit(habits, window_days, today)

    return StatsSummary(
        window_days=window_days,
        total_habits=len(habits),
        days_tracked=total_days_tracked(habits, now),
        longest_streak_habit=longest_streak_habit(habits),
        most_consistent_habit=consistent,
        most_consistent_rate=rates[consistent.id] if consistent else 0,
        completion_rates=rates,
    )
