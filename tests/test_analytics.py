from datetime import date

import pytest
import pytz

from habit_engine.core import analytics
from habit_engine.core.analytics import DaySummary
from habit_engine.core.models import SelectedDays

from tests.conftest import NOW, TODAY, days_ago, make_habit


class TestCompletionRate:

    def test_daily_counts_every_day(self):
        habit = make_habit(completed=[TODAY, days_ago(1), days_ago(3), days_ago(5)])
        assert analytics.completion_rate(habit, 7, TODAY) == 57

    def test_weekly_counts_one_day_per_block(self):
        habit = make_habit(frequency="weekly", completed=[TODAY])
        assert analytics.completion_rate(habit, 14, TODAY) == 50

    def test_weekly_completion_off_block_day_is_ignored(self):
        habit = make_habit(frequency="weekly", completed=[days_ago(1)])
        assert analytics.completion_rate(habit, 14, TODAY) == 0

    def test_custom_counts_selected_weekdays(self):
        habit = make_habit(
            frequency="custom", selected_days=SelectedDays.only("sat", "sun"), completed=[date(2026, 10, 17)]
        )
        assert analytics.completion_rate(habit, 7, TODAY) == 50

    def test_custom_without_selected_days_is_zero(self):
        habit = make_habit(frequency="custom", selected_days=SelectedDays.only(), completed=[TODAY])
        assert analytics.completion_rate(habit, 30, TODAY) == 0

    @pytest.mark.parametrize("window", [0, -3])
    def test_empty_window_is_zero(self, window):
        habit = make_habit(completed=[TODAY])
        assert analytics.completion_rate(habit, window, TODAY) == 0

    def test_halves_round_up(self):
        habit = make_habit(completed=[TODAY])
        assert analytics.completion_rate(habit, 8, TODAY) == 13

    def test_completions_outside_window_ignored(self):
        habit = make_habit(completed=[days_ago(7), days_ago(20)])
        assert analytics.completion_rate(habit, 7, TODAY) == 0

    def test_rate_stays_in_bounds(self):
        habit = make_habit(completed=[days_ago(i) for i in range(40)])
        assert analytics.completion_rate(habit, 30, TODAY) == 100


@pytest.mark.parametrize("part,whole,expected", [
    (0, 0, 0),
    (1, 2, 50),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),
    (3, 3, 100),
])
def test_percentage(part, whole, expected):
    assert analytics.percentage(part, whole) == expected


class TestTodaysProgress:

    def test_counts_only_active_habits(self):
        habits = [
            make_habit("Read", completed=[TODAY]),
            make_habit("Gym", frequency="weekly"),
            make_habit("Hike", frequency="custom", selected_days=SelectedDays.only("sat", "sun")),
        ]

        assert [h.name for h in analytics.active_habits(habits, TODAY)] == ["Read", "Gym"]
        assert analytics.todays_progress(habits, TODAY) == 50

    def test_weekly_done_this_week_drops_out(self):
        habits = [
            make_habit("Read", completed=[TODAY]),
            make_habit("Gym", frequency="weekly", completed=[days_ago(1)]),
        ]
        assert analytics.todays_progress(habits, TODAY) == 100

    def test_nothing_due_is_zero(self):
        habits = [make_habit("Hike", frequency="custom", selected_days=SelectedDays.only("sat"))]
        assert analytics.todays_progress(habits, TODAY) == 0
        assert analytics.todays_progress([], TODAY) == 0


class TestLongestStreak:

    def test_highest_best_streak_wins(self):
        habits = [make_habit("A", best_streak=3), make_habit("B", best_streak=9), make_habit("C", best_streak=4)]
        assert analytics.longest_streak_habit(habits).name == "B"

    def test_earliest_wins_ties(self):
        habits = [make_habit("A", best_streak=5), make_habit("B", best_streak=5)]
        assert analytics.longest_streak_habit(habits).name == "A"

    def test_all_zero_returns_first(self):
        habits = [make_habit("A"), make_habit("B")]
        assert analytics.longest_streak_habit(habits).name == "A"

    def test_empty(self):
        assert analytics.longest_streak_habit([]) is None


class TestMostConsistent:

    def test_highest_rate_wins(self):
        habits = [
            make_habit("A", completed=[TODAY]),
            make_habit("B", completed=[TODAY, days_ago(1), days_ago(2)]),
        ]
        assert analytics.most_consistent_habit(habits, 7, TODAY).name == "B"

    def test_earliest_wins_ties(self):
        habits = [make_habit("A", completed=[TODAY]), make_habit("B", completed=[days_ago(1)])]
        assert analytics.most_consistent_habit(habits, 7, TODAY).name == "A"

    def test_no_completions_in_window(self):
        habits = [make_habit("A", completed=[days_ago(30)]), make_habit("B")]
        assert analytics.most_consistent_habit(habits, 7, TODAY) is None

    def test_empty(self):
        assert analytics.most_consistent_habit([], 30, TODAY) is None


class TestTotalDaysTracked:

    def test_exact_days(self):
        habits = [make_habit(created_at="2026-10-16T09:00:00+00:00")]
        assert analytics.total_days_tracked(habits, NOW) == 3

    def test_partial_day_rounds_up(self):
        habits = [make_habit(created_at="2026-10-16T08:00:00+00:00")]
        assert analytics.total_days_tracked(habits, NOW) == 4

    def test_uses_oldest_habit(self):
        habits = [
            make_habit("A", created_at="2026-10-18T09:00:00+00:00"),
            make_habit("B", created_at="2026-10-09T09:00:00.000Z"),
        ]
        assert analytics.total_days_tracked(habits, NOW) == 10

    def test_naive_created_at_taken_in_clock_timezone(self):
        berlin = pytz.timezone("Europe/Berlin")
        now = berlin.localize(NOW.replace(tzinfo=None))
        habits = [make_habit(created_at="2026-10-17T09:00:00")]
        assert analytics.total_days_tracked(habits, now) == 2

    def test_no_habits(self):
        assert analytics.total_days_tracked([], NOW) == 0


class TestCalendarSummary:

    def test_counts_completions_per_day(self):
        habits = [
            make_habit("A", completed=[days_ago(2), TODAY]),
            make_habit("B", completed=[TODAY]),
            make_habit("C"),
        ]

        summary = analytics.calendar_summary(habits, days_ago(6), TODAY)

        assert summary == {
            days_ago(2): DaySummary(total=1, completed=1),
            TODAY: DaySummary(total=2, completed=2),
        }
        assert list(summary) == [days_ago(2), TODAY]
        assert summary[TODAY].is_complete
        assert summary[TODAY].percentage == 100

    def test_range_is_inclusive(self):
        habits = [make_habit(completed=[days_ago(10), days_ago(5), days_ago(4)])]
        summary = analytics.calendar_summary(habits, days_ago(5), days_ago(4))
        assert list(summary) == [days_ago(5), days_ago(4)]

    def test_empty_day_summary(self):
        assert not DaySummary().is_complete
        assert DaySummary().percentage == 0


def test_build_stats_summary():
    habits = [
        make_habit("Read", completed=[TODAY, days_ago(1)], streak=2, best_streak=5),
        make_habit("Gym", frequency="weekly", best_streak=8, created_at="2026-09-29T09:00:00+00:00"),
    ]

    summary = analytics.build_stats_summary(habits, 7, NOW, TODAY)

    assert summary.window_days == 7
    assert summary.total_habits == 2
    assert summary.days_tracked == 20
    assert summary.longest_streak_habit.name == "Gym"
    assert summary.longest_streak == 8
    assert summary.most_consistent_habit.name == "Read"
    assert summary.most_consistent_rate == 29
    assert summary.completion_rates == {"habit-read": 29, "habit-gym": 0}


def test_build_stats_summary_empty():
    summary = analytics.build_stats_summary([], 30, NOW, TODAY)

    assert summary.total_habits == 0
    assert summary.days_tracked == 0
    assert summary.longest_streak_habit is None
    assert summary.longest_streak == 0
    assert summary.most_consistent_habit is None
    assert summary.completion_rates == {}
