"""
Habit streak calculation.

A streak is the number of consecutive calendar days (in the user's timezone)
with at least one completed habit action, counted backwards from today.
"""
from collections import Counter
from dataclasses import dataclass
from datetime import timedelta

from donow.timezone_utils import local_date


@dataclass
class HabitStats:
    """Cached habit figures stored on a Task."""

    current_streak: int = 0
    longest_streak: int = 0
    today_completed_count: int = 0


def count_actions_per_day(actions, user_tz):
    """Map each local calendar date to the number of actions started on it."""
    return Counter(local_date(action.user_start_time, user_tz) for action in actions)


def calculate_habit_stats(actions, today, user_tz, previous_longest=0):
    """
    Compute habit stats for one task's completed habit actions.

    Args:
        actions: completed habit actions (anything with ``user_start_time``), any order
        today: today's date in ``user_tz``
        user_tz: timezone used to bucket actions into calendar days
        previous_longest: longest streak stored so far

    The longest streak only ever grows: it is the larger of the current
    streak and ``previous_longest``, not a recount over the full history.
    """
    per_day = count_actions_per_day(actions, user_tz)

    current_streak = 0
    day = today
    while per_day.get(day):
        current_streak += 1
        day -= timedelta(days=1)

    return HabitStats(
        current_streak=current_streak,
        longest_streak=max(current_streak, previous_longest or 0),
        today_completed_count=per_day.get(today, 0),
    )
