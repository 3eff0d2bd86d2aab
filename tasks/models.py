import logging
import random
from datetime import timedelta

from django.conf import settings
from django.db import models

from donow.timezone_utils import local_today
from .habits import calculate_habit_stats

logger = logging.getLogger(__name__)

TASK_COLORS = [
    '#FF6B6B', '#4ECDC4', '#45B7D1', '#96CEB4', '#FFEEAD',
    '#D4A5A5', '#9B6B70', '#E9967A', '#66CDAA', '#DEB887',
]

DEFAULT_TASK_NAME = 'General'
DEFAULT_TASK_COLOR = '#0891B2'
DEFAULT_DAILY_GOAL = 10


def random_task_color():
    return random.choice(TASK_COLORS)


class TaskManager(models.Manager):

    def visible_to(self, user):
        """Tasks owned by ``user`` plus legacy tasks that have no owner."""
        return self.filter(models.Q(owner=user) | models.Q(owner__isnull=True))

    def get_or_create_default(self, user):
        """
        Return the user's default task, creating it on first use.

        Looked up on every call; the result is never cached across requests.
        """
        task = self.filter(owner=user, is_default=True).first()
        if task:
            return task
        task = self.create(
            name=DEFAULT_TASK_NAME,
            owner=user,
            is_default=True,
            color=DEFAULT_TASK_COLOR,
            task_type=Task.TYPE_PROJECT,
        )
        logger.info("Created default task for user %s", user.pk)
        return task


class Task(models.Model):
    """A unit of work (or a habit) that timer actions are recorded against."""

    TYPE_PROJECT = 'project'
    TYPE_HABIT = 'habit'
    TYPE_CHOICES = [
        (TYPE_PROJECT, 'Project task'),
        (TYPE_HABIT, 'Habit'),
    ]

    name = models.CharField(max_length=255, default='New task')
    color = models.CharField(max_length=7, default=random_task_color)
    task_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_PROJECT)
    is_default = models.BooleanField(default=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='tasks'
    )
    project = models.ForeignKey(
        'projects.Project', on_delete=models.PROTECT, null=True, blank=True, related_name='tasks'
    )
    daily_goal = models.PositiveIntegerField(null=True, blank=True)  # Habits only

    # Cached stats, recomputed from all completed actions
    total_actions = models.PositiveIntegerField(default=0)
    total_duration = models.DurationField(default=timedelta)
    first_action_at = models.DateTimeField(null=True, blank=True)
    last_action_at = models.DateTimeField(null=True, blank=True)

    # Cached habit stats
    current_streak = models.PositiveIntegerField(default=0)
    longest_streak = models.PositiveIntegerField(default=0)
    today_completed_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TaskManager()

    class Meta:
        ordering = ["-is_default", "created_at"]

    def __str__(self):
        return self.name

    @property
    def is_habit(self):
        return self.task_type == self.TYPE_HABIT

    def update_stats(self, user_tz, today=None):
        """
        Recompute cached stats from scratch and save them.

        Args:
            user_tz: timezone whose calendar days define habit streaks
            today: override for today's date (defaults to today in ``user_tz``)
        """
        from timer.models import Action

        completed = list(
            self.actions.filter(is_completed=True).only('user_start_time', 'user_end_time', 'action_type')
        )

        self.total_actions = len(completed)
        self.total_duration = sum((action.duration for action in completed), timedelta())
        start_times = [action.user_start_time for action in completed]
        self.first_action_at = min(start_times) if start_times else None
        self.last_action_at = max(start_times) if start_times else None

        update_fields = ['total_actions', 'total_duration', 'first_action_at', 'last_action_at', 'updated_at']

        if self.is_habit:
            if today is None:
                today = local_today(user_tz)[0]
            habit_actions = [a for a in completed if a.action_type == Action.TYPE_HABIT]
            habit_stats = calculate_habit_stats(
                habit_actions, today, user_tz, previous_longest=self.longest_streak
            )
            self.current_streak = habit_stats.current_streak
            self.longest_streak = habit_stats.longest_streak
            self.today_completed_count = habit_stats.today_completed_count
            update_fields += ['current_streak', 'longest_streak', 'today_completed_count']
        elif self.current_streak or self.longest_streak or self.today_completed_count:
            # Project tasks carry no streaks
            self.current_streak = self.longest_streak = self.today_completed_count = 0
            update_fields += ['current_streak', 'longest_streak', 'today_completed_count']

        self.save(update_fields=update_fields)
