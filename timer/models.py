from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

DEFAULT_NOTE = 'Focus'
INTERRUPTED_NOTE = 'Interrupted'


class ActionQuerySet(models.QuerySet):

    def for_user(self, user):
        return self.filter(owner=user)

    def completed(self):
        return self.filter(is_completed=True)

    def with_task_and_project(self):
        return self.select_related('task', 'task__project')


class Action(models.Model):
    """
    A single timer session or habit completion.

    System times record when the timer really ran; the user_* times are what
    the user sees and may edit. Durations are always computed from the user
    times.
    """

    TYPE_POMODORO = 'pomodoro'
    TYPE_HABIT = 'habit'
    TYPE_CHOICES = [
        (TYPE_POMODORO, 'Pomodoro'),
        (TYPE_HABIT, 'Habit'),
    ]

    # System-recorded times (not editable by the user)
    start_time = models.DateTimeField(default=timezone.now)
    end_time = models.DateTimeField(null=True, blank=True)

    # User-editable times, default to the system times
    user_start_time = models.DateTimeField(blank=True)
    user_end_time = models.DateTimeField(null=True, blank=True)

    note = models.TextField(blank=True, default=DEFAULT_NOTE)
    is_completed = models.BooleanField(default=False)
    action_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_POMODORO)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='actions'
    )
    task = models.ForeignKey('tasks.Task', on_delete=models.PROTECT, related_name='actions')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActionQuerySet.as_manager()

    class Meta:
        ordering = ['-start_time']
        indexes = [
            models.Index(fields=['owner', 'user_start_time'], name='timer_action_owner_start_idx'),
            models.Index(fields=['task', 'is_completed'], name='timer_action_task_done_idx'),
        ]

    def __str__(self):
        return f"{self.note or 'Action'}: {self.user_start_time.strftime('%Y-%m-%d %H:%M')}"

    def save(self, *args, **kwargs):
        if self.user_start_time is None:
            self.user_start_time = self.start_time
        if self.user_end_time is None and self.end_time is not None:
            self.user_end_time = self.end_time
        super().save(*args, **kwargs)

    @property
    def duration(self):
        """Elapsed user time; zero while the action has no end."""
        if not self.user_end_time or not self.user_start_time:
            return timedelta()
        return self.user_end_time - self.user_start_time

    @property
    def duration_ms(self):
        return int(self.duration.total_seconds() * 1000)

    @property
    def duration_minutes(self):
        """Calculate duration in minutes."""
        return self.duration.total_seconds() / 60
