"""Tests for task endpoints and the recalculate command."""
import json
from datetime import timedelta
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from projects.models import Project
from tasks.models import DEFAULT_DAILY_GOAL, DEFAULT_TASK_NAME, TASK_COLORS, Task
from timer.models import Action

User = get_user_model()


class TaskViewTestBase(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='owner@example.com', password='secret123')
        self.other = User.objects.create_user(username='other@example.com', password='secret123')
        self.client.force_login(self.user)

    def post_json(self, url, data=None):
        return self.client.post(url, data=json.dumps(data or {}), content_type='application/json')

    def put_json(self, url, data=None):
        return self.client.put(url, data=json.dumps(data or {}), content_type='application/json')


class TaskCRUDTests(TaskViewTestBase):

    def test_create_task_gets_palette_color(self):
        resp = self.post_json(reverse('tasks:task_collection'), {'name': 'Write docs'})
        self.assertEqual(resp.status_code, 201)
        task = resp.json()['task']
        self.assertEqual(task['name'], 'Write docs')
        self.assertIn(task['color'], TASK_COLORS)
        self.assertEqual(task['type'], Task.TYPE_PROJECT)
        self.assertIsNone(task['daily_goal'])

    def test_create_habit_defaults_daily_goal(self):
        resp = self.post_json(reverse('tasks:task_collection'), {'name': 'Water', 'type': 'habit'})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['task']['daily_goal'], DEFAULT_DAILY_GOAL)

    def test_create_with_own_project(self):
        project = Project.objects.create(name='Client', owner=self.user)
        resp = self.post_json(reverse('tasks:task_collection'), {'name': 'Design', 'project_id': project.id})
        self.assertEqual(resp.json()['task']['project_name'], 'Client')

    def test_create_with_foreign_project_rejected(self):
        project = Project.objects.create(name='Theirs', owner=self.other)
        resp = self.post_json(reverse('tasks:task_collection'), {'name': 'Design', 'project_id': project.id})
        self.assertEqual(resp.status_code, 400)

    def test_invalid_color_rejected(self):
        resp = self.post_json(reverse('tasks:task_collection'), {'name': 'X', 'color': 'red'})
        self.assertEqual(resp.status_code, 400)

    def test_invalid_type_rejected(self):
        resp = self.post_json(reverse('tasks:task_collection'), {'name': 'X', 'type': 'chore'})
        self.assertEqual(resp.status_code, 400)

    def test_list_filters_by_type(self):
        Task.objects.create(name='Code', owner=self.user)
        Task.objects.create(name='Walk', task_type=Task.TYPE_HABIT, owner=self.user)
        Task.objects.create(name='Foreign', owner=self.other)

        resp = self.client.get(reverse('tasks:task_collection'), {'type': 'habit'})
        self.assertEqual([t['name'] for t in resp.json()['tasks']], ['Walk'])

        resp = self.client.get(reverse('tasks:task_collection'))
        self.assertEqual(len(resp.json()['tasks']), 2)

    def test_update_task(self):
        task = Task.objects.create(name='Old', owner=self.user)
        resp = self.put_json(reverse('tasks:task_detail', args=[task.id]), {'name': 'New', 'color': '#123ABC'})
        self.assertEqual(resp.status_code, 200)
        task.refresh_from_db()
        self.assertEqual((task.name, task.color), ('New', '#123ABC'))

    def test_habit_turned_project_drops_streaks(self):
        task = Task.objects.create(
            name='Run', task_type=Task.TYPE_HABIT, daily_goal=1, owner=self.user,
            current_streak=4, longest_streak=9, today_completed_count=1,
        )
        resp = self.put_json(reverse('tasks:task_detail', args=[task.id]), {'type': 'project'})
        self.assertEqual(resp.status_code, 200)
        stats = resp.json()['task']['habit_stats']
        self.assertEqual((stats['current_streak'], stats['longest_streak'], stats['today_completed_count']), (0, 0, 0))
        task.refresh_from_db()
        self.assertEqual(task.current_streak, 0)

    def test_get_other_users_task_forbidden(self):
        task = Task.objects.create(name='Theirs', owner=self.other)
        resp = self.client.get(reverse('tasks:task_detail', args=[task.id]))
        self.assertEqual(resp.status_code, 403)

    def test_ownerless_task_accessible(self):
        task = Task.objects.create(name='Legacy')
        resp = self.client.get(reverse('tasks:task_detail', args=[task.id]))
        self.assertEqual(resp.status_code, 200)

    def test_delete_task_with_actions_rejected(self):
        task = Task.objects.create(name='Busy', owner=self.user)
        Action.objects.create(task=task, owner=self.user)
        resp = self.client.delete(reverse('tasks:task_detail', args=[task.id]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['action_count'], 1)
        self.assertTrue(Task.objects.filter(pk=task.pk).exists())

    def test_delete_task(self):
        task = Task.objects.create(name='Idle', owner=self.user)
        resp = self.client.delete(reverse('tasks:task_detail', args=[task.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(Task.objects.filter(pk=task.pk).exists())


class DefaultTaskTests(TaskViewTestBase):

    def test_default_task_created_once(self):
        first = Task.objects.get_or_create_default(self.user)
        second = Task.objects.get_or_create_default(self.user)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(first.name, DEFAULT_TASK_NAME)
        self.assertTrue(first.is_default)

    def test_default_task_recreated_after_removal(self):
        Task.objects.get_or_create_default(self.user).delete()
        task = Task.objects.get_or_create_default(self.user)
        self.assertEqual(Task.objects.filter(owner=self.user, is_default=True).count(), 1)
        self.assertTrue(task.is_default)


class RecalculateStatsTests(TaskViewTestBase):

    def setUp(self):
        super().setUp()
        self.task = Task.objects.create(name='Write', owner=self.user)
        now = timezone.now()
        Action.objects.create(
            start_time=now - timedelta(minutes=30), end_time=now, is_completed=True,
            task=self.task, owner=self.user,
        )

    def test_endpoint_refreshes_cached_stats(self):
        resp = self.client.post(reverse('tasks:recalculate_stats'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['updated'], 1)
        self.task.refresh_from_db()
        self.assertEqual(self.task.total_actions, 1)
        self.assertEqual(self.task.total_duration, timedelta(minutes=30))

    def test_command_refreshes_cached_stats(self):
        out = StringIO()
        call_command('recalculate_task_stats', stdout=out)
        self.assertIn('Updated: 1', out.getvalue())
        self.task.refresh_from_db()
        self.assertEqual(self.task.total_actions, 1)

    def test_command_rejects_unknown_timezone(self):
        with self.assertRaises(CommandError):
            call_command('recalculate_task_stats', timezone='Mars/Olympus', stdout=StringIO())
