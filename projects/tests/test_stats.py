"""Tests for the time statistics aggregator."""
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

import pytz
from django.contrib.auth import get_user_model
from django.test import TestCase

from projects.models import Project
from projects.stats import aggregate_time_stats
from tasks.models import Task
from timer.models import Action

User = get_user_model()


class StatsTestBase(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='stats@example.com', password='secret123')
        self.billable = Project.objects.create(
            name='Client work', is_billable=True, hourly_rate=Decimal('100'), owner=self.user
        )
        self.internal = Project.objects.create(name='Internal', owner=self.user)
        self.client_task = Task.objects.create(name='Design', project=self.billable, owner=self.user)
        self.internal_task = Task.objects.create(name='Planning', project=self.internal, owner=self.user)
        self.loose_task = Task.objects.create(name='Reading', owner=self.user)

    def add_action(self, task, start, minutes):
        return Action.objects.create(
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            is_completed=True,
            task=task,
            owner=self.user,
        )

    def completed_actions(self):
        return Action.objects.completed().with_task_and_project()


class AggregateTimeStatsTests(StatsTestBase):

    def setUp(self):
        super().setUp()
        day = datetime(2025, 3, 10, 9, 0, tzinfo=dt_timezone.utc)
        self.add_action(self.client_task, day, 90)
        self.add_action(self.internal_task, day + timedelta(hours=2), 30)
        self.add_action(self.loose_task, day + timedelta(hours=3), 60)

    def test_totals(self):
        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        self.assertAlmostEqual(stats['total_hours'], 3.0)
        self.assertAlmostEqual(stats['total_amount'], 150.0)

    def test_project_buckets_skip_tasks_without_project(self):
        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        self.assertEqual(len(stats['project_stats']), 2)
        by_name = {p['name']: p for p in stats['project_stats']}
        self.assertAlmostEqual(by_name['Client work']['hours'], 1.5)
        self.assertAlmostEqual(by_name['Client work']['amount'], 150.0)
        self.assertAlmostEqual(by_name['Internal']['amount'], 0.0)
        self.assertEqual(by_name['Client work']['task_count'], 1)
        self.assertEqual(by_name['Client work']['record_count'], 1)

    def test_task_buckets_include_every_task(self):
        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        self.assertEqual(len(stats['task_stats']), 3)
        loose = next(t for t in stats['task_stats'] if t['name'] == 'Reading')
        self.assertIsNone(loose['project_id'])
        self.assertIsNone(loose['project_name'])
        self.assertAlmostEqual(loose['hours'], 1.0)

    def test_single_day_bucket(self):
        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        self.assertEqual(len(stats['daily_stats']), 1)
        day = stats['daily_stats'][0]
        self.assertEqual(day['date'], '2025-03-10')
        self.assertEqual(day['record_count'], 3)
        self.assertAlmostEqual(day['hours'], 3.0)
        self.assertEqual(len(day['projects']), 2)
        self.assertEqual(len(day['tasks']), 3)

    def test_totals_match_sum_of_task_buckets(self):
        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        self.assertAlmostEqual(stats['total_hours'], sum(t['hours'] for t in stats['task_stats']))
        self.assertAlmostEqual(stats['total_amount'], sum(t['amount'] for t in stats['task_stats']))

    def test_project_hours_sum_to_total_when_every_action_has_a_project(self):
        Action.objects.filter(task=self.loose_task).delete()
        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        self.assertAlmostEqual(stats['total_hours'], sum(p['hours'] for p in stats['project_stats']))


class DailyBucketTests(StatsTestBase):

    def test_days_sorted_newest_first(self):
        base = datetime(2025, 3, 10, 12, 0, tzinfo=dt_timezone.utc)
        self.add_action(self.client_task, base - timedelta(days=2), 30)
        self.add_action(self.client_task, base, 30)
        self.add_action(self.client_task, base - timedelta(days=1), 30)

        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        dates = [day['date'] for day in stats['daily_stats']]
        self.assertEqual(dates, ['2025-03-10', '2025-03-09', '2025-03-08'])

    def test_days_use_the_user_timezone(self):
        """11 PM in Los Angeles is the next day in UTC."""
        start = datetime(2025, 3, 11, 6, 0, tzinfo=dt_timezone.utc)
        self.add_action(self.client_task, start, 30)

        la = pytz.timezone('America/Los_Angeles')
        stats = aggregate_time_stats(self.completed_actions(), la)
        self.assertEqual(stats['daily_stats'][0]['date'], '2025-03-10')

        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        self.assertEqual(stats['daily_stats'][0]['date'], '2025-03-11')

    def test_distinct_tasks_per_project(self):
        second_task = Task.objects.create(name='Build', project=self.billable, owner=self.user)
        start = datetime(2025, 3, 10, 9, 0, tzinfo=dt_timezone.utc)
        self.add_action(self.client_task, start, 15)
        self.add_action(self.client_task, start + timedelta(hours=1), 15)
        self.add_action(second_task, start + timedelta(hours=2), 15)

        stats = aggregate_time_stats(self.completed_actions(), pytz.UTC)
        project = stats['project_stats'][0]
        self.assertEqual(project['task_count'], 2)
        self.assertEqual(project['record_count'], 3)


class EmptyInputTests(TestCase):

    def test_no_actions(self):
        stats = aggregate_time_stats([], pytz.UTC)
        self.assertEqual(stats['total_hours'], 0)
        self.assertEqual(stats['total_amount'], 0)
        self.assertEqual(stats['project_stats'], [])
        self.assertEqual(stats['task_stats'], [])
        self.assertEqual(stats['daily_stats'], [])
