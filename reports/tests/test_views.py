"""Tests for report export and saved view endpoints."""
import io
import json
import os
import shutil
import tempfile
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase, Client, override_settings
from django.urls import reverse
from openpyxl import load_workbook

from projects.models import Project
from reports.models import ReportView
from reports.system_views import SYSTEM_VIEW_NAMES, seed_system_views
from tasks.models import Task
from timer.models import Action

User = get_user_model()


class ReportViewTestBase(TestCase):

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(username='owner@example.com', password='secret123')
        self.other = User.objects.create_user(username='other@example.com', password='secret123')
        self.client.force_login(self.user)

    def post_json(self, url, data=None):
        return self.client.post(url, data=json.dumps(data or {}), content_type='application/json')


class ExportTests(ReportViewTestBase):

    def setUp(self):
        super().setUp()
        self.export_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.export_dir, ignore_errors=True)
        settings_override = override_settings(EXPORT_TEMP_DIR=self.export_dir)
        settings_override.enable()
        self.addCleanup(settings_override.disable)

        project = Project.objects.create(
            name='Client', is_billable=True, hourly_rate=Decimal('100'), owner=self.user
        )
        self.task = Task.objects.create(name='Design', project=project, owner=self.user)
        start = datetime(2025, 3, 10, 9, 0, tzinfo=dt_timezone.utc)
        Action.objects.create(
            start_time=start, end_time=start + timedelta(minutes=90), is_completed=True,
            note='Wireframes, round "2"', task=self.task, owner=self.user,
        )

    def export(self, **params):
        query = {'startDate': '2025-03-10T00:00:00Z', 'endDate': '2025-03-11T00:00:00Z'}
        query.update(params)
        return self.client.get(reverse('reports:export_report'), query)

    def read(self, resp):
        content = b''.join(resp.streaming_content)
        resp.close()
        return content

    def test_csv_export(self):
        resp = self.export(format='csv', fields='task,description,amount')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp['Content-Type'], 'text/csv')
        self.assertRegex(resp['Content-Disposition'], r'attachment; filename="time-report-\d+\.csv"')

        lines = self.read(resp).decode('utf-8').splitlines()
        self.assertEqual(lines[0], 'Task,Description,Amount')
        self.assertEqual(lines[1], 'Design,"Wireframes, round ""2""",150.00')

    def test_xlsx_export_defaults(self):
        resp = self.export()
        self.assertEqual(
            resp['Content-Type'], 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        sheet = load_workbook(io.BytesIO(self.read(resp))).active
        self.assertEqual(sheet.max_column, 5)
        self.assertEqual(sheet['A2'].value, '2025-03-10')
        self.assertEqual(sheet['E2'].value, 90)

    def test_temp_file_removed_after_download(self):
        resp = self.export(format='csv')
        self.assertEqual(len(os.listdir(self.export_dir)), 1)
        self.read(resp)
        self.assertEqual(os.listdir(self.export_dir), [])

    def test_saved_view_sets_fields_and_clock(self):
        view = ReportView.objects.get(name='Bike-GV', is_system=True)
        resp = self.export(viewId=view.id, format='csv')
        self.assertEqual(
            resp['Content-Type'], 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        sheet = load_workbook(io.BytesIO(self.read(resp))).active
        self.assertEqual(sheet['F1'].value, 'Time (HH:MM-HH:MM)')
        self.assertEqual(sheet['F2'].value, '09:00-10:30')

    def test_unknown_view_falls_back_to_query(self):
        resp = self.export(viewId=99999, format='csv', fields='task')
        self.assertEqual(resp['Content-Type'], 'text/csv')
        self.assertEqual(self.read(resp).decode('utf-8').splitlines()[0], 'Task')

    def test_twelve_hour_time_by_default(self):
        resp = self.export(format='csv', fields='time')
        self.assertEqual(self.read(resp).decode('utf-8').splitlines()[1], '09:00am – 10:30am')

    def test_time_format_query_param(self):
        resp = self.export(format='csv', fields='time', timeFormat='24')
        self.assertEqual(self.read(resp).decode('utf-8').splitlines()[1], '09:00-10:30')

    def test_unsupported_format(self):
        resp = self.export(format='pdf')
        self.assertEqual(resp.status_code, 400)

    def test_no_records_in_range(self):
        resp = self.export(startDate='2024-01-01T00:00:00Z', endDate='2024-01-02T00:00:00Z')
        self.assertEqual(resp.status_code, 404)

    def test_other_users_records_not_exported(self):
        self.client.force_login(self.other)
        resp = self.export(format='csv')
        self.assertEqual(resp.status_code, 404)

    def test_dates_required(self):
        resp = self.client.get(reverse('reports:export_report'), {'format': 'csv'})
        self.assertEqual(resp.status_code, 400)


class SavedViewTests(ReportViewTestBase):

    def test_system_views_listed(self):
        ReportView.objects.all().delete()
        resp = self.client.get(reverse('reports:views_collection'))
        self.assertEqual(resp.status_code, 200)
        views = resp.json()['views']
        self.assertEqual({v['name'] for v in views}, SYSTEM_VIEW_NAMES)
        self.assertEqual(views[0]['name'], 'DaDuo')
        self.assertTrue(views[0]['is_default'])

    def test_list_excludes_other_users_views(self):
        ReportView.objects.create(name='Mine', fields=['date'], owner=self.user)
        ReportView.objects.create(name='Theirs', fields=['date'], owner=self.other)
        names = {v['name'] for v in self.client.get(reverse('reports:views_collection')).json()['views']}
        self.assertIn('Mine', names)
        self.assertNotIn('Theirs', names)

    def test_create_view(self):
        resp = self.post_json(reverse('reports:views_collection'), {
            'name': 'Billing', 'fields': ['date', 'hours', 'amount'], 'format': 'csv',
        })
        self.assertEqual(resp.status_code, 201)
        view = ReportView.objects.get(name='Billing')
        self.assertEqual(view.owner, self.user)
        self.assertEqual(view.fields, ['date', 'hours', 'amount'])
        self.assertFalse(view.is_system)

    def test_create_view_requires_fields(self):
        resp = self.post_json(reverse('reports:views_collection'), {'name': 'Empty', 'fields': []})
        self.assertEqual(resp.status_code, 400)

    def test_create_view_rejects_non_string_fields(self):
        resp = self.post_json(reverse('reports:views_collection'), {'name': 'Odd', 'fields': [{'id': 'date'}]})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['error'], 'Fields must be given as field ids')

    def test_create_view_flags_must_be_boolean(self):
        resp = self.post_json(reverse('reports:views_collection'), {
            'name': 'Flags', 'fields': ['date'], 'is_default': 'yes',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(ReportView.objects.filter(name='Flags').exists())

    def test_create_view_requires_name(self):
        resp = self.post_json(reverse('reports:views_collection'), {'fields': ['date']})
        self.assertEqual(resp.status_code, 400)

    def test_new_default_unsets_previous(self):
        first = ReportView.objects.create(name='A', fields=['date'], is_default=True, owner=self.user)
        ReportView.objects.create(name='B', fields=['date'], is_default=True, owner=self.user)
        first.refresh_from_db()
        self.assertFalse(first.is_default)

    def test_delete_own_view(self):
        view = ReportView.objects.create(name='Mine', fields=['date'], owner=self.user)
        resp = self.client.delete(reverse('reports:view_detail', args=[view.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(ReportView.objects.filter(pk=view.pk).exists())

    def test_delete_system_view_forbidden(self):
        view = ReportView.objects.get(name='DaDuo', is_system=True)
        resp = self.client.delete(reverse('reports:view_detail', args=[view.id]))
        self.assertEqual(resp.status_code, 403)
        self.assertTrue(ReportView.objects.filter(pk=view.pk).exists())

    def test_delete_other_users_view_forbidden(self):
        view = ReportView.objects.create(name='Theirs', fields=['date'], owner=self.other)
        resp = self.client.delete(reverse('reports:view_detail', args=[view.id]))
        self.assertEqual(resp.status_code, 403)

    def test_reset_recreates_system_views(self):
        ReportView.objects.filter(name='Bike-GV').update(fields=['date'])
        resp = self.client.post(reverse('reports:reset_views'))
        self.assertEqual(resp.status_code, 200)
        bike = ReportView.objects.get(name='Bike-GV', is_system=True)
        self.assertEqual(bike.fields, ['date', 'description', 'startTime', 'endTime', 'duration', 'time'])
        self.assertTrue(bike.use_24_hour)


class SeedSystemViewsTests(TestCase):

    def test_migration_seeded_views(self):
        self.assertEqual(set(ReportView.objects.filter(is_system=True).values_list('name', flat=True)),
                         SYSTEM_VIEW_NAMES)

    def test_seed_is_noop_when_current(self):
        self.assertFalse(seed_system_views())
        self.assertEqual(ReportView.objects.filter(is_system=True).count(), len(SYSTEM_VIEW_NAMES))

    def test_outdated_system_views_replaced(self):
        ReportView.objects.create(name='Legacy', fields=['date'], is_system=True)
        self.assertTrue(seed_system_views())
        self.assertEqual(set(ReportView.objects.filter(is_system=True).values_list('name', flat=True)),
                         SYSTEM_VIEW_NAMES)

    def test_seed_command(self):
        out = StringIO()
        call_command('seed_report_views', reset=True, stdout=out)
        self.assertIn('Seeded system views', out.getvalue())
