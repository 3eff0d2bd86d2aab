"""
Recompute the cached stats (and habit streaks) of every task.

Used as a one-time migration after importing actions, or to repair stats.

Usage:
    python manage.py recalculate_task_stats [--user=ID] [--timezone=Asia/Taipei]
"""
import pytz
from django.core.management.base import BaseCommand, CommandError

from donow.timezone_utils import get_default_timezone
from tasks.models import Task


class Command(BaseCommand):
    help = 'Recalculate cached stats for all tasks'

    def add_arguments(self, parser):
        parser.add_argument(
            '--user',
            type=int,
            help='Only recalculate tasks owned by this user id'
        )
        parser.add_argument(
            '--timezone',
            help='Timezone whose calendar days define habit streaks (default: DONOW_TIME_ZONE)'
        )

    def handle(self, *_args, **options):
        if options.get('timezone'):
            try:
                user_tz = pytz.timezone(options['timezone'])
            except pytz.exceptions.UnknownTimeZoneError:
                raise CommandError(f"Unknown timezone: {options['timezone']}")
        else:
            user_tz = get_default_timezone()

        tasks = Task.objects.all()
        if options.get('user'):
            tasks = tasks.filter(owner_id=options['user'])

        self.stdout.write(f'Recalculating stats for {tasks.count()} tasks...')

        updated = 0
        failed = 0
        for task in tasks:
            try:
                task.update_stats(user_tz)
                updated += 1
                self.stdout.write(self.style.SUCCESS(f'✓ {task.name}'))
            except Exception as e:
                failed += 1
                self.stdout.write(self.style.ERROR(f'✗ {task.name}: {e}'))

        self.stdout.write(self.style.SUCCESS(f'Updated: {updated}'))
        if failed:
            self.stdout.write(self.style.WARNING(f'Failed: {failed}'))
