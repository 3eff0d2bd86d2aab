"""
Create the built-in report views.

Usage:
    python manage.py seed_report_views          # only when missing or outdated
    python manage.py seed_report_views --reset  # always re-create
"""
from django.core.management.base import BaseCommand

from reports.system_views import SYSTEM_VIEWS, seed_system_views


class Command(BaseCommand):
    help = 'Create or re-create the system report views'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete and re-create the system views even if they are up to date'
        )

    def handle(self, *_args, **options):
        if seed_system_views(reset=options['reset']):
            names = ', '.join(view['name'] for view in SYSTEM_VIEWS)
            self.stdout.write(self.style.SUCCESS(f'✓ Seeded system views: {names}'))
        else:
            self.stdout.write(self.style.WARNING('System views already up to date'))
