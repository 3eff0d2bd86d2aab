"""
Close timers that were left running.

Usage:
    python manage.py cleanup_actions [--minutes=30]
"""
from django.core.management.base import BaseCommand

from timer.models import Action
from timer.views import STALE_ACTION_MINUTES, close_stale_actions


class Command(BaseCommand):
    help = 'Close actions left running longer than the given number of minutes'

    def add_arguments(self, parser):
        parser.add_argument(
            '--minutes',
            type=int,
            default=STALE_ACTION_MINUTES,
            help=f'Age in minutes after which an open action is closed (default: {STALE_ACTION_MINUTES})'
        )

    def handle(self, *_args, **options):
        closed = close_stale_actions(Action.objects.all(), minutes=options['minutes'])
        self.stdout.write(self.style.SUCCESS(f'✓ Closed {closed} stale actions'))
