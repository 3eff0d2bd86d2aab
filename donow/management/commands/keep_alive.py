"""
Ping the deployed app so the host does not put it to sleep.

Usage:
    python manage.py keep_alive [--url=https://example.com/api/health/]

Meant to be run from an external scheduler (cron, Heroku Scheduler).
"""
import requests
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

PING_TIMEOUT_SECONDS = 10


class Command(BaseCommand):
    help = 'Send a GET request to the health endpoint to keep the app awake'

    def add_arguments(self, parser):
        parser.add_argument(
            '--url',
            type=str,
            default=settings.KEEP_ALIVE_URL,
            help='URL to ping (default: KEEP_ALIVE_URL setting)'
        )

    def handle(self, *_args, **options):
        url = options['url']
        if not url:
            raise CommandError('No URL given and KEEP_ALIVE_URL is not set')

        try:
            response = requests.get(url, timeout=PING_TIMEOUT_SECONDS)
            response.raise_for_status()
        except requests.RequestException as e:
            raise CommandError(f'Keep-alive ping to {url} failed: {e}')

        self.stdout.write(self.style.SUCCESS(f'✓ {url} answered {response.status_code}'))
