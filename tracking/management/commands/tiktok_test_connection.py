from django.core.management.base import BaseCommand

from tracking.services import events_api
from tracking.services.counters import get_api_stats


class Command(BaseCommand):
    help = 'Check TikTok Events API credentials with a synthetic event.'

    def add_arguments(self, parser):
        parser.add_argument('--send-test-event', action='store_true',
                            help='Also send a sample ViewContent event through the normal path.')

    def handle(self, *args, **options):
        result = events_api.test_connection()
        style = self.style.SUCCESS if result['success'] else self.style.ERROR
        self.stdout.write(style(result['message']))

        if options['send_test_event']:
            result = events_api.send_test_event()
            style = self.style.SUCCESS if result['success'] else self.style.ERROR
            self.stdout.write(style(result['message']))

        stats = get_api_stats()
        self.stdout.write(
            f"Events sent today: {stats['events_sent_today']} | "
            f"API errors today: {stats['api_errors_today']}"
        )
