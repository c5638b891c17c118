from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone
from datetime import timedelta

from tourism.engagement.models import ContentView
from tourism.engagement.services import prune_views


class Command(BaseCommand):
    help = 'Deletes raw content views older than the retention window after aggregating them'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=settings.VIEW_RETENTION_DAYS,
            help='Retention window in days',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Only report how many rows would be deleted',
        )

    def handle(self, *args, **options):
        days = options['days']
        if options['dry_run']:
            cutoff = timezone.now() - timedelta(days=days)
            stale = ContentView.objects.filter(created_at__lt=cutoff).count()
            self.stdout.write(self.style.WARNING(f"DRY RUN MODE: {stale} raw view(s) older than {days} day(s) would be pruned."))
            return

        deleted = prune_views(days)
        self.stdout.write(self.style.SUCCESS(f"Pruned {deleted} raw view(s) older than {days} day(s)."))
