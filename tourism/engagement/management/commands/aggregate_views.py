from datetime import date, timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from tourism.engagement.services import aggregate_views


class Command(BaseCommand):
    help = 'Rolls raw content views into per-day aggregates (defaults to yesterday)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            help='Day to aggregate (YYYY-MM-DD); must be before today',
        )
        parser.add_argument(
            '--days',
            type=int,
            default=1,
            help='Aggregate this many days ending with --date (or yesterday)',
        )

    def handle(self, *args, **options):
        if options['date']:
            try:
                last_day = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError("--date must be YYYY-MM-DD")
        else:
            last_day = timezone.localdate() - timedelta(days=1)

        total = 0
        for offset in range(max(options['days'], 1)):
            day = last_day - timedelta(days=offset)
            try:
                written = aggregate_views(day)
            except ValueError as e:
                raise CommandError(str(e))
            self.stdout.write(f"{day}: {written} item(s) aggregated")
            total += written

        self.stdout.write(self.style.SUCCESS(f"Done. {total} aggregate row(s) written."))
