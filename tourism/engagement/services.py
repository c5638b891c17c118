"""
Like, view and view-aggregation logic shared by the API and the management
commands.

Denormalised counters (`like_count`, `view_count`) are always re-synced from
the authoritative rows instead of being incremented.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Max, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from tourism.core.cache_signals import invalidate_on_commit
from tourism.core.cache_utils import TAG_LIKE_STATUS, TAG_VIEW_STATS, TARGET_TYPE_TAGS
from tourism.core.targets import get_target, get_target_model
from tourism.notifications.services import notify_view_milestone

from .models import ContentLike, ContentView, ViewDailyAggregate

logger = logging.getLogger(__name__)

LIKE_TARGETS = ('post', 'video', 'photo')
VIEW_TARGETS = ('post', 'video', 'photo', 'hotel')
VIEW_DEDUP_WINDOW = timedelta(hours=24)


class TargetNotFound(Exception):
    """The item does not exist, is not published, or cannot be liked/viewed"""


def sync_like_count(target_type, target_id):
    count = ContentLike.objects.filter(target_type=target_type, target_id=target_id).count()
    get_target_model(target_type).objects.filter(pk=target_id).update(like_count=count)
    # .update() sends no post_save
    invalidate_on_commit(TAG_LIKE_STATUS, TARGET_TYPE_TAGS[target_type])
    return count


def like_status(target_type, target_id, viewer_hash):
    target = get_target(target_type, target_id) if target_type in LIKE_TARGETS else None
    if target is None:
        raise TargetNotFound(f"{target_type} {target_id}")
    liked = ContentLike.objects.filter(target_type=target_type, target_id=target.pk, viewer_hash=viewer_hash).exists()
    return liked, target.like_count


def toggle_like(target_type, target_id, viewer_hash, user=None):
    """Remove the viewer's like if present, otherwise add one. Returns (liked, like_count)."""
    if target_type not in LIKE_TARGETS:
        raise TargetNotFound(f"{target_type} cannot be liked")

    with transaction.atomic():
        deleted, _ = ContentLike.objects.filter(
            target_type=target_type, target_id=target_id, viewer_hash=viewer_hash
        ).delete()
        if deleted:
            liked = False
        else:
            target = get_target(target_type, target_id)
            if target is None:
                raise TargetNotFound(f"{target_type} {target_id}")
            try:
                with transaction.atomic():
                    ContentLike.objects.create(
                        target_type=target_type,
                        target_id=target.pk,
                        viewer_hash=viewer_hash,
                        user=user if user is not None and user.is_authenticated else None,
                    )
            except IntegrityError:
                # A concurrent request from the same viewer already liked it
                logger.debug(f"Duplicate like ignored for {target_type} {target_id}")
            liked = True
        like_count = sync_like_count(target_type, target_id)
    return liked, like_count


def top_liked(target_type, limit):
    model = get_target_model(target_type)
    return model.objects.published().order_by('-like_count', '-published_at')[:limit]


def total_views(target_type, target_id):
    """Rolled-up daily counts plus raw views on days that have no roll-up row"""
    aggregated = ViewDailyAggregate.objects.filter(target_type=target_type, target_id=target_id)
    rolled_up = aggregated.aggregate(total=Sum('view_count'))['total'] or 0
    raw = (
        ContentView.objects.filter(target_type=target_type, target_id=target_id)
        .annotate(day=TruncDate('created_at'))
        .exclude(day__in=aggregated.values('date'))
    )
    return rolled_up + raw.count()


def sync_view_count(target_type, target_id):
    count = total_views(target_type, target_id)
    get_target_model(target_type).objects.filter(pk=target_id).update(view_count=count)
    return count


def record_view(target_type, target_id, viewer_hash):
    """Record a view unless this viewer was counted in the last 24 hours. Returns True when recorded."""
    if target_type not in VIEW_TARGETS:
        raise TargetNotFound(f"{target_type} views are not tracked")
    target = get_target(target_type, target_id)
    if target is None:
        raise TargetNotFound(f"{target_type} {target_id}")

    since = timezone.now() - VIEW_DEDUP_WINDOW
    already_counted = ContentView.objects.filter(
        target_type=target_type, target_id=target.pk, viewer_hash=viewer_hash, created_at__gte=since
    ).exists()
    if already_counted:
        return False

    ContentView.objects.create(target_type=target_type, target_id=target.pk, viewer_hash=viewer_hash)
    view_count = sync_view_count(target_type, target.pk)
    notify_view_milestone(target_type, target, view_count)
    return True


def view_stats(target_type, target_id):
    unique_viewers = (
        ContentView.objects.filter(target_type=target_type, target_id=target_id)
        .values('viewer_hash').distinct().count()
    )
    return {
        'target_type': target_type,
        'target_id': str(target_id),
        'total_views': total_views(target_type, target_id),
        'unique_viewers': unique_viewers,
    }


def trending(target_type, days=7, limit=10):
    """Most viewed published items over the last `days` days, with their view counts"""
    since = timezone.now() - timedelta(days=days)
    rows = (
        ContentView.objects.filter(target_type=target_type, created_at__gte=since)
        .values('target_id')
        .annotate(views=Count('id'))
        .order_by('-views')
    )
    model = get_target_model(target_type)
    results = []
    # Candidates may be unpublished; over-fetch and keep the first `limit` visible ones
    candidates = list(rows[:limit * 3])
    published = model.objects.published().in_bulk([row['target_id'] for row in candidates])
    for row in candidates:
        obj = published.get(row['target_id'])
        if obj is not None:
            results.append((obj, row['views']))
        if len(results) >= limit:
            break
    return results


def aggregate_views(day=None):
    """Roll one day's raw views (default: yesterday) into daily aggregates. Returns rows written."""
    if day is None:
        day = timezone.localdate() - timedelta(days=1)
    if day >= timezone.localdate():
        raise ValueError("Only days before today can be aggregated")

    rows = (
        ContentView.objects.annotate(day=TruncDate('created_at'))
        .filter(day=day)
        .values('target_type', 'target_id')
        .annotate(views=Count('id'), viewers=Count('viewer_hash', distinct=True))
    )
    written = 0
    with transaction.atomic():
        for row in rows:
            ViewDailyAggregate.objects.update_or_create(
                target_type=row['target_type'],
                target_id=row['target_id'],
                date=day,
                defaults={'view_count': row['views'], 'unique_viewers': row['viewers']},
            )
            written += 1
    if written:
        invalidate_on_commit(TAG_VIEW_STATS)
    logger.info(f"Aggregated views for {day}: {written} item(s)")
    return written


def prune_views(days=None):
    """
    Delete raw views older than the retention window. Every day being pruned
    is aggregated first so totals survive. Returns rows deleted.
    """
    if days is None:
        days = settings.VIEW_RETENTION_DAYS
    cutoff = timezone.now() - timedelta(days=days)
    stale = ContentView.objects.filter(created_at__lt=cutoff)

    for day in stale.dates('created_at', 'day'):
        aggregate_views(day)
    deleted, _ = stale.delete()
    if deleted:
        invalidate_on_commit(TAG_VIEW_STATS)
    logger.info(f"Pruned {deleted} raw view(s) older than {days} day(s)")
    return deleted


def summary():
    now = timezone.now()
    today = timezone.localdate()
    return {
        'raw_views': ContentView.objects.count(),
        'views_today': ContentView.objects.filter(created_at__date=today).count(),
        'views_last_7_days': ContentView.objects.filter(created_at__gte=now - timedelta(days=7)).count(),
        'aggregate_rows': ViewDailyAggregate.objects.count(),
        'last_aggregated_date': ViewDailyAggregate.objects.aggregate(last=Max('date'))['last'],
        'by_type': {
            row['target_type']: row['count']
            for row in ContentView.objects.values('target_type').annotate(count=Count('id')).order_by()
        },
        'retention_days': settings.VIEW_RETENTION_DAYS,
    }
