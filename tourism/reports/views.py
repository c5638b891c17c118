import logging
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.core.cache import cache
from django.db.models import Count, Sum

from tourism.content.models import Post, Video, PhotoFeature
from tourism.core.cache_utils import (
    build_tagged_key, DASHBOARD_STATS_CACHE_TTL, TAG_DASHBOARD_STATS, TAG_LIKE_STATUS, TAG_USER, TAG_VIEW_STATS,
)
from tourism.core.models import STATUS_CHOICES, User
from tourism.core.permissions import IsActiveEditor, is_admin
from tourism.core.targets import describe_target
from tourism.engagement.models import Comment, ContentLike, ContentView
from tourism.hero.models import HeroSlide
from tourism.hotels.models import Hotel
from tourism.regions.models import Region

logger = logging.getLogger('tourism.reports')

TOP_LIMIT_DEFAULT = 5
TOP_LIMIT_MAX = 50


def _status_counts(queryset):
    counts = {value: 0 for value, _ in STATUS_CHOICES}
    for row in queryset.alive().values('status').annotate(count=Count('id')).order_by():
        counts[row['status']] = row['count']
    counts['total'] = sum(counts.values())
    counts['trashed'] = queryset.trashed().count()
    return counts


def _user_counts():
    users = User.objects.all()
    return {
        'total': users.count(),
        'admins': users.filter(role=User.ROLE_ADMIN).count(),
        'editors': users.filter(role=User.ROLE_EDITOR).count(),
        'pending': users.filter(role=User.ROLE_EDITOR, is_approved=False, banned_at__isnull=True).count(),
        'banned': users.filter(banned_at__isnull=False).count(),
    }


def build_dashboard_stats(include_users=False):
    post_types = {value: 0 for value, _ in Post.TYPE_CHOICES}
    for row in Post.objects.alive().values('type').annotate(count=Count('id')).order_by():
        post_types[row['type']] = row['count']

    comment_counts = {value: 0 for value, _ in Comment.STATUS_CHOICES}
    for row in Comment.objects.values('status').annotate(count=Count('id')).order_by():
        comment_counts[row['status']] = row['count']
    comment_counts['total'] = sum(comment_counts.values())

    stats = {
        'posts': {**_status_counts(Post.objects), 'by_type': post_types},
        'regions': _status_counts(Region.objects),
        'videos': _status_counts(Video.objects),
        'photos': _status_counts(PhotoFeature.objects),
        'hotels': _status_counts(Hotel.objects),
        'hero_slides': {
            'total': HeroSlide.objects.count(),
            'active': HeroSlide.objects.filter(is_active=True).count(),
        },
        'comments': comment_counts,
        'engagement': {
            'total_views': sum(
                model.objects.alive().aggregate(total=Sum('view_count'))['total'] or 0
                for model in (Post, Video, PhotoFeature, Hotel)
            ),
            'total_likes': ContentLike.objects.count(),
            'views_tracked': ContentView.objects.count(),
        },
    }
    if include_users:
        stats['users'] = _user_counts()
    return stats


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def dashboard_stats(request):
    """Content, comment and engagement counts for the dashboard home; admins also get user counts"""
    include_users = is_admin(request.user)
    cache_key = build_tagged_key(
        'dashboard_stats', [TAG_DASHBOARD_STATS, TAG_VIEW_STATS, TAG_LIKE_STATUS, TAG_USER], include_users=include_users
    )
    stats = cache.get(cache_key)
    if stats is None:
        stats = build_dashboard_stats(include_users)
        cache.set(cache_key, stats, DASHBOARD_STATS_CACHE_TTL)
        logger.debug(f"Dashboard stats rebuilt (users={include_users})")

    response = Response(stats)
    # Authenticated content: browser-level cache only
    response['Cache-Control'] = 'private, max-age=60'
    return response


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def top_content(request):
    """Most viewed published posts, videos and photo features"""
    try:
        limit = int(request.query_params.get('limit', TOP_LIMIT_DEFAULT))
    except (TypeError, ValueError):
        limit = TOP_LIMIT_DEFAULT
    limit = min(max(limit, 1), TOP_LIMIT_MAX)

    results = {}
    for key, target_type, model in (('posts', 'post', Post), ('videos', 'video', Video), ('photos', 'photo', PhotoFeature)):
        items = model.objects.published().order_by('-view_count', '-published_at')[:limit]
        results[key] = [
            {**describe_target(target_type, obj), 'view_count': obj.view_count, 'like_count': obj.like_count}
            for obj in items
        ]
    return Response(results)
