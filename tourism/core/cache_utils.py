"""
Tag-versioned response caching for the public read endpoints.

Every cache key embeds the current version of each tag the response depends
on. Invalidating a tag replaces its version, which makes every key built on
the old version unreachable at once on any cache backend (no key scans).
"""
from django.core.cache import cache
from functools import wraps
from rest_framework.response import Response
import hashlib
import logging
import uuid

from .revalidation import notify_frontend

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
PUBLIC_LIST_CACHE_TTL = 300  # 5 minutes
PUBLIC_DETAIL_CACHE_TTL = 600  # 10 minutes
DASHBOARD_STATS_CACHE_TTL = 120  # 2 minutes

# Tags shared with the frontend cache
TAG_POST = 'Post'
TAG_REGION = 'Region'
TAG_HOTEL = 'Hotel'
TAG_VIDEO = 'Video'
TAG_PHOTO = 'Photo'
TAG_HERO_SLIDE = 'HeroSlide'
TAG_TAG = 'Tag'
TAG_COMMENT = 'Comment'
TAG_CONTENT_LINK = 'ContentLink'
TAG_NOTIFICATION = 'Notification'
TAG_DASHBOARD_STATS = 'DashboardStats'
TAG_SEARCH = 'Search'
TAG_LIKE_STATUS = 'LikeStatus'
TAG_VIEW_STATS = 'ViewStats'
TAG_USER = 'User'
TAG_MEDIA = 'Media'

ALL_TAGS = [
    TAG_POST, TAG_REGION, TAG_HOTEL, TAG_VIDEO, TAG_PHOTO, TAG_HERO_SLIDE,
    TAG_TAG, TAG_COMMENT, TAG_CONTENT_LINK, TAG_NOTIFICATION,
    TAG_DASHBOARD_STATS, TAG_SEARCH, TAG_LIKE_STATUS, TAG_VIEW_STATS, TAG_USER, TAG_MEDIA,
]

# Target type -> tag, for endpoints keyed by a generic target
TARGET_TYPE_TAGS = {
    'post': TAG_POST,
    'video': TAG_VIDEO,
    'photo': TAG_PHOTO,
    'hotel': TAG_HOTEL,
    'region': TAG_REGION,
}


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def _version_key(tag):
    return f"tag_version:{tag}"


def get_tag_versions(tags):
    """Current version token of each tag, creating missing ones"""
    keys = [_version_key(tag) for tag in tags]
    versions = cache.get_many(keys)
    for key in keys:
        if key not in versions:
            cache.add(key, uuid.uuid4().hex, None)
            versions[key] = cache.get(key)
    return [versions[key] for key in keys]


def build_tagged_key(prefix, tags, *args, **kwargs):
    versions = get_tag_versions(sorted(tags))
    return make_cache_key(prefix, *args, tag_versions=tuple(versions), **kwargs)


def build_request_cache_key(prefix, request, tags):
    """Key for a GET request: path + sorted query string + tag versions"""
    query = sorted((key, tuple(request.query_params.getlist(key))) for key in request.query_params.keys())
    return build_tagged_key(prefix, tags, request.path, tuple(query))


def invalidate_tags(*tags, notify=True):
    """Bump the version of every tag and tell the frontend"""
    tags = [tag for tag in dict.fromkeys(tags) if tag]
    if not tags:
        return []
    try:
        cache.set_many({_version_key(tag): uuid.uuid4().hex for tag in tags}, None)
        logger.info(f"Invalidated cache tags: {tags}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache tags {tags}: {str(e)}")
    if notify:
        notify_frontend(tags)
    return tags


def cached_public_response(prefix, tags, ttl=PUBLIC_LIST_CACHE_TTL):
    """
    Cache successful GET responses for anonymous visitors.

    Must sit below @api_view so that `request` is a DRF request. Signed-in
    dashboard users always get live data. Responses carry X-Cache: HIT|MISS.

    Usage:
        @api_view(['GET'])
        @permission_classes([AllowAny])
        @cached_public_response('regions_list', [TAG_REGION])
        def region_list(request):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(request, *args, **kwargs):
            if request.method != 'GET' or request.user.is_authenticated:
                return func(request, *args, **kwargs)

            try:
                cache_key = build_request_cache_key(prefix, request, tags)
                cached_data = cache.get(cache_key)
            except Exception as e:
                logger.warning(f"Cache lookup failed for {prefix}: {str(e)}")
                return func(request, *args, **kwargs)

            if cached_data is not None:
                logger.debug(f"Cache HIT for {prefix}: {cache_key}")
                response = Response(cached_data)
                response['X-Cache'] = 'HIT'
                return response

            logger.debug(f"Cache MISS for {prefix}: {cache_key}")
            response = func(request, *args, **kwargs)
            if response.status_code == 200:
                try:
                    cache.set(cache_key, response.data, ttl)
                except Exception as e:
                    logger.warning(f"Could not cache {prefix}: {str(e)}")
                response['X-Cache'] = 'MISS'
            return response
        return wrapper
    return decorator
