"""
Cache invalidation signals
Automatically invalidate cache tags when data changes
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import (
    invalidate_tags,
    TAG_POST, TAG_REGION, TAG_HOTEL, TAG_VIDEO, TAG_PHOTO, TAG_HERO_SLIDE,
    TAG_TAG, TAG_COMMENT, TAG_CONTENT_LINK, TAG_NOTIFICATION,
    TAG_DASHBOARD_STATS, TAG_SEARCH, TAG_LIKE_STATUS, TAG_VIEW_STATS, TAG_USER, TAG_MEDIA,
)

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()

# Model class name -> tags to invalidate when a row is saved or deleted.
# Content tables also feed links, hero slides and search results.
MODEL_TAGS = {
    'Post': [TAG_POST, TAG_SEARCH, TAG_DASHBOARD_STATS, TAG_HERO_SLIDE, TAG_CONTENT_LINK, TAG_REGION],
    'Video': [TAG_VIDEO, TAG_SEARCH, TAG_DASHBOARD_STATS, TAG_HERO_SLIDE, TAG_CONTENT_LINK],
    'PhotoFeature': [TAG_PHOTO, TAG_SEARCH, TAG_DASHBOARD_STATS, TAG_HERO_SLIDE, TAG_CONTENT_LINK],
    'PhotoImage': [TAG_PHOTO, TAG_HERO_SLIDE, TAG_CONTENT_LINK],
    'Region': [TAG_REGION, TAG_SEARCH, TAG_DASHBOARD_STATS, TAG_CONTENT_LINK],
    'Hotel': [TAG_HOTEL, TAG_SEARCH, TAG_DASHBOARD_STATS],
    'HotelBranch': [TAG_HOTEL],
    'HeroSlide': [TAG_HERO_SLIDE, TAG_DASHBOARD_STATS],
    'ContentLink': [TAG_CONTENT_LINK],
    'Tag': [TAG_TAG],
    'ContentTag': [TAG_TAG],
    'Comment': [TAG_COMMENT, TAG_DASHBOARD_STATS],
    'ContentLike': [TAG_LIKE_STATUS],
    'ContentView': [TAG_VIEW_STATS],
    'Notification': [TAG_NOTIFICATION],
    'User': [TAG_USER],
    'MediaFile': [TAG_MEDIA],
}


@contextmanager
def suspend_cache_signals():
    """
    Context manager to temporarily suspend cache invalidation signals.
    Useful for bulk operations to prevent excessive cache invalidation.
    Remember to manually invalidate cache after the block!
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


# --- Manual Invalidation Helpers ---

def invalidate_model_cache_manual(model_name):
    """Manually invalidate every tag a model feeds (used after bulk updates)"""
    tags = MODEL_TAGS.get(model_name, [])
    try:
        invalidate_tags(*tags)
    except Exception as e:
        logger.warning(f"Error invalidating cache for {model_name}: {e}")
    return tags


def invalidate_on_commit(*tags):
    """Invalidate tags once the current transaction commits"""
    transaction.on_commit(lambda: invalidate_tags(*tags))


# --- Signal Handlers ---

@receiver([post_save, post_delete])
def invalidate_model_tags(sender, instance, **kwargs):
    """Invalidate the tags of any tracked model after the DB commit"""
    if is_suspended():
        return

    model_name = sender.__name__
    if model_name not in MODEL_TAGS:
        return

    try:
        # Use transaction.on_commit to ensure cache is invalidated AFTER DB commit
        transaction.on_commit(lambda: invalidate_model_cache_manual(model_name))
    except Exception as e:
        logger.warning(f"Error in invalidate_model_tags signal for {model_name}: {e}")
