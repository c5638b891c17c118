"""Helpers other apps call to emit notifications"""
import logging

from django.contrib.auth import get_user_model
from django.db.models import Q

from tourism.core.cache_signals import invalidate_on_commit
from tourism.core.cache_utils import TAG_NOTIFICATION
from tourism.core.permissions import is_admin
from tourism.core.targets import public_url

from .models import Notification

logger = logging.getLogger(__name__)

User = get_user_model()


def admin_recipients(exclude=None):
    queryset = User.objects.filter(Q(role=User.ROLE_ADMIN) | Q(is_superuser=True), is_active=True)
    if exclude is not None and exclude.pk:
        queryset = queryset.exclude(pk=exclude.pk)
    return queryset


def notify_user(recipient, type, title, message='', actor=None, target_type='', target_id=None, action_url=''):
    return Notification.objects.create(
        recipient=recipient,
        actor=actor if actor is not None and actor.is_authenticated else None,
        type=type,
        title=title,
        message=message,
        target_type=target_type,
        target_id=target_id,
        action_url=action_url,
    )


def notify_admins(type, title, message='', actor=None, target_type='', target_id=None, action_url=''):
    """Create one notification per active admin (the actor is skipped). Returns the count."""
    actor = actor if actor is not None and actor.is_authenticated else None
    notifications = [
        Notification(
            recipient=admin,
            actor=actor,
            type=type,
            title=title,
            message=message,
            target_type=target_type,
            target_id=target_id,
            action_url=action_url,
        )
        for admin in admin_recipients(exclude=actor)
    ]
    # bulk_create sends no post_save
    Notification.objects.bulk_create(notifications)
    if notifications:
        invalidate_on_commit(TAG_NOTIFICATION)
    logger.info(f"Sent '{type}' notification to {len(notifications)} admin(s): {title}")
    return len(notifications)


def notify_content_created(request, instance, target_type, label):
    """Tell admins when a non-admin editor creates content"""
    if is_admin(request.user):
        return 0
    return notify_admins(
        'content',
        f"New {label}: {instance.display_name}",
        message=f"{request.user.username} created a {label.lower()}.",
        actor=request.user,
        target_type=target_type,
        target_id=instance.pk,
        action_url=public_url(target_type, instance),
    )


VIEW_MILESTONES = (100, 500, 1000, 5000, 10000, 50000, 100000)


def notify_view_milestone(target_type, target, view_count):
    """Tell the author when an item's view count lands exactly on a milestone"""
    if view_count not in VIEW_MILESTONES:
        return None
    author = getattr(target, 'author', None)
    if author is None or not author.is_active:
        return None
    notification = notify_user(
        author,
        'milestone',
        f"{target.display_name} reached {view_count:,} views",
        target_type=target_type,
        target_id=target.pk,
        action_url=public_url(target_type, target),
    )
    logger.info(f"Milestone {view_count} reached by {target_type} {target.pk}")
    return notification
