"""Utility functions for audit logging, slugs and anonymous viewer identity"""
import hashlib
import logging

from django.conf import settings
from django.utils.text import slugify

from .models import AuditLog

logger = logging.getLogger(__name__)

# Path segments that sit next to slug routes (posts/trash/, regions/trash/)
RESERVED_SLUGS = {'trash'}


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def generate_viewer_hash(request, context):
    """
    Stable anonymous identity for likes, views and comments.

    sha256("<context>:<ip>:<user-agent>:<salt>") truncated to 32 hex chars, so
    the same browser gets a different hash per context.
    """
    ip = get_client_ip(request) or 'unknown'
    user_agent = request.META.get('HTTP_USER_AGENT', 'unknown') if request else 'unknown'
    raw = f"{context}:{ip}:{user_agent}:{settings.VIEWER_HASH_SALT}"
    return hashlib.sha256(raw.encode()).hexdigest()[:32]


def unique_slug(model, value, instance=None, max_length=200):
    """
    Slugify `value` and make it unique among the model's rows (non-deleted rows
    only, for soft-deletable models).

    Collisions get a numeric suffix: "lakeside", "lakeside-2", "lakeside-3", ...
    """
    base = slugify(value or '')[:max_length].strip('-') or 'item'
    queryset = model._default_manager.all()
    if any(field.name == 'deleted_at' for field in model._meta.concrete_fields):
        queryset = queryset.filter(deleted_at__isnull=True)
    if instance is not None and instance.pk:
        queryset = queryset.exclude(pk=instance.pk)

    slug = base
    counter = 2
    while slug in RESERVED_SLUGS or queryset.filter(slug=slug).exists():
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, restore, status_change, ...)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., post title, hotel name)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=(object_name or '')[:255] or None,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None
