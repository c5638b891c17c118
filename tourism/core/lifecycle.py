"""
Shared bodies of the lifecycle endpoints every content table exposes:
create, update, status, featured, display order, soft delete, trash, restore
and hard delete.

The per-app views resolve the row and delegate here.
"""
import logging

from django.db import IntegrityError, transaction
from rest_framework import serializers, status
from rest_framework.response import Response

from tourism.notifications.services import notify_content_created

from .models import STATUS_CHOICES, STATUS_PUBLISHED
from .pagination import paginate_queryset
from .permissions import can_modify, is_active_editor, is_admin
from .targets import purge_target_references
from .utils import create_audit_log

logger = logging.getLogger(__name__)

VALID_STATUSES = dict(STATUS_CHOICES)


def visible_queryset(request, queryset):
    """Public visitors see published rows; active editors see every live row and may filter by status"""
    if is_active_editor(request.user):
        queryset = queryset.alive()
        status_filter = request.query_params.get('status')
        if status_filter in VALID_STATUSES:
            queryset = queryset.filter(status=status_filter)
        return queryset
    return queryset.published()


def forbidden(request, instance, model_name):
    logger.warning(f"User {request.user.username} attempted to modify {model_name} {instance.pk} without permission")
    return Response(
        {'error': f'You do not have permission to modify this {model_name.lower()}'},
        status=status.HTTP_403_FORBIDDEN
    )


def change_status(request, instance, serializer_class, model_name, new_status=None):
    if not can_modify(request.user, instance):
        return forbidden(request, instance, model_name)

    new_status = new_status or request.data.get('status')
    if new_status not in VALID_STATUSES:
        return Response(
            {'error': f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}"},
            status=status.HTTP_400_BAD_REQUEST
        )

    old_status = instance.status
    instance.set_status(new_status)
    create_audit_log(
        request=request,
        action='status_change',
        model_name=model_name,
        object_id=instance.pk,
        object_name=instance.display_name,
        changes={'status': {'old': old_status, 'new': new_status}},
    )
    logger.info(f"{model_name} {instance.pk} status changed {old_status} -> {new_status} by {request.user.username}")
    return Response(serializer_class(instance, context={'request': request}).data)


def publish(request, instance, serializer_class, model_name):
    return change_status(request, instance, serializer_class, model_name, new_status=STATUS_PUBLISHED)


def set_featured(request, instance, serializer_class, model_name):
    """Set `is_featured` from the body, or toggle it when the body omits it"""
    if not can_modify(request.user, instance):
        return forbidden(request, instance, model_name)

    value = request.data.get('is_featured')
    if value is None:
        is_featured = not instance.is_featured
    else:
        try:
            is_featured = serializers.BooleanField().to_internal_value(value)
        except serializers.ValidationError:
            return Response({'error': 'is_featured must be a boolean'}, status=status.HTTP_400_BAD_REQUEST)

    instance.is_featured = is_featured
    instance.save(update_fields=['is_featured', 'updated_at'])
    create_audit_log(
        request=request, action='update', model_name=model_name, object_id=instance.pk,
        object_name=instance.display_name, changes={'is_featured': is_featured},
    )
    return Response(serializer_class(instance, context={'request': request}).data)


def set_display_order(request, instance, serializer_class, model_name):
    if not can_modify(request.user, instance):
        return forbidden(request, instance, model_name)

    if 'display_order' not in request.data:
        return Response({'error': 'display_order is required'}, status=status.HTTP_400_BAD_REQUEST)

    value = request.data.get('display_order')
    if value is not None and value != '':
        try:
            value = int(value)
        except (TypeError, ValueError):
            return Response({'error': 'display_order must be an integer or null'}, status=status.HTTP_400_BAD_REQUEST)
    else:
        value = None

    instance.display_order = value
    instance.save(update_fields=['display_order', 'updated_at'])
    create_audit_log(
        request=request, action='update', model_name=model_name, object_id=instance.pk,
        object_name=instance.display_name, changes={'display_order': value},
    )
    return Response(serializer_class(instance, context={'request': request}).data)


def soft_delete(request, instance, model_name):
    if not can_modify(request.user, instance):
        return forbidden(request, instance, model_name)

    instance.soft_delete()
    create_audit_log(
        request=request, action='delete', model_name=model_name, object_id=instance.pk,
        object_name=instance.display_name,
    )
    logger.info(f"{model_name} {instance.pk} moved to trash by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


def restore(request, instance, serializer_class, model_name):
    if not can_modify(request.user, instance):
        return forbidden(request, instance, model_name)
    if not instance.is_deleted:
        return Response({'error': f'{model_name} is not in the trash'}, status=status.HTTP_400_BAD_REQUEST)

    old_slug = instance.slug
    instance.deleted_at = None
    # A full save re-checks the slug against live rows
    instance.save()
    changes = {'slug': {'old': old_slug, 'new': instance.slug}} if old_slug != instance.slug else {}
    create_audit_log(
        request=request, action='restore', model_name=model_name, object_id=instance.pk,
        object_name=instance.display_name, changes=changes,
    )
    logger.info(f"{model_name} {instance.pk} restored by {request.user.username}")
    return Response(serializer_class(instance, context={'request': request}).data)


def hard_delete(request, instance, target_type, model_name):
    """Permanently delete a trashed row together with everything that references it"""
    if not is_admin(request.user):
        return Response({'error': 'Only administrators can permanently delete content'}, status=status.HTTP_403_FORBIDDEN)
    if not instance.is_deleted:
        return Response(
            {'error': f'{model_name} must be moved to the trash before it can be permanently deleted'},
            status=status.HTTP_400_BAD_REQUEST
        )

    object_id = instance.pk
    object_name = instance.display_name
    with transaction.atomic():
        removed = purge_target_references(target_type, object_id)
        instance.delete()
    create_audit_log(
        request=request, action='hard_delete', model_name=model_name, object_id=object_id,
        object_name=object_name, changes={'removed_references': removed},
    )
    logger.info(f"{model_name} {object_id} permanently deleted by {request.user.username}")
    return Response(status=status.HTTP_204_NO_CONTENT)


def trash_list(request, queryset, serializer_class):
    """Trashed rows, newest deletion first; editors only see their own"""
    queryset = queryset.trashed()
    if not is_admin(request.user):
        queryset = queryset.filter(author=request.user)
    queryset = queryset.order_by('-deleted_at')
    return Response(paginate_queryset(request, queryset, serializer_class))


def create_content(request, serializer_class, model_name, target_type):
    """Validate and create a content row owned by the current user"""
    logger.info(f"User {request.user.username} creating {model_name} with data: {request.data}")
    serializer = serializer_class(data=request.data, context={'request': request})
    if not serializer.is_valid():
        logger.warning(f"{model_name} creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        instance = serializer.save(author=request.user)
    except IntegrityError as e:
        logger.error(f"IntegrityError creating {model_name}: {str(e)}", exc_info=True)
        return Response({'error': f'A {model_name.lower()} with this slug already exists'}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(request, 'create', model_name, instance.pk, object_name=instance.display_name)
    notify_content_created(request, instance, target_type, model_name)
    logger.info(f"{model_name} '{instance.display_name}' created successfully by {request.user.username}")
    return Response(serializer_class(instance, context={'request': request}).data, status=status.HTTP_201_CREATED)


def update_content(request, instance, serializer_class, model_name):
    if not can_modify(request.user, instance):
        return forbidden(request, instance, model_name)

    serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH', context={'request': request})
    if not serializer.is_valid():
        logger.warning(f"{model_name} update validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        instance = serializer.save()
    except IntegrityError as e:
        logger.error(f"IntegrityError updating {model_name} {instance.pk}: {str(e)}", exc_info=True)
        return Response({'error': f'A {model_name.lower()} with this slug already exists'}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request, 'update', model_name, instance.pk,
        changes={key: str(value) for key, value in serializer.validated_data.items()},
        object_name=instance.display_name,
    )
    logger.info(f"{model_name} '{instance.display_name}' updated by {request.user.username}")
    return Response(serializer_class(instance, context={'request': request}).data)


def detail_queryset(request, queryset):
    """GET sees what the audience may read; writes only touch live rows"""
    if request.method == 'GET':
        return visible_queryset(request, queryset)
    return queryset.alive()
