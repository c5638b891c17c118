import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle
from django.shortcuts import get_object_or_404

from tourism.core import lifecycle
from tourism.core.cache_utils import cached_public_response, TAG_MEDIA
from tourism.core.pagination import paginate_queryset
from tourism.core.permissions import IsActiveEditorOrReadOnly, is_active_editor, is_admin
from tourism.core.throttling import UploadRateThrottle
from tourism.core.utils import create_audit_log
from tourism.notifications.services import notify_admins
from .models import MediaFile
from .serializers import MediaFileSerializer, MediaUploadSerializer

logger = logging.getLogger('tourism.media')

MEDIA_DEFAULT_LIMIT = 20


def can_manage_media(user, media):
    """Admins manage every file, active editors only their own uploads"""
    if is_admin(user):
        return True
    return is_active_editor(user) and media.uploaded_by_id == user.pk


def delete_stored_file(media):
    """Remove the file from storage. A failure is logged and the row is still deleted."""
    if not media.file:
        return
    try:
        media.file.delete(save=False)
    except OSError as e:
        logger.warning(f"Could not delete stored file {media.file.name} for media {media.pk}: {e}")


@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
@throttle_classes([AnonRateThrottle, UserRateThrottle, UploadRateThrottle])
def media_list_upload(request):
    """
    GET: media library, newest first (page, limit, media_type).
    POST: multipart upload of one image (jpeg, png, webp, gif or avif, at most 10MB).
    """
    if request.method == 'GET':
        queryset = MediaFile.objects.select_related('uploaded_by').order_by('-created_at')
        media_type = request.query_params.get('media_type')
        if media_type:
            queryset = queryset.filter(media_type=media_type)
        return Response(paginate_queryset(request, queryset, MediaFileSerializer, default_limit=MEDIA_DEFAULT_LIMIT))

    serializer = MediaUploadSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Media upload rejected for {request.user.username}: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    media = serializer.save(uploaded_by=request.user)
    logger.info(f"Media {media.pk} uploaded by {request.user.username} ({media.size} bytes)")
    create_audit_log(request, 'create', 'MediaFile', media.pk, object_name=media.original_name)
    if not is_admin(request.user):
        notify_admins(
            'content',
            'New Media Uploaded',
            message=f"{request.user.username} uploaded a new file: {media.original_name}",
            actor=request.user,
            target_type='media',
            target_id=media.pk,
            action_url='/dashboard/media',
        )
    return Response(MediaFileSerializer(media, context={'request': request}).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('media_gallery', [TAG_MEDIA])
def media_gallery(request):
    """Public image gallery; `featured=true|false` narrows it"""
    queryset = MediaFile.objects.filter(media_type='image').select_related('uploaded_by').order_by('-created_at')
    featured = request.query_params.get('featured')
    if featured is not None:
        queryset = queryset.filter(is_featured=featured.lower() in ('1', 'true', 'yes'))
    return Response(paginate_queryset(request, queryset, MediaFileSerializer, default_limit=MEDIA_DEFAULT_LIMIT))


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
def media_detail(request, pk):
    media = get_object_or_404(MediaFile.objects.select_related('uploaded_by'), pk=pk)

    if request.method == 'GET':
        return Response(MediaFileSerializer(media, context={'request': request}).data)

    if not can_manage_media(request.user, media):
        return lifecycle.forbidden(request, media, 'MediaFile')

    if request.method == 'DELETE':
        object_name = media.original_name
        delete_stored_file(media)
        media.delete()
        create_audit_log(request, 'delete', 'MediaFile', pk, object_name=object_name)
        logger.info(f"Media {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = MediaFileSerializer(media, data=request.data, partial=True, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    media = serializer.save()
    create_audit_log(
        request, 'update', 'MediaFile', media.pk, object_name=media.original_name,
        changes={key: str(value) for key, value in serializer.validated_data.items()},
    )
    return Response(MediaFileSerializer(media, context={'request': request}).data)
