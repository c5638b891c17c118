import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import transaction

from tourism.core import lifecycle
from tourism.core.cache_signals import invalidate_model_cache_manual, suspend_cache_signals
from tourism.core.cache_utils import (
    cached_public_response, TAG_CONTENT_LINK, TAG_PHOTO, TAG_POST, TAG_REGION, TAG_VIDEO
)
from tourism.core.permissions import IsActiveEditor, IsActiveEditorOrReadOnly, can_modify, is_active_editor
from tourism.core.targets import get_target
from tourism.core.utils import create_audit_log
from .models import ContentLink, SOURCE_TYPE_CHOICES
from .serializers import ContentLinkSerializer, LinkOrderSerializer, LinkSetSerializer

logger = logging.getLogger('tourism.links')

SOURCE_TYPES = dict(SOURCE_TYPE_CHOICES)


def _unknown_source(source_type):
    return Response(
        {'error': f"Invalid source type. Must be one of: {', '.join(SOURCE_TYPES)}"},
        status=status.HTTP_400_BAD_REQUEST
    )


def _visible_source(request, source_type, source_id):
    """Editors see every live source, visitors only published ones"""
    return get_target(source_type, source_id, published_only=not is_active_editor(request.user))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def content_link_create(request):
    serializer = ContentLinkSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    source = get_target(data['source_type'], data['source_id'], published_only=False)
    if not can_modify(request.user, source):
        return lifecycle.forbidden(request, source, SOURCE_TYPES[data['source_type']])

    if ContentLink.objects.filter(
        source_type=data['source_type'], source_id=data['source_id'],
        target_type=data['target_type'], target_id=data['target_id'],
    ).exists():
        return Response({'error': 'These items are already linked'}, status=status.HTTP_400_BAD_REQUEST)

    extra = {}
    if data.get('display_order') is None:
        extra['display_order'] = ContentLink.objects.filter(
            source_type=data['source_type'], source_id=data['source_id']
        ).count()
    link = serializer.save(**extra)
    create_audit_log(request, 'create', 'ContentLink', link.pk, object_name=str(link))
    return Response(ContentLinkSerializer(link).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
def content_link_by_id(request, pk):
    link = get_object_or_404(ContentLink, pk=pk)

    if request.method == 'GET':
        if _visible_source(request, link.source_type, link.source_id) is None:
            return Response({'error': 'Link not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(ContentLinkSerializer(link).data)

    # A link whose source is gone can only be cleaned up by an admin
    source = get_target(link.source_type, link.source_id, published_only=False)
    if not can_modify(request.user, source):
        return lifecycle.forbidden(request, link, 'ContentLink')

    if request.method == 'DELETE':
        object_name = str(link)
        link.delete()
        create_audit_log(request, 'delete', 'ContentLink', pk, object_name=object_name)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # Only the position of an existing link can change
    serializer = LinkOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    link.display_order = serializer.validated_data['display_order']
    link.save(update_fields=['display_order'])
    create_audit_log(request, 'update', 'ContentLink', link.pk, object_name=str(link), changes={'display_order': link.display_order})
    return Response(ContentLinkSerializer(link).data)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('content_links', [TAG_CONTENT_LINK, TAG_POST, TAG_REGION, TAG_VIDEO, TAG_PHOTO])
def content_links_for_source(request, source_type, source_id):
    """
    GET: links of one post or region, in display order, with resolved targets.
    PUT: replace the whole set with {"links": [...]}.
    DELETE: remove every link of the source.
    """
    if source_type not in SOURCE_TYPES:
        return _unknown_source(source_type)
    source = _visible_source(request, source_type, source_id)
    if source is None:
        return Response({'error': f'{SOURCE_TYPES[source_type]} not found'}, status=status.HTTP_404_NOT_FOUND)
    links = ContentLink.objects.filter(source_type=source_type, source_id=source_id)

    if request.method == 'GET':
        return Response({'results': ContentLinkSerializer(links.order_by('display_order', 'created_at'), many=True).data})

    if not can_modify(request.user, source):
        return lifecycle.forbidden(request, source, SOURCE_TYPES[source_type])

    if request.method == 'DELETE':
        with transaction.atomic(), suspend_cache_signals():
            deleted, _ = links.delete()
        invalidate_model_cache_manual('ContentLink')
        create_audit_log(request, 'delete', 'ContentLink', source_id, changes={'source_type': source_type, 'deleted': deleted})
        return Response({'deleted': deleted})

    serializer = LinkSetSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    items = serializer.validated_data['links']
    for item in items:
        if item['target_type'] == source_type and item['target_id'] == source.pk:
            return Response({'links': ['An item cannot link to itself']}, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic(), suspend_cache_signals():
        links.delete()
        ContentLink.objects.bulk_create([
            ContentLink(
                source_type=source_type,
                source_id=source.pk,
                target_type=item['target_type'],
                target_id=item['target_id'],
                display_order=index if item.get('display_order') is None else item['display_order'],
            )
            for index, item in enumerate(items)
        ])
    # Signals were suspended for the bulk write
    invalidate_model_cache_manual('ContentLink')

    create_audit_log(request, 'update', 'ContentLink', source_id, changes={'source_type': source_type, 'links': len(items)})
    logger.info(f"Links of {source_type} {source_id} replaced ({len(items)}) by {request.user.username}")
    links = ContentLink.objects.filter(source_type=source_type, source_id=source.pk).order_by('display_order', 'created_at')
    return Response({'results': ContentLinkSerializer(links, many=True).data})


@api_view(['GET'])
@permission_classes([IsActiveEditorOrReadOnly])
def content_links_count(request, source_type, source_id):
    if source_type not in SOURCE_TYPES:
        return _unknown_source(source_type)
    if _visible_source(request, source_type, source_id) is None:
        return Response({'error': f'{SOURCE_TYPES[source_type]} not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'count': ContentLink.objects.filter(source_type=source_type, source_id=source_id).count()})


@api_view(['GET'])
@permission_classes([IsActiveEditorOrReadOnly])
def content_links_to_target(request, target_type, target_id):
    """Reverse lookup: which posts and regions link to this item; visitors only see published sources"""
    editor = is_active_editor(request.user)
    links = ContentLink.objects.filter(target_type=target_type, target_id=target_id).order_by('source_type', 'created_at')
    results = []
    for link in links:
        source = get_target(link.source_type, link.source_id, published_only=not editor)
        if source is None and not editor:
            continue
        results.append({
            'id': link.pk,
            'source_type': link.source_type,
            'source_id': str(link.source_id),
            'source_title': source.display_name if source is not None else None,
            'display_order': link.display_order,
        })
    return Response({'results': results})
