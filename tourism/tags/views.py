import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import transaction
from django.db.models import Count, Q

from tourism.core import lifecycle
from tourism.core.cache_signals import invalidate_model_cache_manual, suspend_cache_signals
from tourism.core.cache_utils import cached_public_response, TAG_TAG
from tourism.core.pagination import build_page, paginate_queryset
from tourism.core.permissions import IsActiveEditor, IsActiveEditorOrReadOnly, can_modify, is_active_editor
from tourism.core.targets import describe_target, get_target
from tourism.core.utils import create_audit_log
from .models import Tag, ContentTag, TAG_TARGET_CHOICES
from .serializers import TagSerializer, TagSummarySerializer, TagIdsSerializer, TagNamesSerializer

logger = logging.getLogger('tourism.tags')

TAG_TARGETS = dict(TAG_TARGET_CHOICES)
SEARCH_LIMIT = 20


def _tag_queryset():
    return Tag.objects.annotate(usage_count=Count('assignments'))


def _item_tags(target_type, target_id):
    tags = Tag.objects.filter(assignments__target_type=target_type, assignments__target_id=target_id).order_by('name')
    return TagSummarySerializer(tags, many=True).data


def _resolve_item(request, target_type, target_id):
    """The tagged item as the caller may see it, or an error response"""
    if target_type not in TAG_TARGETS:
        return None, Response(
            {'error': f"Invalid target type. Must be one of: {', '.join(TAG_TARGETS)}"},
            status=status.HTTP_400_BAD_REQUEST
        )
    item = get_target(target_type, target_id, published_only=not is_active_editor(request.user))
    if item is None:
        return None, Response({'error': 'Content not found'}, status=status.HTTP_404_NOT_FOUND)
    return item, None


def _replace_item_tags(request, target_type, target_id, tags):
    """Make `tags` the complete tag set of one item"""
    tag_ids = {tag.pk for tag in tags}
    with transaction.atomic(), suspend_cache_signals():
        ContentTag.objects.filter(target_type=target_type, target_id=target_id).exclude(tag_id__in=tag_ids).delete()
        existing = set(
            ContentTag.objects.filter(target_type=target_type, target_id=target_id).values_list('tag_id', flat=True)
        )
        ContentTag.objects.bulk_create([
            ContentTag(tag_id=tag_id, target_type=target_type, target_id=target_id)
            for tag_id in tag_ids - existing
        ])
    invalidate_model_cache_manual('ContentTag')
    create_audit_log(
        request, 'update', 'ContentTag', target_id,
        changes={'target_type': target_type, 'tags': sorted(tag.name for tag in tags)},
    )
    return Response({'target_type': target_type, 'target_id': str(target_id), 'tags': _item_tags(target_type, target_id)})


@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('tags_list', [TAG_TAG])
def tag_list_create(request):
    """List tags (filters: tag_type, search) or create one"""
    if request.method == 'POST':
        serializer = TagSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        tag = serializer.save()
        create_audit_log(request, 'create', 'Tag', tag.pk, object_name=tag.name)
        return Response(TagSerializer(tag).data, status=status.HTTP_201_CREATED)

    queryset = _tag_queryset()
    tag_type = request.query_params.get('tag_type')
    if tag_type:
        queryset = queryset.filter(tag_type=tag_type)
    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(Q(name__icontains=search) | Q(slug__icontains=search))
    return Response(paginate_queryset(request, queryset.order_by('name'), TagSerializer, default_limit=50))


@api_view(['GET'])
@permission_classes([AllowAny])
def tag_search(request):
    """Autocomplete: names starting with `q` first, then names containing it"""
    query = request.query_params.get('q', '').strip()
    if not query:
        return Response({'results': []})
    prefix = list(Tag.objects.filter(name__istartswith=query).order_by('name')[:SEARCH_LIMIT])
    contains = []
    if len(prefix) < SEARCH_LIMIT:
        contains = list(
            Tag.objects.filter(name__icontains=query)
            .exclude(pk__in=[tag.pk for tag in prefix])
            .order_by('name')[:SEARCH_LIMIT - len(prefix)]
        )
    return Response({'results': TagSummarySerializer(prefix + contains, many=True).data})


@api_view(['GET'])
@permission_classes([AllowAny])
def tag_count(request):
    counts = {tag_type: 0 for tag_type, _ in Tag.TAG_TYPE_CHOICES}
    for row in Tag.objects.values('tag_type').annotate(count=Count('id')).order_by():
        counts[row['tag_type']] = row['count']
    return Response({'total': sum(counts.values()), 'by_type': counts})


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('tag_by_slug', [TAG_TAG])
def tag_by_slug(request, slug):
    tag = get_object_or_404(_tag_queryset(), slug=slug)
    return Response(TagSerializer(tag).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
def tag_detail(request, pk):
    tag = get_object_or_404(_tag_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(TagSerializer(tag).data)

    if request.method == 'DELETE':
        name = tag.name
        tag.delete()
        create_audit_log(request, 'delete', 'Tag', pk, object_name=name)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = TagSerializer(tag, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    tag = serializer.save()
    create_audit_log(
        request, 'update', 'Tag', tag.pk, object_name=tag.name,
        changes={key: str(value) for key, value in serializer.validated_data.items()},
    )
    return Response(TagSerializer(tag).data)


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('tag_content', [TAG_TAG])
def tag_content(request, pk):
    """Published items carrying this tag (filter: target_type), resolved to summaries"""
    tag = get_object_or_404(Tag, pk=pk)
    assignments = tag.assignments.order_by('-created_at')
    target_type = request.query_params.get('target_type')
    if target_type:
        assignments = assignments.filter(target_type=target_type)

    items = []
    for assignment in assignments:
        target = get_target(assignment.target_type, assignment.target_id)
        if target is not None:
            items.append(describe_target(assignment.target_type, target))
    page_obj, meta = build_page(request, items)
    return Response({'tag': TagSummarySerializer(tag).data, 'results': list(page_obj.object_list), **meta})


@api_view(['GET', 'PUT'])
@permission_classes([IsActiveEditorOrReadOnly])
def content_tags(request, target_type, target_id):
    """GET an item's tags or PUT {"tag_ids": [...]} to replace them"""
    item, error = _resolve_item(request, target_type, target_id)
    if error is not None:
        return error
    if request.method == 'GET':
        return Response({'target_type': target_type, 'target_id': str(target_id), 'tags': _item_tags(target_type, target_id)})

    if not can_modify(request.user, item):
        return lifecycle.forbidden(request, item, TAG_TARGETS[target_type])
    serializer = TagIdsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    wanted = set(serializer.validated_data['tag_ids'])
    tags = list(Tag.objects.filter(pk__in=wanted))
    unknown = sorted(str(tag_id) for tag_id in wanted - {tag.pk for tag in tags})
    if unknown:
        return Response({'error': 'Unknown tag ids', 'ids': unknown}, status=status.HTTP_400_BAD_REQUEST)
    return _replace_item_tags(request, target_type, target_id, tags)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def content_tags_by_name(request, target_type, target_id):
    """Replace an item's tags by name; unknown names become new general tags"""
    item, error = _resolve_item(request, target_type, target_id)
    if error is not None:
        return error
    if not can_modify(request.user, item):
        return lifecycle.forbidden(request, item, TAG_TARGETS[target_type])
    serializer = TagNamesSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    tags = []
    with transaction.atomic():
        for name in serializer.validated_data['names']:
            tag = Tag.objects.filter(name__iexact=name).first()
            if tag is None:
                tag = Tag.objects.create(name=name, tag_type='general')
                logger.info(f"Tag '{name}' created by {request.user.username}")
            tags.append(tag)
    return _replace_item_tags(request, target_type, target_id, tags)
