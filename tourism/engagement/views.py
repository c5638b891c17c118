import logging
from datetime import date

from django.db import transaction
from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle, UserRateThrottle

from tourism.core.cache_signals import invalidate_model_cache_manual
from tourism.core.cache_utils import (
    cached_public_response, TAG_COMMENT, TAG_LIKE_STATUS, TAG_PHOTO, TAG_POST, TAG_VIDEO, TAG_VIEW_STATS,
)
from tourism.core.pagination import paginate_queryset
from tourism.core.permissions import IsActiveEditor, IsAdminRole
from tourism.core.targets import describe_target, get_target, parse_uuid
from tourism.core.throttling import EngagementRateThrottle
from tourism.core.utils import create_audit_log, generate_viewer_hash, get_client_ip
from tourism.notifications.services import notify_admins

from . import services
from .models import Comment
from .serializers import (
    CommentCreateSerializer, CommentIdsSerializer, ModerationCommentSerializer,
    PublicCommentSerializer, ViewCreateSerializer,
)

logger = logging.getLogger('tourism.engagement')

# Public writes use the engagement bucket instead of the dashboard write bucket
ENGAGEMENT_THROTTLES = [AnonRateThrottle, UserRateThrottle, EngagementRateThrottle]

MODERATION_ACTIONS = {
    'approve': 'approved',
    'reject': 'rejected',
    'spam': 'spam',
}


def _limit_param(request, default=10, maximum=50):
    try:
        limit = int(request.query_params.get('limit', default))
    except (TypeError, ValueError):
        limit = default
    return min(max(limit, 1), maximum)


def _approved_thread(target_type, target_id):
    approved_replies = Prefetch(
        'replies',
        queryset=Comment.objects.filter(status='approved').order_by('created_at'),
        to_attr='approved_replies',
    )
    return (
        Comment.objects.filter(target_type=target_type, target_id=target_id, parent__isnull=True, status='approved')
        .prefetch_related(approved_replies)
        .order_by('-created_at')
    )


# Comment views
@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
@throttle_classes(ENGAGEMENT_THROTTLES)
@cached_public_response('comments_list', [TAG_COMMENT])
def comment_list_create(request):
    """
    GET: approved comments of one item (`target_type` and `target_id` required).
    POST: submit a guest comment; it stays hidden until a moderator approves it.
    """
    if request.method == 'GET':
        target_type = request.query_params.get('target_type')
        target_id = parse_uuid(request.query_params.get('target_id'))
        if not target_type or target_id is None:
            return Response(
                {'error': 'target_type and a valid target_id are required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(paginate_queryset(request, _approved_thread(target_type, target_id), PublicCommentSerializer))

    serializer = CommentCreateSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Comment validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    target = get_target(data['target_type'], data['target_id'])
    if target is None:
        return Response({'error': 'Content not found'}, status=status.HTTP_404_NOT_FOUND)

    parent = None
    if data.get('parent_id'):
        parent = Comment.objects.filter(pk=data['parent_id']).first()
        if parent is None or parent.target_type != data['target_type'] or parent.target_id != target.pk:
            return Response(
                {'parent_id': ['Parent comment not found for this content']},
                status=status.HTTP_400_BAD_REQUEST
            )
        # Only one level of nesting: replies to replies join the thread root
        if parent.parent_id is not None:
            parent = parent.parent

    comment = Comment.objects.create(
        parent=parent,
        target_type=data['target_type'],
        target_id=target.pk,
        guest_name=data['guest_name'],
        guest_email=data.get('guest_email', ''),
        content=data['content'],
        status='pending',
        ip_address=get_client_ip(request),
        viewer_hash=generate_viewer_hash(request, 'comment'),
    )
    notify_admins(
        'comment',
        f"New comment on {target.display_name}",
        message=comment.content[:200],
        target_type=data['target_type'],
        target_id=target.pk,
        action_url=describe_target(data['target_type'], target)['url'],
    )
    logger.info(f"Comment {comment.pk} submitted on {comment.target_type} {comment.target_id}")
    return Response(
        {'id': str(comment.pk), 'status': comment.status, 'message': 'Your comment is awaiting moderation'},
        status=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('post_comments', [TAG_COMMENT])
def post_comments(request, post_id):
    return Response(paginate_queryset(request, _approved_thread('post', post_id), PublicCommentSerializer))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def comment_moderation_list(request):
    """All comments for moderators (filters: status, target_type, target_id)"""
    queryset = Comment.objects.all().order_by('-created_at')
    comment_status = request.query_params.get('status')
    if comment_status in dict(Comment.STATUS_CHOICES):
        queryset = queryset.filter(status=comment_status)
    target_type = request.query_params.get('target_type')
    if target_type:
        queryset = queryset.filter(target_type=target_type)
    target_id = parse_uuid(request.query_params.get('target_id'))
    if target_id is not None:
        queryset = queryset.filter(target_id=target_id)
    return Response(paginate_queryset(request, queryset, ModerationCommentSerializer, default_limit=20))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def comment_pending_count(request):
    return Response({'count': Comment.objects.filter(status='pending').count()})


@api_view(['POST', 'PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def comment_moderate(request, pk, action):
    comment = get_object_or_404(Comment, pk=pk)
    new_status = MODERATION_ACTIONS[action]
    old_status = comment.status
    comment.status = new_status
    comment.save(update_fields=['status', 'updated_at'])
    create_audit_log(
        request, 'moderate', 'Comment', comment.pk, object_name=str(comment),
        changes={'status': {'old': old_status, 'new': new_status}},
    )
    logger.info(f"Comment {comment.pk} {old_status} -> {new_status} by {request.user.username}")
    return Response(ModerationCommentSerializer(comment).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def comment_detail(request, pk):
    comment = get_object_or_404(Comment, pk=pk)

    if request.method == 'GET':
        return Response(ModerationCommentSerializer(comment).data)

    if request.method == 'DELETE':
        object_name = str(comment)
        reply_count = comment.replies.count()
        # Replies cascade with their parent
        comment.delete()
        create_audit_log(request, 'delete', 'Comment', pk, object_name=object_name, changes={'replies_removed': reply_count})
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = ModerationCommentSerializer(comment, data=request.data, partial=True)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    comment = serializer.save()
    create_audit_log(request, 'update', 'Comment', comment.pk, object_name=str(comment), changes={'content': comment.content})
    return Response(ModerationCommentSerializer(comment).data)


def _comment_ids(request):
    serializer = CommentIdsSerializer(data=request.data)
    if not serializer.is_valid():
        return None, Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    return serializer.validated_data['ids'], None


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def comment_batch_approve(request):
    ids, error = _comment_ids(request)
    if error:
        return error
    with transaction.atomic():
        updated = Comment.objects.filter(pk__in=ids).exclude(status='approved').update(status='approved')
        # .update() sends no post_save
        transaction.on_commit(lambda: invalidate_model_cache_manual('Comment'))
    create_audit_log(request, 'moderate', 'Comment', 'batch', changes={'approved': updated, 'ids': [str(i) for i in ids]})
    logger.info(f"{updated} comment(s) approved in batch by {request.user.username}")
    return Response({'updated': updated})


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def comment_batch_delete(request):
    ids, error = _comment_ids(request)
    if error:
        return error
    queryset = Comment.objects.filter(pk__in=ids)
    deleted = queryset.count()
    queryset.delete()
    create_audit_log(request, 'delete', 'Comment', 'batch', changes={'deleted': deleted, 'ids': [str(i) for i in ids]})
    logger.info(f"{deleted} comment(s) deleted in batch by {request.user.username}")
    return Response({'deleted': deleted})


# Like views
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes(ENGAGEMENT_THROTTLES)
def like_toggle(request, target_type, target_id):
    viewer_hash = generate_viewer_hash(request, 'like')
    try:
        liked, like_count = services.toggle_like(target_type, target_id, viewer_hash, user=request.user)
    except services.TargetNotFound:
        return Response({'error': 'Content not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'liked': liked, 'like_count': like_count})


@api_view(['GET'])
@permission_classes([AllowAny])
def like_status(request, target_type, target_id):
    # Per-viewer answer, never served from the shared cache
    viewer_hash = generate_viewer_hash(request, 'like')
    try:
        liked, like_count = services.like_status(target_type, target_id, viewer_hash)
    except services.TargetNotFound:
        return Response({'error': 'Content not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'liked': liked, 'like_count': like_count})


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('top_liked', [TAG_LIKE_STATUS, TAG_POST, TAG_VIDEO, TAG_PHOTO])
def top_liked(request, target_type):
    if target_type not in services.LIKE_TARGETS:
        return Response({'error': f'{target_type} cannot be liked'}, status=status.HTTP_400_BAD_REQUEST)
    items = services.top_liked(target_type, _limit_param(request))
    return Response({
        'results': [
            {**describe_target(target_type, obj), 'like_count': obj.like_count}
            for obj in items
        ]
    })


# View tracking
@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes(ENGAGEMENT_THROTTLES)
def view_record(request):
    serializer = ViewCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    target_type = serializer.validated_data['target_type']
    target_id = serializer.validated_data['target_id']
    try:
        recorded = services.record_view(target_type, target_id, generate_viewer_hash(request, 'view'))
    except services.TargetNotFound:
        return Response({'error': 'Content not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response({'recorded': recorded})


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('view_stats', [TAG_VIEW_STATS])
def view_stats(request, target_type, target_id):
    if target_type not in services.VIEW_TARGETS:
        return Response({'error': f'{target_type} views are not tracked'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(services.view_stats(target_type, target_id))


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('trending', [TAG_VIEW_STATS])
def trending(request, target_type):
    if target_type not in services.VIEW_TARGETS:
        return Response({'error': f'{target_type} views are not tracked'}, status=status.HTTP_400_BAD_REQUEST)
    try:
        days = min(max(int(request.query_params.get('days', 7)), 1), 365)
    except (TypeError, ValueError):
        days = 7
    rows = services.trending(target_type, days=days, limit=_limit_param(request))
    return Response({
        'days': days,
        'results': [{**describe_target(target_type, obj), 'views': views} for obj, views in rows],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def view_admin_summary(request):
    return Response(services.summary())


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def view_admin_aggregate(request):
    """Roll raw views into daily aggregates; `date` (YYYY-MM-DD) defaults to yesterday"""
    day = request.data.get('date')
    if day:
        try:
            day = date.fromisoformat(str(day))
        except ValueError:
            return Response({'error': 'date must be YYYY-MM-DD'}, status=status.HTTP_400_BAD_REQUEST)
    try:
        written = services.aggregate_views(day or None)
    except ValueError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    logger.info(f"View aggregation triggered by {request.user.username}: {written} row(s)")
    return Response({'aggregated': written})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def view_admin_prune(request):
    deleted = services.prune_views()
    logger.info(f"View pruning triggered by {request.user.username}: {deleted} row(s)")
    return Response({'deleted': deleted})
