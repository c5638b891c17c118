import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import transaction

from tourism.core.cache_signals import invalidate_model_cache_manual
from tourism.core.pagination import paginate_queryset
from .models import Notification
from .serializers import NotificationSerializer

logger = logging.getLogger('tourism.notifications')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_list(request):
    """The current user's notifications, newest first (`?unread=true` for unread only)"""
    queryset = Notification.objects.filter(recipient=request.user).select_related('actor')
    if request.query_params.get('unread', '').lower() in ('true', '1', 'yes'):
        queryset = queryset.filter(is_read=False)
    return Response(paginate_queryset(request, queryset.order_by('-created_at'), NotificationSerializer, default_limit=20))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_unread_count(request):
    return Response({'count': Notification.objects.filter(recipient=request.user, is_read=False).count()})


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, pk):
    notification = get_object_or_404(Notification, pk=pk, recipient=request.user)
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])
    return Response(NotificationSerializer(notification).data)


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def notification_mark_all_read(request):
    with transaction.atomic():
        updated = Notification.objects.filter(recipient=request.user, is_read=False).update(is_read=True)
        # .update() sends no post_save
        transaction.on_commit(lambda: invalidate_model_cache_manual('Notification'))
    logger.info(f"{updated} notification(s) marked read by {request.user.username}")
    return Response({'updated': updated})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def notification_delete(request, pk):
    notification = get_object_or_404(Notification, pk=pk, recipient=request.user)
    notification.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)
