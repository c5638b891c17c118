import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import transaction
from django.db.models import Max, Prefetch, Q
from django.utils import timezone

from tourism.core import lifecycle
from tourism.core.cache_signals import invalidate_model_cache_manual
from tourism.core.cache_utils import (
    cached_public_response, PUBLIC_DETAIL_CACHE_TTL, TAG_POST, TAG_VIDEO, TAG_PHOTO,
)
from tourism.core.pagination import paginate_queryset
from tourism.core.permissions import IsActiveEditor, IsActiveEditorOrReadOnly, can_modify
from tourism.core.utils import create_audit_log
from .filters import PostFilter, VideoFilter, PhotoFeatureFilter, POST_ORDERINGS
from .models import Post, Video, PhotoFeature, PhotoImage
from .serializers import (
    PostSerializer, PostListSerializer, VideoSerializer,
    PhotoFeatureSerializer, PhotoFeatureListSerializer, PhotoImageSerializer,
    ImageReorderSerializer,
)

logger = logging.getLogger('tourism.content')

TOP_LIMIT_DEFAULT = 10
TOP_LIMIT_MAX = 50


def _limit_param(request, default=TOP_LIMIT_DEFAULT, maximum=TOP_LIMIT_MAX):
    try:
        limit = int(request.query_params.get('limit', default))
    except (TypeError, ValueError):
        limit = default
    return min(max(limit, 1), maximum)


# Post views
@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('posts_list', [TAG_POST])
def post_list_create(request):
    """List posts (filter by type, region, author, featured, search) or create one"""
    if request.method == 'POST':
        return lifecycle.create_content(request, PostSerializer, 'Post', 'post')

    queryset = lifecycle.visible_queryset(request, Post.objects.select_related('region', 'author'))
    queryset = queryset.order_by(*POST_ORDERINGS['latest'])
    queryset = PostFilter(request.query_params, queryset=queryset).qs
    return Response(paginate_queryset(request, queryset, PostListSerializer))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('post_detail', [TAG_POST], ttl=PUBLIC_DETAIL_CACHE_TTL)
def post_detail(request, slug):
    """Retrieve, update or soft-delete a post by slug"""
    post = get_object_or_404(lifecycle.detail_queryset(request, Post.objects.select_related('region', 'author')), slug=slug)

    if request.method == 'GET':
        return Response(PostSerializer(post).data)
    if request.method == 'DELETE':
        return lifecycle.soft_delete(request, post, 'Post')
    return lifecycle.update_content(request, post, PostSerializer, 'Post')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def post_trash(request):
    return lifecycle.trash_list(request, Post.objects.select_related('region', 'author'), PostListSerializer)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def post_publish(request, pk):
    post = get_object_or_404(Post.objects.alive(), pk=pk)
    return lifecycle.publish(request, post, PostSerializer, 'Post')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def post_status(request, pk):
    post = get_object_or_404(Post.objects.alive(), pk=pk)
    return lifecycle.change_status(request, post, PostSerializer, 'Post')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def post_featured(request, pk):
    post = get_object_or_404(Post.objects.alive(), pk=pk)
    return lifecycle.set_featured(request, post, PostSerializer, 'Post')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def post_display_order(request, pk):
    post = get_object_or_404(Post.objects.alive(), pk=pk)
    return lifecycle.set_display_order(request, post, PostSerializer, 'Post')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def post_restore(request, pk):
    post = get_object_or_404(Post, pk=pk)
    return lifecycle.restore(request, post, PostSerializer, 'Post')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def post_hard_delete(request, pk):
    post = get_object_or_404(Post, pk=pk)
    return lifecycle.hard_delete(request, post, 'post', 'Post')


@api_view(['GET'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('events_upcoming', [TAG_POST])
def upcoming_events(request):
    """Published events that have not finished yet, soonest first"""
    today = timezone.localdate()
    queryset = (
        Post.objects.published()
        .filter(type='event')
        .filter(Q(event_end_date__gte=today) | Q(event_end_date__isnull=True, event_date__gte=today))
        .select_related('region', 'author')
        .order_by('event_date', 'title')
    )
    return Response(paginate_queryset(request, queryset, PostListSerializer))


@api_view(['GET'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('attractions_top', [TAG_POST])
def top_attractions(request):
    """Featured explore posts ranked by views"""
    queryset = (
        Post.objects.published()
        .filter(type='explore', is_featured=True)
        .select_related('region', 'author')
        .order_by('-view_count', 'display_order', '-published_at')
    )[:_limit_param(request)]
    return Response(PostListSerializer(queryset, many=True).data)


# Video views
@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('videos_list', [TAG_VIDEO])
def video_list_create(request):
    if request.method == 'POST':
        return lifecycle.create_content(request, VideoSerializer, 'Video', 'video')

    queryset = lifecycle.visible_queryset(request, Video.objects.select_related('region', 'author'))
    queryset = VideoFilter(request.query_params, queryset=queryset).qs
    queryset = queryset.order_by('display_order', '-published_at', '-created_at')
    return Response(paginate_queryset(request, queryset, VideoSerializer))


@api_view(['GET'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('video_by_slug', [TAG_VIDEO], ttl=PUBLIC_DETAIL_CACHE_TTL)
def video_by_slug(request, slug):
    video = get_object_or_404(lifecycle.visible_queryset(request, Video.objects.select_related('region', 'author')), slug=slug)
    return Response(VideoSerializer(video).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
def video_detail(request, pk):
    video = get_object_or_404(lifecycle.detail_queryset(request, Video.objects.select_related('region', 'author')), pk=pk)

    if request.method == 'GET':
        return Response(VideoSerializer(video).data)
    if request.method == 'DELETE':
        return lifecycle.soft_delete(request, video, 'Video')
    return lifecycle.update_content(request, video, VideoSerializer, 'Video')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def video_trash(request):
    return lifecycle.trash_list(request, Video.objects.select_related('region', 'author'), VideoSerializer)


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def video_status(request, pk):
    video = get_object_or_404(Video.objects.alive(), pk=pk)
    return lifecycle.change_status(request, video, VideoSerializer, 'Video')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def video_featured(request, pk):
    video = get_object_or_404(Video.objects.alive(), pk=pk)
    return lifecycle.set_featured(request, video, VideoSerializer, 'Video')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def video_display_order(request, pk):
    video = get_object_or_404(Video.objects.alive(), pk=pk)
    return lifecycle.set_display_order(request, video, VideoSerializer, 'Video')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def video_restore(request, pk):
    video = get_object_or_404(Video, pk=pk)
    return lifecycle.restore(request, video, VideoSerializer, 'Video')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def video_hard_delete(request, pk):
    video = get_object_or_404(Video, pk=pk)
    return lifecycle.hard_delete(request, video, 'video', 'Video')


# Photo feature views
def _photo_queryset():
    return PhotoFeature.objects.select_related('region', 'author').prefetch_related(
        Prefetch('images', queryset=PhotoImage.objects.order_by('display_order', 'created_at'))
    )


@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('photos_list', [TAG_PHOTO])
def photo_list_create(request):
    if request.method == 'POST':
        return lifecycle.create_content(request, PhotoFeatureSerializer, 'PhotoFeature', 'photo')

    queryset = lifecycle.visible_queryset(request, _photo_queryset())
    queryset = PhotoFeatureFilter(request.query_params, queryset=queryset).qs
    queryset = queryset.order_by('display_order', '-published_at', '-created_at')
    return Response(paginate_queryset(request, queryset, PhotoFeatureListSerializer))


@api_view(['GET'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('photo_by_slug', [TAG_PHOTO], ttl=PUBLIC_DETAIL_CACHE_TTL)
def photo_by_slug(request, slug):
    feature = get_object_or_404(lifecycle.visible_queryset(request, _photo_queryset()), slug=slug)
    return Response(PhotoFeatureSerializer(feature).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
def photo_detail(request, pk):
    feature = get_object_or_404(lifecycle.detail_queryset(request, _photo_queryset()), pk=pk)

    if request.method == 'GET':
        return Response(PhotoFeatureSerializer(feature).data)
    if request.method == 'DELETE':
        return lifecycle.soft_delete(request, feature, 'PhotoFeature')
    return lifecycle.update_content(request, feature, PhotoFeatureSerializer, 'PhotoFeature')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def photo_trash(request):
    return lifecycle.trash_list(request, _photo_queryset(), PhotoFeatureListSerializer)


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def photo_status(request, pk):
    feature = get_object_or_404(PhotoFeature.objects.alive(), pk=pk)
    return lifecycle.change_status(request, feature, PhotoFeatureSerializer, 'PhotoFeature')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def photo_featured(request, pk):
    feature = get_object_or_404(PhotoFeature.objects.alive(), pk=pk)
    return lifecycle.set_featured(request, feature, PhotoFeatureSerializer, 'PhotoFeature')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def photo_display_order(request, pk):
    feature = get_object_or_404(PhotoFeature.objects.alive(), pk=pk)
    return lifecycle.set_display_order(request, feature, PhotoFeatureSerializer, 'PhotoFeature')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def photo_restore(request, pk):
    feature = get_object_or_404(PhotoFeature, pk=pk)
    return lifecycle.restore(request, feature, PhotoFeatureSerializer, 'PhotoFeature')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def photo_hard_delete(request, pk):
    feature = get_object_or_404(PhotoFeature, pk=pk)
    return lifecycle.hard_delete(request, feature, 'photo', 'PhotoFeature')


@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
def photo_images(request, pk):
    """List a gallery's images in order, or append a new image"""
    if request.method == 'GET':
        feature = get_object_or_404(lifecycle.visible_queryset(request, PhotoFeature.objects.all()), pk=pk)
        return Response(PhotoImageSerializer(feature.images.order_by('display_order', 'created_at'), many=True).data)

    feature = get_object_or_404(PhotoFeature.objects.alive(), pk=pk)
    if not can_modify(request.user, feature):
        return lifecycle.forbidden(request, feature, 'PhotoFeature')

    serializer = PhotoImageSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    display_order = serializer.validated_data.get('display_order')
    if display_order is None:
        current_max = feature.images.aggregate(max_order=Max('display_order'))['max_order']
        display_order = 0 if current_max is None else current_max + 1
    image = serializer.save(feature=feature, uploaded_by=request.user, display_order=display_order)
    logger.info(f"Image {image.pk} added to photo feature {feature.pk} by {request.user.username}")
    return Response(PhotoImageSerializer(image).data, status=status.HTTP_201_CREATED)


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def photo_images_reorder(request, pk):
    """Apply {"orders": [{"id", "display_order"}]} atomically"""
    feature = get_object_or_404(PhotoFeature.objects.alive(), pk=pk)
    if not can_modify(request.user, feature):
        return lifecycle.forbidden(request, feature, 'PhotoFeature')

    serializer = ImageReorderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    orders = {item['id']: item['display_order'] for item in serializer.validated_data['orders']}
    images = {image.pk: image for image in feature.images.filter(pk__in=orders.keys())}
    unknown = [str(image_id) for image_id in orders if image_id not in images]
    if unknown:
        return Response(
            {'error': 'Some images do not belong to this photo feature', 'ids': unknown},
            status=status.HTTP_400_BAD_REQUEST
        )

    with transaction.atomic():
        for image_id, display_order in orders.items():
            images[image_id].display_order = display_order
        PhotoImage.objects.bulk_update(images.values(), ['display_order'])
    transaction.on_commit(lambda: invalidate_model_cache_manual('PhotoImage'))

    create_audit_log(request, 'reorder', 'PhotoFeature', feature.pk, changes={'images': len(orders)}, object_name=feature.title)
    return Response(PhotoImageSerializer(feature.images.order_by('display_order', 'created_at'), many=True).data)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def photo_image_detail(request, pk, image_id):
    feature = get_object_or_404(PhotoFeature.objects.alive(), pk=pk)
    image = get_object_or_404(PhotoImage, pk=image_id, feature=feature)
    if not can_modify(request.user, feature):
        return lifecycle.forbidden(request, feature, 'PhotoFeature')

    if request.method == 'DELETE':
        image.delete()
        logger.info(f"Image {image_id} removed from photo feature {feature.pk} by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = PhotoImageSerializer(image, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    serializer.save()
    return Response(serializer.data)
