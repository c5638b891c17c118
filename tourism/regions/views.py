import logging
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from tourism.content.models import Post
from tourism.content.serializers import PostListSerializer
from tourism.core import lifecycle
from tourism.core.cache_utils import cached_public_response, PUBLIC_DETAIL_CACHE_TTL, TAG_POST, TAG_REGION
from tourism.core.pagination import paginate_queryset
from tourism.core.permissions import IsActiveEditor, IsActiveEditorOrReadOnly
from .filters import RegionFilter, order_regions
from .models import Region
from .serializers import RegionSerializer, RegionListSerializer

logger = logging.getLogger('tourism.regions')


@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('regions_list', [TAG_REGION])
def region_list_create(request):
    """List regions or create a new region (create requires an active editor)"""
    if request.method == 'POST':
        return lifecycle.create_content(request, RegionSerializer, 'Region', 'region')

    queryset = lifecycle.visible_queryset(request, Region.objects.all())
    queryset = RegionFilter(request.query_params, queryset=queryset).qs
    queryset = order_regions(queryset)
    return Response(paginate_queryset(request, queryset, RegionListSerializer))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('region_detail', [TAG_REGION], ttl=PUBLIC_DETAIL_CACHE_TTL)
def region_detail(request, slug):
    """Retrieve, update or soft-delete a region by slug"""
    region = get_object_or_404(lifecycle.detail_queryset(request, Region.objects.all()), slug=slug)

    if request.method == 'GET':
        logger.debug(f"Region {slug} retrieved")
        return Response(RegionSerializer(region).data)
    if request.method == 'DELETE':
        return lifecycle.soft_delete(request, region, 'Region')
    return lifecycle.update_content(request, region, RegionSerializer, 'Region')


@api_view(['GET'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('region_attractions', [TAG_REGION, TAG_POST])
def region_attractions(request, slug):
    """Published explore posts located in a region"""
    region = get_object_or_404(Region.objects.published(), slug=slug)
    queryset = (
        Post.objects.published()
        .filter(region=region, type='explore')
        .select_related('region', 'author')
        .order_by('display_order', '-view_count', '-published_at')
    )
    data = paginate_queryset(request, queryset, PostListSerializer)
    data['region'] = RegionListSerializer(region).data
    return Response(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def region_trash(request):
    return lifecycle.trash_list(request, Region.objects.all(), RegionListSerializer)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def region_restore(request, pk):
    region = get_object_or_404(Region, pk=pk)
    return lifecycle.restore(request, region, RegionSerializer, 'Region')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def region_hard_delete(request, pk):
    region = get_object_or_404(Region, pk=pk)
    return lifecycle.hard_delete(request, region, 'region', 'Region')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def region_status(request, pk):
    region = get_object_or_404(Region.objects.alive(), pk=pk)
    return lifecycle.change_status(request, region, RegionSerializer, 'Region')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def region_featured(request, pk):
    region = get_object_or_404(Region.objects.alive(), pk=pk)
    return lifecycle.set_featured(request, region, RegionSerializer, 'Region')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def region_display_order(request, pk):
    region = get_object_or_404(Region.objects.alive(), pk=pk)
    return lifecycle.set_display_order(request, region, RegionSerializer, 'Region')
