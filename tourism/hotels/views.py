import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import transaction

from tourism.core import lifecycle
from tourism.core.cache_utils import cached_public_response, PUBLIC_DETAIL_CACHE_TTL, TAG_HOTEL
from tourism.core.pagination import paginate_queryset
from tourism.core.permissions import IsActiveEditor, IsActiveEditorOrReadOnly, can_modify
from tourism.core.utils import create_audit_log
from .filters import HotelFilter
from .models import Hotel, HotelBranch
from .serializers import HotelSerializer, HotelListSerializer, HotelBranchSerializer

logger = logging.getLogger('tourism.hotels')


def _hotel_queryset():
    return Hotel.objects.select_related('region', 'author').prefetch_related('branches__region')


def _save_branch(serializer, **extra):
    """Save a branch; a main branch clears the flag on its siblings"""
    with transaction.atomic():
        branch = serializer.save(**extra)
        if branch.is_main:
            for sibling in HotelBranch.objects.filter(hotel=branch.hotel, is_main=True).exclude(pk=branch.pk):
                sibling.is_main = False
                sibling.save(update_fields=['is_main', 'updated_at'])
    return branch


@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('hotels_list', [TAG_HOTEL])
def hotel_list_create(request):
    """List hotels (filter by region, price range, stars, search) or create one"""
    if request.method == 'POST':
        return lifecycle.create_content(request, HotelSerializer, 'Hotel', 'hotel')

    queryset = lifecycle.visible_queryset(request, Hotel.objects.select_related('region'))
    queryset = HotelFilter(request.query_params, queryset=queryset).qs
    queryset = queryset.order_by('display_order', 'name')
    return Response(paginate_queryset(request, queryset, HotelListSerializer))


@api_view(['GET'])
@permission_classes([IsActiveEditorOrReadOnly])
@cached_public_response('hotel_by_slug', [TAG_HOTEL], ttl=PUBLIC_DETAIL_CACHE_TTL)
def hotel_by_slug(request, slug):
    hotel = get_object_or_404(lifecycle.visible_queryset(request, _hotel_queryset()), slug=slug)
    return Response(HotelSerializer(hotel).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
def hotel_detail(request, pk):
    hotel = get_object_or_404(lifecycle.detail_queryset(request, _hotel_queryset()), pk=pk)

    if request.method == 'GET':
        return Response(HotelSerializer(hotel).data)
    if request.method == 'DELETE':
        return lifecycle.soft_delete(request, hotel, 'Hotel')
    return lifecycle.update_content(request, hotel, HotelSerializer, 'Hotel')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hotel_trash(request):
    return lifecycle.trash_list(request, Hotel.objects.select_related('region'), HotelListSerializer)


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hotel_status(request, pk):
    hotel = get_object_or_404(Hotel.objects.alive(), pk=pk)
    return lifecycle.change_status(request, hotel, HotelSerializer, 'Hotel')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hotel_featured(request, pk):
    hotel = get_object_or_404(Hotel.objects.alive(), pk=pk)
    return lifecycle.set_featured(request, hotel, HotelSerializer, 'Hotel')


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hotel_display_order(request, pk):
    hotel = get_object_or_404(Hotel.objects.alive(), pk=pk)
    return lifecycle.set_display_order(request, hotel, HotelSerializer, 'Hotel')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hotel_restore(request, pk):
    hotel = get_object_or_404(Hotel, pk=pk)
    return lifecycle.restore(request, hotel, HotelSerializer, 'Hotel')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hotel_hard_delete(request, pk):
    hotel = get_object_or_404(Hotel, pk=pk)
    return lifecycle.hard_delete(request, hotel, 'hotel', 'Hotel')


# Branch views
@api_view(['GET', 'POST'])
@permission_classes([IsActiveEditorOrReadOnly])
def hotel_branches(request, pk):
    """List a hotel's branches (main first) or add a branch"""
    if request.method == 'GET':
        hotel = get_object_or_404(lifecycle.visible_queryset(request, Hotel.objects.all()), pk=pk)
        branches = hotel.branches.select_related('region').order_by('-is_main', 'name')
        return Response(HotelBranchSerializer(branches, many=True).data)

    hotel = get_object_or_404(Hotel.objects.alive(), pk=pk)
    if not can_modify(request.user, hotel):
        return lifecycle.forbidden(request, hotel, 'Hotel')

    serializer = HotelBranchSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Hotel branch validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    branch = _save_branch(serializer, hotel=hotel)
    create_audit_log(request, 'create', 'HotelBranch', branch.pk, object_name=str(branch))
    logger.info(f"Branch '{branch.name}' added to hotel {hotel.pk} by {request.user.username}")
    return Response(HotelBranchSerializer(branch).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsActiveEditorOrReadOnly])
def hotel_branch_detail(request, pk, branch_id):
    if request.method == 'GET':
        hotel = get_object_or_404(lifecycle.visible_queryset(request, Hotel.objects.all()), pk=pk)
        branch = get_object_or_404(HotelBranch, pk=branch_id, hotel=hotel)
        return Response(HotelBranchSerializer(branch).data)

    hotel = get_object_or_404(Hotel.objects.alive(), pk=pk)
    branch = get_object_or_404(HotelBranch, pk=branch_id, hotel=hotel)
    if not can_modify(request.user, hotel):
        return lifecycle.forbidden(request, hotel, 'Hotel')

    if request.method == 'DELETE':
        branch_name = str(branch)
        branch.delete()
        create_audit_log(request, 'delete', 'HotelBranch', branch_id, object_name=branch_name)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = HotelBranchSerializer(branch, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    branch = _save_branch(serializer)
    create_audit_log(request, 'update', 'HotelBranch', branch.pk, object_name=str(branch))
    return Response(HotelBranchSerializer(branch).data)
