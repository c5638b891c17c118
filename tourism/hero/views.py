import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import transaction
from django.db.models import Max

from tourism.core.cache_signals import invalidate_model_cache_manual
from tourism.core.cache_utils import cached_public_response, TAG_HERO_SLIDE
from tourism.core.permissions import IsActiveEditor
from tourism.core.utils import create_audit_log
from .models import HeroSlide
from .serializers import HeroSlideSerializer, SlideReorderSerializer, resolve_slide

logger = logging.getLogger('tourism.hero')


@api_view(['GET'])
@permission_classes([AllowAny])
@cached_public_response('hero_slides', [TAG_HERO_SLIDE])
def hero_slide_list(request):
    """Active, in-schedule slides resolved against their content"""
    slides = HeroSlide.objects.live().order_by('sort_order', 'created_at')
    return Response({'results': [resolve_slide(slide) for slide in slides]})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hero_slide_admin(request):
    """Every slide for the dashboard, or create one (appended after the last slide by default)"""
    if request.method == 'GET':
        slides = HeroSlide.objects.all().order_by('sort_order', 'created_at')
        return Response(HeroSlideSerializer(slides, many=True).data)

    serializer = HeroSlideSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Hero slide validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    extra = {'created_by': request.user}
    if serializer.validated_data.get('sort_order') is None:
        current_max = HeroSlide.objects.aggregate(m=Max('sort_order'))['m']
        extra['sort_order'] = 0 if current_max is None else current_max + 1
    slide = serializer.save(**extra)
    create_audit_log(request, 'create', 'HeroSlide', slide.pk, object_name=str(slide))
    logger.info(f"Hero slide {slide.pk} created by {request.user.username}")
    return Response(HeroSlideSerializer(slide).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hero_slide_counts(request):
    return Response({
        'total': HeroSlide.objects.count(),
        'active': HeroSlide.objects.filter(is_active=True).count(),
    })


@api_view(['PUT', 'PATCH', 'POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hero_slide_reorder(request):
    """Apply {"orders": [{"id", "sort_order"}]} atomically"""
    serializer = SlideReorderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    orders = {item['id']: item['sort_order'] for item in serializer.validated_data['orders']}
    slides = HeroSlide.objects.in_bulk(list(orders.keys()))
    unknown = [str(slide_id) for slide_id in orders if slide_id not in slides]
    if unknown:
        return Response({'error': 'Unknown hero slide ids', 'ids': unknown}, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        for slide_id, sort_order in orders.items():
            slides[slide_id].sort_order = sort_order
        HeroSlide.objects.bulk_update(slides.values(), ['sort_order'])
    transaction.on_commit(lambda: invalidate_model_cache_manual('HeroSlide'))

    create_audit_log(request, 'reorder', 'HeroSlide', 'all', changes={'slides': len(orders)})
    slides = HeroSlide.objects.all().order_by('sort_order', 'created_at')
    return Response(HeroSlideSerializer(slides, many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hero_slide_detail(request, pk):
    slide = get_object_or_404(HeroSlide, pk=pk)

    if request.method == 'GET':
        return Response(HeroSlideSerializer(slide).data)

    if request.method == 'DELETE':
        object_name = str(slide)
        slide.delete()
        create_audit_log(request, 'delete', 'HeroSlide', pk, object_name=object_name)
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = HeroSlideSerializer(slide, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    slide = serializer.save()
    create_audit_log(
        request, 'update', 'HeroSlide', slide.pk, object_name=str(slide),
        changes={key: str(value) for key, value in serializer.validated_data.items()},
    )
    return Response(HeroSlideSerializer(slide).data)


@api_view(['PATCH', 'POST'])
@permission_classes([IsAuthenticated, IsActiveEditor])
def hero_slide_toggle(request, pk):
    slide = get_object_or_404(HeroSlide, pk=pk)
    slide.is_active = not slide.is_active
    slide.save(update_fields=['is_active', 'updated_at'])
    create_audit_log(request, 'update', 'HeroSlide', slide.pk, object_name=str(slide), changes={'is_active': slide.is_active})
    return Response(HeroSlideSerializer(slide).data)
