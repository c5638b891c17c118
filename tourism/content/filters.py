import django_filters
from django.db.models import Q

from tourism.core.targets import parse_uuid

from .models import Post, Video, PhotoFeature

POST_ORDERINGS = {
    'latest': ['-published_at', '-created_at'],
    'oldest': ['published_at', 'created_at'],
    'popular': ['-view_count', '-like_count', '-published_at'],
    'display_order': ['display_order', '-published_at'],
}


def filter_by_region(queryset, name, value):
    """Region given as UUID or slug"""
    region_id = parse_uuid(value)
    if region_id is not None:
        return queryset.filter(region_id=region_id)
    return queryset.filter(region__slug=value, region__deleted_at__isnull=True)


class PostFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    type = django_filters.ChoiceFilter(field_name='type', choices=Post.TYPE_CHOICES)
    region = django_filters.CharFilter(method=filter_by_region)
    author = django_filters.CharFilter(method='filter_author')
    is_featured = django_filters.BooleanFilter(field_name='is_featured')
    ordering = django_filters.CharFilter(method='filter_ordering')

    class Meta:
        model = Post
        fields = ['type', 'is_featured']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(short_description__icontains=value))

    def filter_author(self, queryset, name, value):
        if value.isdigit():
            return queryset.filter(author_id=int(value))
        return queryset.filter(author__username=value)

    def filter_ordering(self, queryset, name, value):
        return queryset.order_by(*POST_ORDERINGS.get(value, POST_ORDERINGS['latest']))


class VideoFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    platform = django_filters.ChoiceFilter(field_name='platform', choices=Video.PLATFORM_CHOICES)
    region = django_filters.CharFilter(method=filter_by_region)
    is_featured = django_filters.BooleanFilter(field_name='is_featured')

    class Meta:
        model = Video
        fields = ['platform', 'is_featured']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))


class PhotoFeatureFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    region = django_filters.CharFilter(method=filter_by_region)
    is_featured = django_filters.BooleanFilter(field_name='is_featured')

    class Meta:
        model = PhotoFeature
        fields = ['is_featured']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))
