import django_filters
from django.db.models import Q

from tourism.content.filters import filter_by_region

from .models import Hotel


class HotelFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    region = django_filters.CharFilter(method=filter_by_region)
    price_range = django_filters.ChoiceFilter(field_name='price_range', choices=Hotel.PRICE_RANGE_CHOICES)
    star_rating = django_filters.NumberFilter(field_name='star_rating')
    min_stars = django_filters.NumberFilter(field_name='star_rating', lookup_expr='gte')
    is_featured = django_filters.BooleanFilter(field_name='is_featured')

    class Meta:
        model = Hotel
        fields = ['price_range', 'star_rating', 'is_featured']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(description__icontains=value) |
            Q(branches__address__icontains=value)
        ).distinct()
