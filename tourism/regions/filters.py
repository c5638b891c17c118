import django_filters
from django.db.models import F, Q

from .models import Region


class RegionFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    province = django_filters.CharFilter(field_name='province', lookup_expr='iexact')
    district = django_filters.CharFilter(field_name='district', lookup_expr='iexact')
    is_featured = django_filters.BooleanFilter(field_name='is_featured')

    class Meta:
        model = Region
        fields = ['province', 'district', 'is_featured']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(description__icontains=value) |
            Q(province__icontains=value) | Q(district__icontains=value)
        )


def order_regions(queryset):
    """Ranked regions first (lowest rank first), then alphabetical"""
    return queryset.order_by(F('attraction_rank').asc(nulls_last=True), 'name')
