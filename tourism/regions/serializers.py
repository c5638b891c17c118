from rest_framework import serializers

from tourism.core.sanitize import clean_rich_text
from tourism.core.serializers import UserSummarySerializer

from .models import Region


class RegionSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    slug = serializers.SlugField(max_length=255, required=False, allow_blank=True)

    class Meta:
        model = Region
        fields = ['id', 'name', 'slug', 'description', 'cover_image', 'map_data', 'attraction_rank',
                  'is_featured', 'status', 'province', 'district', 'latitude', 'longitude',
                  'display_order', 'author', 'published_at', 'created_at', 'updated_at', 'deleted_at']
        read_only_fields = ['published_at', 'created_at', 'updated_at', 'deleted_at']

    def validate_description(self, value):
        return clean_rich_text(value)

    def validate_latitude(self, value):
        if value is not None and not -90 <= value <= 90:
            raise serializers.ValidationError("Latitude must be between -90 and 90")
        return value

    def validate_longitude(self, value):
        if value is not None and not -180 <= value <= 180:
            raise serializers.ValidationError("Longitude must be between -180 and 180")
        return value


class RegionListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Region
        fields = ['id', 'name', 'slug', 'cover_image', 'attraction_rank', 'is_featured', 'status',
                  'province', 'district', 'latitude', 'longitude', 'published_at', 'updated_at']
