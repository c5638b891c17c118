from rest_framework import serializers

from tourism.content.serializers import RegionSummarySerializer
from tourism.core.sanitize import clean_rich_text
from tourism.core.serializers import UserSummarySerializer
from tourism.regions.models import Region

from .models import Hotel, HotelBranch


class HotelBranchSerializer(serializers.ModelSerializer):
    region = RegionSummarySerializer(read_only=True)
    region_id = serializers.PrimaryKeyRelatedField(
        queryset=Region.objects.alive(), source='region', write_only=True, required=False, allow_null=True
    )

    class Meta:
        model = HotelBranch
        fields = ['id', 'name', 'address', 'phone', 'email', 'coordinates', 'is_main',
                  'region', 'region_id', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_coordinates(self, value):
        if value in (None, {}):
            return None
        if not isinstance(value, dict) or 'lat' not in value or 'lng' not in value:
            raise serializers.ValidationError("Coordinates must be an object with 'lat' and 'lng'")
        try:
            lat, lng = float(value['lat']), float(value['lng'])
        except (TypeError, ValueError):
            raise serializers.ValidationError("Coordinates must be numbers")
        if not -90 <= lat <= 90 or not -180 <= lng <= 180:
            raise serializers.ValidationError("Coordinates are out of range")
        return {'lat': lat, 'lng': lng}


class HotelSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    region = RegionSummarySerializer(read_only=True)
    region_id = serializers.PrimaryKeyRelatedField(
        queryset=Region.objects.alive(), source='region', write_only=True, required=False, allow_null=True
    )
    slug = serializers.SlugField(max_length=255, required=False, allow_blank=True)
    branches = HotelBranchSerializer(many=True, read_only=True)

    class Meta:
        model = Hotel
        fields = ['id', 'name', 'slug', 'description', 'email', 'phone', 'website', 'star_rating',
                  'price_range', 'amenities', 'cover_image', 'gallery', 'status', 'published_at',
                  'display_order', 'is_featured', 'view_count', 'author', 'region', 'region_id',
                  'branches', 'created_at', 'updated_at', 'deleted_at']
        read_only_fields = ['published_at', 'view_count', 'created_at', 'updated_at', 'deleted_at']

    def validate_description(self, value):
        return clean_rich_text(value)

    def validate_star_rating(self, value):
        if value is not None and not 1 <= value <= 5:
            raise serializers.ValidationError("Star rating must be between 1 and 5")
        return value

    def validate_amenities(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError("Amenities must be a list of strings")
        return [item.strip() for item in value if item.strip()]

    def validate_gallery(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Gallery must be a list of image URLs")
        url_field = serializers.URLField()
        return [url_field.run_validation(item) for item in value]


class HotelListSerializer(serializers.ModelSerializer):
    region = RegionSummarySerializer(read_only=True)

    class Meta:
        model = Hotel
        fields = ['id', 'name', 'slug', 'star_rating', 'price_range', 'cover_image', 'amenities',
                  'status', 'display_order', 'is_featured', 'view_count', 'region', 'published_at',
                  'updated_at']
