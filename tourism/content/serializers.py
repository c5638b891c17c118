from rest_framework import serializers

from tourism.core.sanitize import clean_rich_text
from tourism.core.serializers import UserSummarySerializer
from tourism.regions.models import Region

from .models import Post, Video, PhotoFeature, PhotoImage
from .video_urls import detect_platform, extract_video_id, default_thumbnail


class RegionSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Region
        fields = ['id', 'name', 'slug']


class PostSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    region = RegionSummarySerializer(read_only=True)
    region_id = serializers.PrimaryKeyRelatedField(
        queryset=Region.objects.alive(), source='region', write_only=True, required=False, allow_null=True
    )
    slug = serializers.SlugField(max_length=255, required=False, allow_blank=True)

    class Meta:
        model = Post
        fields = ['id', 'type', 'title', 'slug', 'short_description', 'content', 'cover_image',
                  'status', 'published_at', 'event_date', 'event_end_date', 'display_order',
                  'is_featured', 'like_count', 'view_count', 'author', 'region', 'region_id',
                  'created_at', 'updated_at', 'deleted_at']
        read_only_fields = ['published_at', 'like_count', 'view_count', 'created_at', 'updated_at', 'deleted_at']

    def validate_short_description(self, value):
        return clean_rich_text(value)

    def validate(self, attrs):
        event_date = attrs.get('event_date', getattr(self.instance, 'event_date', None))
        event_end_date = attrs.get('event_end_date', getattr(self.instance, 'event_end_date', None))
        if event_date and event_end_date and event_end_date < event_date:
            raise serializers.ValidationError({'event_end_date': "Event end date cannot be before the start date"})
        return attrs


class PostListSerializer(serializers.ModelSerializer):
    """Card payload for post lists (no rich content body)"""
    author = UserSummarySerializer(read_only=True)
    region = RegionSummarySerializer(read_only=True)

    class Meta:
        model = Post
        fields = ['id', 'type', 'title', 'slug', 'short_description', 'cover_image', 'status',
                  'published_at', 'event_date', 'event_end_date', 'display_order', 'is_featured',
                  'like_count', 'view_count', 'author', 'region', 'updated_at']


class VideoSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    region = RegionSummarySerializer(read_only=True)
    region_id = serializers.PrimaryKeyRelatedField(
        queryset=Region.objects.alive(), source='region', write_only=True, required=False, allow_null=True
    )
    slug = serializers.SlugField(max_length=255, required=False, allow_blank=True)
    platform = serializers.ChoiceField(choices=Video.PLATFORM_CHOICES, required=False)

    class Meta:
        model = Video
        fields = ['id', 'platform', 'video_url', 'video_id', 'thumbnail_url', 'duration', 'title', 'slug',
                  'description', 'status', 'published_at', 'display_order', 'is_featured', 'like_count',
                  'view_count', 'author', 'region', 'region_id', 'created_at', 'updated_at', 'deleted_at']
        read_only_fields = ['published_at', 'like_count', 'view_count', 'created_at', 'updated_at', 'deleted_at']

    def validate_description(self, value):
        return clean_rich_text(value)

    def validate(self, attrs):
        instance = self.instance
        url_changed = 'video_url' in attrs
        video_url = attrs.get('video_url', getattr(instance, 'video_url', ''))
        platform = attrs.get('platform')
        if not platform:
            # A new URL decides the platform unless one is sent with it
            platform = instance.platform if instance is not None and not url_changed else detect_platform(video_url)
        if not platform:
            raise serializers.ValidationError({'platform': "Could not detect the platform from the video URL"})
        attrs['platform'] = platform

        # Re-derive the id when the URL changes and no explicit id was sent
        if url_changed and not attrs.get('video_id'):
            video_id = extract_video_id(platform, video_url)
            if not video_id:
                raise serializers.ValidationError({'video_url': f"Could not extract a {platform} video id from this URL"})
            attrs['video_id'] = video_id

        # A thumbnail derived from the previous id is replaced; one set by hand is kept
        derived = default_thumbnail(instance.platform, instance.video_id) if instance is not None else ''
        thumbnail_url = attrs.get('thumbnail_url', getattr(instance, 'thumbnail_url', ''))
        if not thumbnail_url or ('thumbnail_url' not in attrs and thumbnail_url == derived):
            video_id = attrs.get('video_id', getattr(instance, 'video_id', ''))
            attrs['thumbnail_url'] = default_thumbnail(platform, video_id)
        return attrs


class PhotoImageSerializer(serializers.ModelSerializer):
    display_order = serializers.IntegerField(required=False)

    class Meta:
        model = PhotoImage
        fields = ['id', 'image_url', 'caption', 'display_order', 'uploaded_by', 'created_at']
        read_only_fields = ['uploaded_by', 'created_at']


class PhotoFeatureSerializer(serializers.ModelSerializer):
    author = UserSummarySerializer(read_only=True)
    region = RegionSummarySerializer(read_only=True)
    region_id = serializers.PrimaryKeyRelatedField(
        queryset=Region.objects.alive(), source='region', write_only=True, required=False, allow_null=True
    )
    slug = serializers.SlugField(max_length=255, required=False, allow_blank=True)
    images = PhotoImageSerializer(many=True, read_only=True)

    class Meta:
        model = PhotoFeature
        fields = ['id', 'title', 'slug', 'description', 'status', 'published_at', 'display_order',
                  'is_featured', 'like_count', 'view_count', 'author', 'region', 'region_id', 'images',
                  'created_at', 'updated_at', 'deleted_at']
        read_only_fields = ['published_at', 'like_count', 'view_count', 'created_at', 'updated_at', 'deleted_at']

    def validate_description(self, value):
        return clean_rich_text(value)


class PhotoFeatureListSerializer(serializers.ModelSerializer):
    region = RegionSummarySerializer(read_only=True)
    cover_image = serializers.SerializerMethodField()
    image_count = serializers.SerializerMethodField()

    class Meta:
        model = PhotoFeature
        fields = ['id', 'title', 'slug', 'description', 'status', 'published_at', 'display_order',
                  'is_featured', 'like_count', 'view_count', 'region', 'cover_image', 'image_count',
                  'updated_at']

    def get_cover_image(self, obj):
        images = list(obj.images.all())
        return images[0].image_url if images else None

    def get_image_count(self, obj):
        return len(obj.images.all())


class DisplayOrderItemSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    display_order = serializers.IntegerField()


class ImageReorderSerializer(serializers.Serializer):
    orders = DisplayOrderItemSerializer(many=True, allow_empty=False)
