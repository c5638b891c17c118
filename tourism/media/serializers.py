import os

from rest_framework import serializers

from tourism.core.sanitize import strip_markup
from tourism.core.serializers import UserSummarySerializer

from .models import MediaFile

ALLOWED_MIME_TYPES = {
    'image/jpeg', 'image/jpg', 'image/png', 'image/webp', 'image/gif', 'image/avif',
}
MAX_UPLOAD_SIZE = 10 * 1024 * 1024


class MediaFileSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()
    uploaded_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = MediaFile
        fields = [
            'id', 'url', 'original_name', 'mime_type', 'size', 'media_type', 'width', 'height',
            'alt', 'caption', 'is_featured', 'uploaded_by', 'created_at',
        ]
        read_only_fields = ['id', 'url', 'original_name', 'mime_type', 'size', 'media_type', 'width', 'height', 'created_at']

    def get_url(self, obj):
        if not obj.file:
            return None
        request = self.context.get('request')
        return request.build_absolute_uri(obj.file.url) if request else obj.file.url

    def validate_alt(self, value):
        return strip_markup(value)

    def validate_caption(self, value):
        return strip_markup(value)


class MediaUploadSerializer(serializers.Serializer):
    """Multipart upload: one image file plus optional alt text and caption"""
    file = serializers.ImageField()
    alt = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    caption = serializers.CharField(required=False, allow_blank=True, default='')
    is_featured = serializers.BooleanField(required=False, default=False)

    def validate_file(self, value):
        content_type = getattr(value, 'content_type', '') or ''
        if content_type not in ALLOWED_MIME_TYPES:
            raise serializers.ValidationError(
                f"Unsupported file type '{content_type}'. Allowed: jpeg, png, webp, gif, avif."
            )
        if value.size > MAX_UPLOAD_SIZE:
            raise serializers.ValidationError(
                f"File too large. Maximum size: 10MB (received: {value.size / (1024 * 1024):.2f}MB)"
            )
        return value

    def validate_alt(self, value):
        return strip_markup(value)

    def validate_caption(self, value):
        return strip_markup(value)

    def create(self, validated_data):
        upload = validated_data['file']
        return MediaFile.objects.create(
            file=upload,
            original_name=os.path.basename(upload.name)[:255],
            mime_type=upload.content_type,
            size=upload.size,
            media_type='image',
            alt=validated_data['alt'],
            caption=validated_data['caption'],
            is_featured=validated_data['is_featured'],
            uploaded_by=validated_data.get('uploaded_by'),
        )
