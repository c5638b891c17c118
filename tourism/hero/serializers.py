from rest_framework import serializers

from tourism.core.sanitize import strip_markup
from tourism.core.targets import describe_target, get_target

from .models import HeroSlide


def resolve_slide(slide):
    """
    Public payload of a slide. Content slides take their text, image and link
    from the referenced published item; non-empty custom fields win. A slide
    whose item is gone or unpublished falls back to its custom fields.
    """
    resolved = {
        'title': slide.custom_title,
        'description': slide.custom_description,
        'image': slide.custom_image,
        'link': slide.custom_link,
    }
    content = None
    if slide.content_type != 'custom' and slide.content_id:
        target = get_target(slide.content_type, slide.content_id)
        if target is not None:
            content = describe_target(slide.content_type, target)
            resolved = {
                'title': slide.custom_title or content['title'],
                'description': slide.custom_description or content['description'],
                'image': slide.custom_image or content['image'],
                'link': slide.custom_link or content['url'],
            }
    return {
        'id': str(slide.pk),
        'content_type': slide.content_type,
        'content_id': str(slide.content_id) if slide.content_id else None,
        'sort_order': slide.sort_order,
        'content': content,
        **resolved,
    }


class HeroSlideSerializer(serializers.ModelSerializer):
    sort_order = serializers.IntegerField(required=False)

    class Meta:
        model = HeroSlide
        fields = ['id', 'content_type', 'content_id', 'custom_title', 'custom_description', 'custom_image',
                  'custom_link', 'sort_order', 'is_active', 'starts_at', 'ends_at', 'created_by',
                  'created_at', 'updated_at']
        read_only_fields = ['created_by', 'created_at', 'updated_at']

    def validate_custom_title(self, value):
        return strip_markup(value)

    def validate_custom_description(self, value):
        return strip_markup(value)

    def validate(self, attrs):
        def current(field, default=None):
            return attrs.get(field, getattr(self.instance, field, default))

        content_type = current('content_type', 'custom')
        if content_type == 'custom':
            if not current('custom_title'):
                raise serializers.ValidationError({'custom_title': "Custom slides need a title"})
            attrs['content_id'] = None
        else:
            content_id = current('content_id')
            if not content_id:
                raise serializers.ValidationError({'content_id': f"Select the {content_type} this slide shows"})
            if get_target(content_type, content_id, published_only=False) is None:
                raise serializers.ValidationError({'content_id': f"No {content_type} with this id exists"})

        starts_at = current('starts_at')
        ends_at = current('ends_at')
        if starts_at and ends_at and ends_at <= starts_at:
            raise serializers.ValidationError({'ends_at': "End time must be after the start time"})
        return attrs


class SlideOrderItemSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    sort_order = serializers.IntegerField()


class SlideReorderSerializer(serializers.Serializer):
    orders = SlideOrderItemSerializer(many=True, allow_empty=False)
