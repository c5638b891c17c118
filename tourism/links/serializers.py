from rest_framework import serializers

from tourism.core.targets import describe_target, get_target

from .models import ContentLink, TARGET_TYPE_CHOICES


def _check_not_self(attrs):
    if attrs['source_type'] == attrs['target_type'] and attrs['source_id'] == attrs['target_id']:
        raise serializers.ValidationError({'target_id': "An item cannot link to itself"})


class ContentLinkSerializer(serializers.ModelSerializer):
    target = serializers.SerializerMethodField()
    display_order = serializers.IntegerField(required=False)

    class Meta:
        model = ContentLink
        fields = ['id', 'source_type', 'source_id', 'target_type', 'target_id', 'display_order', 'target', 'created_at']
        read_only_fields = ['created_at']
        # Duplicate pairs are reported by the view
        validators = []

    def get_target(self, obj):
        """Resolved summary of the linked item, or a flag when it cannot be shown"""
        target = get_target(obj.target_type, obj.target_id)
        if target is None:
            return {'id': str(obj.target_id), 'type': obj.target_type, 'missing': True}
        return {**describe_target(obj.target_type, target), 'missing': False}

    def validate(self, attrs):
        if self.instance is None:
            _check_not_self(attrs)
            if get_target(attrs['source_type'], attrs['source_id'], published_only=False) is None:
                raise serializers.ValidationError({'source_id': f"No {attrs['source_type']} with this id exists"})
            if get_target(attrs['target_type'], attrs['target_id'], published_only=False) is None:
                raise serializers.ValidationError({'target_id': f"No {attrs['target_type']} with this id exists"})
        return attrs


class LinkOrderSerializer(serializers.Serializer):
    display_order = serializers.IntegerField()


class LinkItemSerializer(serializers.Serializer):
    target_type = serializers.ChoiceField(choices=TARGET_TYPE_CHOICES)
    target_id = serializers.UUIDField()
    display_order = serializers.IntegerField(required=False, allow_null=True)


class LinkSetSerializer(serializers.Serializer):
    """Body of the replace-all endpoint"""
    links = LinkItemSerializer(many=True)

    def validate_links(self, links):
        seen = set()
        for item in links:
            key = (item['target_type'], item['target_id'])
            if key in seen:
                raise serializers.ValidationError(f"Duplicate link to {item['target_type']} {item['target_id']}")
            seen.add(key)
            if get_target(item['target_type'], item['target_id'], published_only=False) is None:
                raise serializers.ValidationError(f"No {item['target_type']} with id {item['target_id']} exists")
        return links
