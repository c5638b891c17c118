from rest_framework import serializers

from tourism.core.sanitize import strip_markup

from .models import Tag

MAX_TAGS_PER_ITEM = 50


class TagSerializer(serializers.ModelSerializer):
    slug = serializers.SlugField(max_length=120, required=False, allow_blank=True)
    usage_count = serializers.SerializerMethodField()

    class Meta:
        model = Tag
        fields = ['id', 'name', 'slug', 'tag_type', 'usage_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_usage_count(self, obj):
        count = getattr(obj, 'usage_count', None)
        return count if count is not None else obj.assignments.count()

    def validate_name(self, value):
        value = strip_markup(value)
        if not value:
            raise serializers.ValidationError("Tag name cannot be empty")
        duplicates = Tag.objects.filter(name__iexact=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("A tag with this name already exists")
        return value

    def validate_slug(self, value):
        if not value:
            return value
        duplicates = Tag.objects.filter(slug=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("A tag with this slug already exists")
        return value


class TagSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ['id', 'name', 'slug', 'tag_type']


class TagIdsSerializer(serializers.Serializer):
    tag_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=True, max_length=MAX_TAGS_PER_ITEM)


class TagNamesSerializer(serializers.Serializer):
    names = serializers.ListField(
        child=serializers.CharField(max_length=100, trim_whitespace=True), allow_empty=True, max_length=MAX_TAGS_PER_ITEM
    )

    def validate_names(self, names):
        cleaned = []
        seen = set()
        for name in names:
            name = strip_markup(name)
            if name and name.lower() not in seen:
                seen.add(name.lower())
                cleaned.append(name)
        return cleaned
