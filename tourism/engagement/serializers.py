from rest_framework import serializers

from tourism.core.sanitize import strip_markup

from .models import Comment, COMMENT_TARGET_CHOICES, VIEW_TARGET_CHOICES

MAX_COMMENT_LENGTH = 2000
MAX_NAME_LENGTH = 100


class CommentCreateSerializer(serializers.Serializer):
    target_type = serializers.ChoiceField(choices=COMMENT_TARGET_CHOICES)
    target_id = serializers.UUIDField()
    parent_id = serializers.UUIDField(required=False, allow_null=True)
    guest_name = serializers.CharField(max_length=500, trim_whitespace=True)
    guest_email = serializers.EmailField(required=False, allow_blank=True)
    content = serializers.CharField(max_length=20000, trim_whitespace=True)

    def validate_guest_name(self, value):
        value = strip_markup(value)
        if not value:
            raise serializers.ValidationError("Name cannot be empty")
        if len(value) > MAX_NAME_LENGTH:
            raise serializers.ValidationError(f"Name cannot exceed {MAX_NAME_LENGTH} characters")
        return value

    def validate_content(self, value):
        value = strip_markup(value)
        if not value:
            raise serializers.ValidationError("Comment cannot be empty")
        if len(value) > MAX_COMMENT_LENGTH:
            raise serializers.ValidationError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
        return value


class CommentReplySerializer(serializers.ModelSerializer):
    parent_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Comment
        fields = ['id', 'parent_id', 'guest_name', 'content', 'created_at']


class PublicCommentSerializer(serializers.ModelSerializer):
    """Approved comment as shown on the site (no e-mail, IP or viewer hash)"""
    parent_id = serializers.UUIDField(read_only=True)
    replies = serializers.SerializerMethodField()

    class Meta:
        model = Comment
        fields = ['id', 'parent_id', 'target_type', 'target_id', 'guest_name', 'content', 'created_at', 'replies']

    def get_replies(self, obj):
        replies = getattr(obj, 'approved_replies', None)
        if replies is None:
            replies = obj.replies.filter(status='approved').order_by('created_at')
        return CommentReplySerializer(replies, many=True).data


class ModerationCommentSerializer(serializers.ModelSerializer):
    parent_id = serializers.UUIDField(read_only=True)
    reply_count = serializers.SerializerMethodField()

    class Meta:
        model = Comment
        fields = ['id', 'parent_id', 'target_type', 'target_id', 'guest_name', 'guest_email', 'content',
                  'status', 'ip_address', 'reply_count', 'created_at', 'updated_at']
        read_only_fields = ['id', 'parent_id', 'target_type', 'target_id', 'guest_name', 'guest_email',
                            'status', 'ip_address', 'created_at', 'updated_at']

    def get_reply_count(self, obj):
        return obj.replies.count()

    def validate_content(self, value):
        value = strip_markup(value)
        if not value:
            raise serializers.ValidationError("Comment cannot be empty")
        if len(value) > MAX_COMMENT_LENGTH:
            raise serializers.ValidationError(f"Comment cannot exceed {MAX_COMMENT_LENGTH} characters")
        return value


class CommentIdsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False, max_length=500)


class ViewCreateSerializer(serializers.Serializer):
    target_type = serializers.ChoiceField(choices=VIEW_TARGET_CHOICES)
    target_id = serializers.UUIDField()
