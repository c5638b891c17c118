from rest_framework import serializers

from tourism.core.serializers import UserSummarySerializer

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    actor = UserSummarySerializer(read_only=True)

    class Meta:
        model = Notification
        fields = ['id', 'type', 'title', 'message', 'actor', 'target_type', 'target_id', 'action_url',
                  'is_read', 'created_at']
        read_only_fields = fields
