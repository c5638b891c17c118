import uuid

from django.conf import settings
from django.db import models


class Notification(models.Model):
    """Dashboard notification addressed to one user"""
    TYPE_CHOICES = [
        ('new_user', 'New User'),
        ('verified', 'Account Verified'),
        ('content', 'Content'),
        ('comment', 'Comment'),
        ('milestone', 'Milestone'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True)
    target_type = models.CharField(max_length=20, blank=True)
    target_id = models.UUIDField(null=True, blank=True)
    action_url = models.CharField(max_length=500, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'is_read'], name='notifications_unread_idx'),
        ]

    def __str__(self):
        return f"{self.type}: {self.title}"
