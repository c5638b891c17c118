import uuid

from django.conf import settings
from django.db import models

COMMENT_TARGET_CHOICES = [
    ('post', 'Post'),
    ('video', 'Video'),
    ('photo', 'Photo'),
    ('hotel', 'Hotel'),
]
LIKE_TARGET_CHOICES = [
    ('post', 'Post'),
    ('video', 'Video'),
    ('photo', 'Photo'),
]
VIEW_TARGET_CHOICES = COMMENT_TARGET_CHOICES


class Comment(models.Model):
    """Guest comment; new comments wait for moderation"""
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('spam', 'Spam'),
        ('rejected', 'Rejected'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    parent = models.ForeignKey('self', on_delete=models.CASCADE, null=True, blank=True, related_name='replies')
    target_type = models.CharField(max_length=20, choices=COMMENT_TARGET_CHOICES)
    target_id = models.UUIDField()
    guest_name = models.CharField(max_length=100)
    guest_email = models.EmailField(blank=True)
    content = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    viewer_hash = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.guest_name} on {self.target_type}:{self.target_id}"

    class Meta:
        db_table = 'comments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['target_type', 'target_id', 'status'], name='comments_target_status_idx'),
        ]


class ContentLike(models.Model):
    """One like per viewer per item"""
    target_type = models.CharField(max_length=20, choices=LIKE_TARGET_CHOICES)
    target_id = models.UUIDField()
    viewer_hash = models.CharField(max_length=64)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'content_likes'
        constraints = [
            models.UniqueConstraint(fields=['target_type', 'target_id', 'viewer_hash'], name='content_likes_viewer_uniq'),
        ]


class ContentView(models.Model):
    """Raw view event; pruned after the retention window once rolled into daily aggregates"""
    target_type = models.CharField(max_length=20, choices=VIEW_TARGET_CHOICES)
    target_id = models.UUIDField()
    viewer_hash = models.CharField(max_length=64)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'content_views'
        indexes = [
            models.Index(fields=['target_type', 'target_id', 'viewer_hash', 'created_at'], name='content_views_lookup_idx'),
        ]


class ViewDailyAggregate(models.Model):
    """Views per item per day"""
    target_type = models.CharField(max_length=20, choices=VIEW_TARGET_CHOICES)
    target_id = models.UUIDField()
    date = models.DateField()
    view_count = models.PositiveIntegerField(default=0)
    unique_viewers = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'content_view_daily'
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['target_type', 'target_id', 'date'], name='content_view_daily_uniq'),
        ]
