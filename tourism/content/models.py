import uuid

from django.conf import settings
from django.db import models

from tourism.core.models import PublishableModel


class Post(PublishableModel):
    """Article, event, activity or explore (attraction) page"""
    TYPE_CHOICES = [
        ('article', 'Article'),
        ('event', 'Event'),
        ('activity', 'Activity'),
        ('explore', 'Explore'),
    ]

    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='article', db_index=True)
    region = models.ForeignKey('regions.Region', on_delete=models.SET_NULL, null=True, blank=True, related_name='posts')
    title = models.CharField(max_length=255)
    short_description = models.TextField(blank=True)
    content = models.JSONField(default=dict, blank=True)
    cover_image = models.URLField(max_length=500, blank=True)
    event_date = models.DateField(null=True, blank=True)
    event_end_date = models.DateField(null=True, blank=True)
    like_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)

    class Meta(PublishableModel.Meta):
        db_table = 'posts'
        ordering = ['-published_at', '-created_at']
        indexes = [
            models.Index(fields=['type', 'status'], name='posts_type_status_idx'),
        ]


class Video(PublishableModel):
    """Embedded video hosted on YouTube, Vimeo or TikTok"""
    PLATFORM_CHOICES = [
        ('youtube', 'YouTube'),
        ('vimeo', 'Vimeo'),
        ('tiktok', 'TikTok'),
    ]

    platform = models.CharField(max_length=20, choices=PLATFORM_CHOICES, default='youtube')
    video_url = models.URLField(max_length=500)
    video_id = models.CharField(max_length=100, blank=True)
    thumbnail_url = models.URLField(max_length=500, blank=True)
    duration = models.PositiveIntegerField(null=True, blank=True, help_text="Duration in seconds")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    region = models.ForeignKey('regions.Region', on_delete=models.SET_NULL, null=True, blank=True, related_name='videos')
    like_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)

    class Meta(PublishableModel.Meta):
        db_table = 'videos'
        ordering = ['-published_at', '-created_at']


class PhotoFeature(PublishableModel):
    """Photo gallery"""
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    region = models.ForeignKey('regions.Region', on_delete=models.SET_NULL, null=True, blank=True, related_name='photo_features')
    like_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)

    class Meta(PublishableModel.Meta):
        db_table = 'photo_features'
        ordering = ['-published_at', '-created_at']


class PhotoImage(models.Model):
    """One image of a photo gallery"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    feature = models.ForeignKey(PhotoFeature, on_delete=models.CASCADE, related_name='images')
    image_url = models.URLField(max_length=500)
    caption = models.CharField(max_length=500, blank=True)
    display_order = models.IntegerField(default=0)
    uploaded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.caption or self.image_url

    class Meta:
        db_table = 'photo_images'
        ordering = ['display_order', 'created_at']
