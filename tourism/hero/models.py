import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone


class HeroSlideQuerySet(models.QuerySet):
    def live(self, now=None):
        """Active slides whose schedule window contains `now`"""
        now = now or timezone.now()
        return self.filter(is_active=True).filter(
            Q(starts_at__isnull=True) | Q(starts_at__lte=now),
            Q(ends_at__isnull=True) | Q(ends_at__gt=now),
        )


class HeroSlide(models.Model):
    """Homepage hero slide: either points at a post/video/photo feature or carries its own content"""
    CONTENT_TYPE_CHOICES = [
        ('post', 'Post'),
        ('video', 'Video'),
        ('photo', 'Photo'),
        ('custom', 'Custom'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    content_type = models.CharField(max_length=20, choices=CONTENT_TYPE_CHOICES, default='custom')
    content_id = models.UUIDField(null=True, blank=True)
    custom_title = models.CharField(max_length=255, blank=True)
    custom_description = models.TextField(blank=True)
    custom_image = models.URLField(max_length=500, blank=True)
    custom_link = models.CharField(max_length=500, blank=True)
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    starts_at = models.DateTimeField(null=True, blank=True)
    ends_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = HeroSlideQuerySet.as_manager()

    def __str__(self):
        if self.content_type == 'custom':
            return self.custom_title or str(self.pk)
        return self.custom_title or f"{self.content_type}:{self.content_id}"

    class Meta:
        db_table = 'hero_slides'
        ordering = ['sort_order', 'created_at']
        indexes = [
            models.Index(fields=['is_active', 'sort_order'], name='hero_slides_active_idx'),
        ]
