import uuid

from django.conf import settings
from django.db import models


class MediaFile(models.Model):
    """An uploaded file in the media library. Dimensions are read from the image on save."""
    TYPE_CHOICES = [
        ('image', 'Image'),
        ('video_link', 'Video link'),
        ('document', 'Document'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    file = models.ImageField(upload_to='uploads/%Y/%m/', width_field='width', height_field='height', max_length=255)
    original_name = models.CharField(max_length=255)
    mime_type = models.CharField(max_length=100)
    size = models.PositiveBigIntegerField(default=0)
    media_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='image')
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)
    alt = models.CharField(max_length=255, blank=True)
    caption = models.TextField(blank=True)
    is_featured = models.BooleanField(default=False)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='media_files'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.original_name or self.file.name

    class Meta:
        db_table = 'media'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['media_type', 'created_at'], name='media_type_created_idx'),
        ]
