from django.db import models

SOURCE_TYPE_CHOICES = [
    ('post', 'Post'),
    ('region', 'Region'),
]
TARGET_TYPE_CHOICES = [
    ('photo', 'Photo'),
    ('video', 'Video'),
    ('post', 'Post'),
]


class ContentLink(models.Model):
    """Related item shown on a post or region page"""
    source_type = models.CharField(max_length=20, choices=SOURCE_TYPE_CHOICES)
    source_id = models.UUIDField()
    target_type = models.CharField(max_length=20, choices=TARGET_TYPE_CHOICES)
    target_id = models.UUIDField()
    display_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.source_type}:{self.source_id} -> {self.target_type}:{self.target_id}"

    class Meta:
        db_table = 'content_links'
        ordering = ['display_order', 'created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['source_type', 'source_id', 'target_type', 'target_id'], name='content_links_pair_uniq'
            ),
        ]
        indexes = [
            models.Index(fields=['source_type', 'source_id'], name='content_links_source_idx'),
            models.Index(fields=['target_type', 'target_id'], name='content_links_target_idx'),
        ]
