import uuid

from django.db import models

TAG_TARGET_CHOICES = [
    ('post', 'Post'),
    ('video', 'Video'),
    ('photo', 'Photo'),
    ('hotel', 'Hotel'),
]


class Tag(models.Model):
    TAG_TYPE_CHOICES = [
        ('activity', 'Activity'),
        ('category', 'Category'),
        ('general', 'General'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    tag_type = models.CharField(max_length=20, choices=TAG_TYPE_CHOICES, default='general', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        if not self.slug:
            from tourism.core.utils import unique_slug
            self.slug = unique_slug(Tag, self.name, instance=self, max_length=120)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'tags'
        ordering = ['name']


class ContentTag(models.Model):
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name='assignments')
    target_type = models.CharField(max_length=20, choices=TAG_TARGET_CHOICES)
    target_id = models.UUIDField()
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.tag} on {self.target_type}:{self.target_id}"

    class Meta:
        db_table = 'content_tags'
        constraints = [
            models.UniqueConstraint(fields=['tag', 'target_type', 'target_id'], name='content_tags_uniq'),
        ]
        indexes = [
            models.Index(fields=['target_type', 'target_id'], name='content_tags_target_idx'),
        ]
