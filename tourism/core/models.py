import uuid

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


STATUS_DRAFT = 'draft'
STATUS_PUBLISHED = 'published'
STATUS_CHOICES = [
    (STATUS_DRAFT, 'Draft'),
    (STATUS_PUBLISHED, 'Published'),
]


class User(AbstractUser):
    """Dashboard user. Editors need admin approval before they can write content."""
    ROLE_ADMIN = 'admin'
    ROLE_EDITOR = 'editor'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_EDITOR, 'Editor'),
    ]

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_EDITOR, db_index=True)
    is_approved = models.BooleanField(default=False)
    banned_at = models.DateTimeField(null=True, blank=True)
    image = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'

    @property
    def is_admin_role(self):
        return self.role == self.ROLE_ADMIN or self.is_superuser

    @property
    def is_banned(self):
        return self.banned_at is not None


class Setting(models.Model):
    """Site settings (key/value) editable from the dashboard"""
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    description = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key

    class Meta:
        db_table = 'settings'


class AuditLog(models.Model):
    """Audit log for dashboard mutations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('restore', 'Restore'),
        ('hard_delete', 'Hard Delete'),
        ('status_change', 'Status Change'),
        ('reorder', 'Reorder'),
        ('moderate', 'Comment Moderation'),
        ('user_change', 'User Change'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., post title, region name)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_logs_created_idx'),
            models.Index(fields=['action'], name='audit_logs_action_idx'),
            models.Index(fields=['model_name'], name='audit_logs_model_idx'),
        ]


class ContentQuerySet(models.QuerySet):
    """Soft-delete and publication filters shared by every content table"""

    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def trashed(self):
        return self.filter(deleted_at__isnull=False)

    def published(self):
        return self.alive().filter(status=STATUS_PUBLISHED)


class SoftDeleteMixin:
    """Lifecycle helpers for models with `status`, `deleted_at` and optionally `published_at`"""

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    @property
    def is_published(self):
        return self.status == STATUS_PUBLISHED and self.deleted_at is None

    def soft_delete(self):
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])

    def set_status(self, status):
        self.status = status
        fields = ['status', 'updated_at']
        if status == STATUS_PUBLISHED and hasattr(self, 'published_at') and self.published_at is None:
            self.published_at = timezone.now()
            fields.append('published_at')
        self.save(update_fields=fields)


class PublishableModel(SoftDeleteMixin, models.Model):
    """
    Common columns of the public content tables (regions, posts, videos,
    photo features, hotels).

    The slug is unique among non-deleted rows only, so a trashed row releases
    its slug.
    """
    slug_source_field = 'title'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    slug = models.SlugField(max_length=255, db_index=True, blank=True)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='%(app_label)s_%(class)s_set'
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    published_at = models.DateTimeField(null=True, blank=True)
    display_order = models.IntegerField(null=True, blank=True)
    is_featured = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = ContentQuerySet.as_manager()

    class Meta:
        abstract = True
        constraints = [
            models.UniqueConstraint(
                fields=['slug'],
                condition=models.Q(deleted_at__isnull=True),
                name='%(app_label)s_%(class)s_slug_alive_uniq',
            ),
        ]

    @property
    def display_name(self):
        return getattr(self, self.slug_source_field)

    def __str__(self):
        return self.display_name

    def save(self, *args, **kwargs):
        from .utils import unique_slug

        update_fields = kwargs.get('update_fields')
        if self.deleted_at is None and (update_fields is None or 'slug' in update_fields):
            self.slug = unique_slug(type(self), self.slug or self.display_name, self)
        if self.status == STATUS_PUBLISHED and self.published_at is None and update_fields is None:
            self.published_at = timezone.now()
        super().save(*args, **kwargs)
