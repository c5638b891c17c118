from django.contrib import admin
from .models import Post, Video, PhotoFeature, PhotoImage


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['title', 'type', 'status', 'region', 'author', 'is_featured', 'view_count', 'published_at', 'deleted_at']
    list_filter = ['type', 'status', 'is_featured', 'created_at']
    search_fields = ['title', 'slug', 'short_description']
    ordering = ['-created_at']
    readonly_fields = ['like_count', 'view_count', 'created_at', 'updated_at']


@admin.register(Video)
class VideoAdmin(admin.ModelAdmin):
    list_display = ['title', 'platform', 'video_id', 'status', 'is_featured', 'view_count', 'published_at', 'deleted_at']
    list_filter = ['platform', 'status', 'is_featured']
    search_fields = ['title', 'slug', 'video_id']
    ordering = ['-created_at']
    readonly_fields = ['like_count', 'view_count', 'created_at', 'updated_at']


class PhotoImageInline(admin.TabularInline):
    model = PhotoImage
    extra = 0
    fields = ['image_url', 'caption', 'display_order', 'uploaded_by']
    ordering = ['display_order']


@admin.register(PhotoFeature)
class PhotoFeatureAdmin(admin.ModelAdmin):
    list_display = ['title', 'status', 'region', 'is_featured', 'view_count', 'published_at', 'deleted_at']
    list_filter = ['status', 'is_featured']
    search_fields = ['title', 'slug', 'description']
    ordering = ['-created_at']
    inlines = [PhotoImageInline]
