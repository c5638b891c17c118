from django.contrib import admin
from .models import MediaFile


@admin.register(MediaFile)
class MediaFileAdmin(admin.ModelAdmin):
    list_display = ['original_name', 'media_type', 'mime_type', 'size', 'width', 'height', 'is_featured', 'uploaded_by', 'created_at']
    list_filter = ['media_type', 'is_featured']
    search_fields = ['original_name', 'alt', 'caption']
    readonly_fields = ['size', 'width', 'height', 'mime_type', 'created_at']
    ordering = ['-created_at']
