from django.contrib import admin
from .models import Tag, ContentTag


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'tag_type', 'created_at']
    list_filter = ['tag_type']
    search_fields = ['name', 'slug']
    ordering = ['name']


@admin.register(ContentTag)
class ContentTagAdmin(admin.ModelAdmin):
    list_display = ['tag', 'target_type', 'target_id', 'created_at']
    list_filter = ['target_type']
    search_fields = ['tag__name']
    ordering = ['-created_at']
