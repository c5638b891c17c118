from django.contrib import admin
from .models import ContentLink


@admin.register(ContentLink)
class ContentLinkAdmin(admin.ModelAdmin):
    list_display = ['source_type', 'source_id', 'target_type', 'target_id', 'display_order', 'created_at']
    list_filter = ['source_type', 'target_type']
    ordering = ['source_type', 'source_id', 'display_order']
