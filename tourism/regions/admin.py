from django.contrib import admin
from .models import Region


@admin.register(Region)
class RegionAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'province', 'district', 'status', 'attraction_rank', 'is_featured', 'deleted_at']
    list_filter = ['status', 'is_featured', 'province', 'created_at']
    search_fields = ['name', 'slug', 'district', 'description']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at', 'published_at']
