from django.contrib import admin
from .models import HeroSlide


@admin.register(HeroSlide)
class HeroSlideAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'content_type', 'sort_order', 'is_active', 'starts_at', 'ends_at']
    list_filter = ['content_type', 'is_active']
    search_fields = ['custom_title', 'custom_description']
    ordering = ['sort_order']
