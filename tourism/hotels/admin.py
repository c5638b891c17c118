from django.contrib import admin
from .models import Hotel, HotelBranch


class HotelBranchInline(admin.TabularInline):
    model = HotelBranch
    extra = 0
    fields = ['name', 'address', 'phone', 'is_main', 'region']


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ['name', 'star_rating', 'price_range', 'region', 'status', 'is_featured', 'deleted_at']
    list_filter = ['status', 'price_range', 'star_rating', 'is_featured']
    search_fields = ['name', 'slug', 'email', 'phone']
    ordering = ['name']
    inlines = [HotelBranchInline]


@admin.register(HotelBranch)
class HotelBranchAdmin(admin.ModelAdmin):
    list_display = ['name', 'hotel', 'is_main', 'phone', 'region']
    list_filter = ['is_main']
    search_fields = ['name', 'hotel__name', 'address']
    ordering = ['hotel__name', 'name']
