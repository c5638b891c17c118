import uuid

from django.db import models

from tourism.core.models import PublishableModel


class Hotel(PublishableModel):
    """Hotel listing; branches hold per-location contact details"""
    PRICE_RANGE_CHOICES = [
        ('budget', 'Budget'),
        ('mid', 'Mid-range'),
        ('luxury', 'Luxury'),
    ]
    slug_source_field = 'name'

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    website = models.URLField(max_length=500, blank=True)
    star_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    price_range = models.CharField(max_length=20, choices=PRICE_RANGE_CHOICES, blank=True, db_index=True)
    amenities = models.JSONField(default=list, blank=True)
    cover_image = models.URLField(max_length=500, blank=True)
    gallery = models.JSONField(default=list, blank=True)
    region = models.ForeignKey('regions.Region', on_delete=models.SET_NULL, null=True, blank=True, related_name='hotels')
    view_count = models.PositiveIntegerField(default=0)

    class Meta(PublishableModel.Meta):
        db_table = 'hotels'
        ordering = ['name']


class HotelBranch(models.Model):
    """A physical location of a hotel; at most one branch per hotel is the main one"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name='branches')
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    coordinates = models.JSONField(null=True, blank=True)
    is_main = models.BooleanField(default=False)
    region = models.ForeignKey('regions.Region', on_delete=models.SET_NULL, null=True, blank=True, related_name='hotel_branches')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.hotel.name} - {self.name}"

    class Meta:
        db_table = 'hotel_branches'
        ordering = ['-is_main', 'name']
