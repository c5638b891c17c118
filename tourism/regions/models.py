from django.db import models

from tourism.core.models import PublishableModel


class Region(PublishableModel):
    """Destination region (valley, district, trekking area)"""
    slug_source_field = 'name'

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    cover_image = models.URLField(max_length=500, blank=True)
    map_data = models.JSONField(null=True, blank=True)
    attraction_rank = models.IntegerField(null=True, blank=True)
    province = models.CharField(max_length=100, blank=True, db_index=True)
    district = models.CharField(max_length=100, blank=True, db_index=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    class Meta(PublishableModel.Meta):
        db_table = 'regions'
        ordering = ['name']
