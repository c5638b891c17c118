from django.urls import path
from .views import (
    region_list_create, region_detail, region_attractions, region_trash,
    region_restore, region_hard_delete, region_status, region_featured,
    region_display_order
)

urlpatterns = [
    path('regions/', region_list_create, name='region-list-create'),
    path('regions/trash/', region_trash, name='region-trash'),
    path('regions/<uuid:pk>/restore/', region_restore, name='region-restore'),
    path('regions/<uuid:pk>/hard-delete/', region_hard_delete, name='region-hard-delete'),
    path('regions/<uuid:pk>/status/', region_status, name='region-status'),
    path('regions/<uuid:pk>/featured/', region_featured, name='region-featured'),
    path('regions/<uuid:pk>/display-order/', region_display_order, name='region-display-order'),
    path('regions/<slug:slug>/', region_detail, name='region-detail'),
    path('regions/<slug:slug>/attractions/', region_attractions, name='region-attractions'),
]
