from django.urls import path
from .views import (
    hotel_list_create, hotel_by_slug, hotel_detail, hotel_trash, hotel_status,
    hotel_featured, hotel_display_order, hotel_restore, hotel_hard_delete,
    hotel_branches, hotel_branch_detail
)

urlpatterns = [
    path('hotels/', hotel_list_create, name='hotel-list-create'),
    path('hotels/trash/', hotel_trash, name='hotel-trash'),
    path('hotels/by-slug/<slug:slug>/', hotel_by_slug, name='hotel-by-slug'),
    path('hotels/<uuid:pk>/', hotel_detail, name='hotel-detail'),
    path('hotels/<uuid:pk>/status/', hotel_status, name='hotel-status'),
    path('hotels/<uuid:pk>/featured/', hotel_featured, name='hotel-featured'),
    path('hotels/<uuid:pk>/display-order/', hotel_display_order, name='hotel-display-order'),
    path('hotels/<uuid:pk>/restore/', hotel_restore, name='hotel-restore'),
    path('hotels/<uuid:pk>/hard-delete/', hotel_hard_delete, name='hotel-hard-delete'),
    path('hotels/<uuid:pk>/branches/', hotel_branches, name='hotel-branches'),
    path('hotels/<uuid:pk>/branches/<uuid:branch_id>/', hotel_branch_detail, name='hotel-branch-detail'),
]
