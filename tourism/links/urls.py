from django.urls import path
from .views import (
    content_link_create, content_link_by_id, content_links_for_source,
    content_links_count, content_links_to_target
)

urlpatterns = [
    path('content-links/', content_link_create, name='content-link-create'),
    path('content-links/by-id/<int:pk>/', content_link_by_id, name='content-link-by-id'),
    path('content-links/target/<str:target_type>/<uuid:target_id>/', content_links_to_target, name='content-links-to-target'),
    path('content-links/<str:source_type>/<uuid:source_id>/', content_links_for_source, name='content-links-for-source'),
    path('content-links/<str:source_type>/<uuid:source_id>/count/', content_links_count, name='content-links-count'),
]
