from django.urls import path
from .views import (
    tag_list_create, tag_search, tag_count, tag_by_slug, tag_detail, tag_content,
    content_tags, content_tags_by_name
)

urlpatterns = [
    path('tags/', tag_list_create, name='tag-list-create'),
    path('tags/search/', tag_search, name='tag-search'),
    path('tags/count/', tag_count, name='tag-count'),
    path('tags/by-slug/<slug:slug>/', tag_by_slug, name='tag-by-slug'),
    path('tags/<uuid:pk>/', tag_detail, name='tag-detail'),
    path('tags/<uuid:pk>/content/', tag_content, name='tag-content'),
    path('content/<str:target_type>/<uuid:target_id>/tags/', content_tags, name='content-tags'),
    path('content/<str:target_type>/<uuid:target_id>/tags/by-name/', content_tags_by_name, name='content-tags-by-name'),
]
