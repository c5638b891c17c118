from django.urls import path
from .views import (
    post_list_create, post_detail, post_trash, post_publish, post_status,
    post_featured, post_display_order, post_restore, post_hard_delete,
    upcoming_events, top_attractions,
    video_list_create, video_by_slug, video_detail, video_trash, video_status,
    video_featured, video_display_order, video_restore, video_hard_delete,
    photo_list_create, photo_by_slug, photo_detail, photo_trash, photo_status,
    photo_featured, photo_display_order, photo_restore, photo_hard_delete,
    photo_images, photo_images_reorder, photo_image_detail
)

urlpatterns = [
    # Posts
    path('posts/', post_list_create, name='post-list-create'),
    path('posts/trash/', post_trash, name='post-trash'),
    path('posts/<uuid:pk>/publish/', post_publish, name='post-publish'),
    path('posts/<uuid:pk>/status/', post_status, name='post-status'),
    path('posts/<uuid:pk>/featured/', post_featured, name='post-featured'),
    path('posts/<uuid:pk>/display-order/', post_display_order, name='post-display-order'),
    path('posts/<uuid:pk>/restore/', post_restore, name='post-restore'),
    path('posts/<uuid:pk>/hard-delete/', post_hard_delete, name='post-hard-delete'),
    path('posts/<slug:slug>/', post_detail, name='post-detail'),
    path('events/upcoming/', upcoming_events, name='events-upcoming'),
    path('attractions/top/', top_attractions, name='attractions-top'),

    # Videos
    path('videos/', video_list_create, name='video-list-create'),
    path('videos/trash/', video_trash, name='video-trash'),
    path('videos/by-slug/<slug:slug>/', video_by_slug, name='video-by-slug'),
    path('videos/<uuid:pk>/', video_detail, name='video-detail'),
    path('videos/<uuid:pk>/status/', video_status, name='video-status'),
    path('videos/<uuid:pk>/featured/', video_featured, name='video-featured'),
    path('videos/<uuid:pk>/display-order/', video_display_order, name='video-display-order'),
    path('videos/<uuid:pk>/restore/', video_restore, name='video-restore'),
    path('videos/<uuid:pk>/hard-delete/', video_hard_delete, name='video-hard-delete'),

    # Photo features
    path('photos/', photo_list_create, name='photo-list-create'),
    path('photos/trash/', photo_trash, name='photo-trash'),
    path('photos/by-slug/<slug:slug>/', photo_by_slug, name='photo-by-slug'),
    path('photos/<uuid:pk>/', photo_detail, name='photo-detail'),
    path('photos/<uuid:pk>/status/', photo_status, name='photo-status'),
    path('photos/<uuid:pk>/featured/', photo_featured, name='photo-featured'),
    path('photos/<uuid:pk>/display-order/', photo_display_order, name='photo-display-order'),
    path('photos/<uuid:pk>/restore/', photo_restore, name='photo-restore'),
    path('photos/<uuid:pk>/hard-delete/', photo_hard_delete, name='photo-hard-delete'),
    path('photos/<uuid:pk>/images/', photo_images, name='photo-images'),
    path('photos/<uuid:pk>/images/reorder/', photo_images_reorder, name='photo-images-reorder'),
    path('photos/<uuid:pk>/images/<uuid:image_id>/', photo_image_detail, name='photo-image-detail'),
]
