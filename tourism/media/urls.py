from django.urls import path
from .views import media_list_upload, media_gallery, media_detail

urlpatterns = [
    path('media/', media_list_upload, name='media-list'),
    path('media/gallery/', media_gallery, name='media-gallery'),
    path('media/<uuid:pk>/', media_detail, name='media-detail'),
]
