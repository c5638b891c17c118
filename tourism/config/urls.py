"""
URL configuration for the tourism content API.

Every app mounts its routes under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Tourism CMS Admin Panel"
admin.site.site_title = "Tourism CMS Admin Portal"
admin.site.index_title = "Welcome to the Tourism CMS Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('tourism.core.urls')),
    path('api/v1/', include('tourism.regions.urls')),
    path('api/v1/', include('tourism.content.urls')),
    path('api/v1/', include('tourism.hotels.urls')),
    path('api/v1/', include('tourism.engagement.urls')),
    path('api/v1/', include('tourism.hero.urls')),
    path('api/v1/', include('tourism.links.urls')),
    path('api/v1/', include('tourism.tags.urls')),
    path('api/v1/', include('tourism.notifications.urls')),
    path('api/v1/', include('tourism.reports.urls')),
    path('api/v1/', include('tourism.media.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
    re_path(r'^static/(?P<path>.*)$', serve, {'document_root': settings.STATIC_ROOT}),
]
