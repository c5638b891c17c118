from django.urls import path
from .views import (
    hero_slide_list, hero_slide_admin, hero_slide_counts, hero_slide_reorder,
    hero_slide_detail, hero_slide_toggle
)

urlpatterns = [
    path('hero-slides/', hero_slide_list, name='hero-slide-list'),
    path('hero-slides/admin/', hero_slide_admin, name='hero-slide-admin'),
    path('hero-slides/admin/counts/', hero_slide_counts, name='hero-slide-counts'),
    path('hero-slides/admin/reorder/', hero_slide_reorder, name='hero-slide-reorder'),
    path('hero-slides/<uuid:pk>/', hero_slide_detail, name='hero-slide-detail'),
    path('hero-slides/<uuid:pk>/toggle/', hero_slide_toggle, name='hero-slide-toggle'),
]
