from django.urls import path
from . import views

urlpatterns = [
    path('dashboard/stats/', views.dashboard_stats, name='dashboard-stats'),
    path('dashboard/top-content/', views.top_content, name='dashboard-top-content'),
]
