from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, register, user_me,
    user_list, user_counts, user_detail, user_activate, user_deactivate,
    user_block, user_unblock, user_role,
    setting_list_create, setting_detail,
    audit_log_list, audit_log_detail,
    global_search, health
)

urlpatterns = [
    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # User management endpoints
    path('users/', user_list, name='user-list'),
    path('users/counts/', user_counts, name='user-counts'),
    path('users/<int:pk>/', user_detail, name='user-detail'),
    path('users/<int:pk>/activate/', user_activate, name='user-activate'),
    path('users/<int:pk>/deactivate/', user_deactivate, name='user-deactivate'),
    path('users/<int:pk>/block/', user_block, name='user-block'),
    path('users/<int:pk>/unblock/', user_unblock, name='user-unblock'),
    path('users/<int:pk>/role/', user_role, name='user-role'),

    # Setting endpoints
    path('settings/', setting_list_create, name='setting-list-create'),
    path('settings/<int:pk>/', setting_detail, name='setting-detail'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),

    # Global search endpoint
    path('search/', global_search, name='global-search'),
    path('health/', health, name='health'),
]
