from django.urls import path
from .views import (
    comment_list_create, post_comments, comment_moderation_list, comment_pending_count,
    comment_moderate, comment_detail, comment_batch_approve, comment_batch_delete,
    like_toggle, like_status, top_liked,
    view_record, view_stats, trending, view_admin_summary, view_admin_aggregate, view_admin_prune
)

urlpatterns = [
    # Comments
    path('comments/', comment_list_create, name='comment-list-create'),
    path('comments/post/<uuid:post_id>/', post_comments, name='post-comments'),
    path('comments/moderation/', comment_moderation_list, name='comment-moderation'),
    path('comments/moderation/pending-count/', comment_pending_count, name='comment-pending-count'),
    path('comments/batch/approve/', comment_batch_approve, name='comment-batch-approve'),
    path('comments/batch/delete/', comment_batch_delete, name='comment-batch-delete'),
    path('comments/<uuid:pk>/', comment_detail, name='comment-detail'),
    path('comments/<uuid:pk>/approve/', comment_moderate, {'action': 'approve'}, name='comment-approve'),
    path('comments/<uuid:pk>/reject/', comment_moderate, {'action': 'reject'}, name='comment-reject'),
    path('comments/<uuid:pk>/spam/', comment_moderate, {'action': 'spam'}, name='comment-spam'),

    # Likes
    path('content/<str:target_type>/top/', top_liked, name='top-liked'),
    path('content/<str:target_type>/<uuid:target_id>/like/', like_toggle, name='like-toggle'),
    path('content/<str:target_type>/<uuid:target_id>/like-status/', like_status, name='like-status'),

    # Views
    path('views/', view_record, name='view-record'),
    path('views/admin/summary/', view_admin_summary, name='view-admin-summary'),
    path('views/admin/aggregate/', view_admin_aggregate, name='view-admin-aggregate'),
    path('views/admin/prune/', view_admin_prune, name='view-admin-prune'),
    path('views/trending/<str:target_type>/', trending, name='view-trending'),
    path('views/<str:target_type>/<uuid:target_id>/', view_stats, name='view-stats'),
]
