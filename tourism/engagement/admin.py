from django.contrib import admin
from .models import Comment, ContentLike, ContentView, ViewDailyAggregate


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ['guest_name', 'target_type', 'target_id', 'status', 'parent', 'created_at']
    list_filter = ['status', 'target_type', 'created_at']
    search_fields = ['guest_name', 'guest_email', 'content']
    ordering = ['-created_at']
    actions = ['approve_selected', 'mark_spam']

    @admin.action(description='Approve selected comments')
    def approve_selected(self, request, queryset):
        for comment in queryset:
            comment.status = 'approved'
            comment.save(update_fields=['status', 'updated_at'])

    @admin.action(description='Mark selected comments as spam')
    def mark_spam(self, request, queryset):
        for comment in queryset:
            comment.status = 'spam'
            comment.save(update_fields=['status', 'updated_at'])


@admin.register(ContentLike)
class ContentLikeAdmin(admin.ModelAdmin):
    list_display = ['target_type', 'target_id', 'viewer_hash', 'user', 'created_at']
    list_filter = ['target_type']
    ordering = ['-created_at']


@admin.register(ContentView)
class ContentViewAdmin(admin.ModelAdmin):
    list_display = ['target_type', 'target_id', 'viewer_hash', 'created_at']
    list_filter = ['target_type', 'created_at']
    ordering = ['-created_at']


@admin.register(ViewDailyAggregate)
class ViewDailyAggregateAdmin(admin.ModelAdmin):
    list_display = ['date', 'target_type', 'target_id', 'view_count', 'unique_viewers']
    list_filter = ['target_type', 'date']
    ordering = ['-date']
