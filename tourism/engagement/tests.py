"""
Test suite for the engagement module
Tests: Comments (submission, threads, moderation, batches), Likes, View tracking,
aggregation and pruning (service, API and management commands)
"""
from datetime import timedelta
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.throttling import SimpleRateThrottle

from tourism.core.models import AuditLog
from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.engagement import services
from tourism.engagement.models import Comment, ContentLike, ContentView, ViewDailyAggregate
from tourism.notifications.models import Notification


def _age_views(queryset, days):
    """Move raw views `days` days into the past"""
    queryset.update(created_at=timezone.now() - timedelta(days=days))


class CommentSubmissionTests(APITestCase):
    """Test guest comment submission and the public thread"""

    def setUp(self):
        super().setUp()
        self.admin = TestDataFactory.create_admin()
        self.post = TestDataFactory.create_post(title='Bhaktapur Walk')

    def _submit(self, **overrides):
        data = {
            'target_type': 'post',
            'target_id': str(self.post.id),
            'guest_name': 'Sita',
            'guest_email': 'sita@example.com',
            'content': 'Lovely write-up!',
        }
        data.update(overrides)
        return self.client.post('/api/v1/comments/', data, format='json')

    def test_submission_is_pending(self):
        response = self._submit()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        comment = Comment.objects.get(pk=response.data['id'])
        self.assertEqual(comment.ip_address, '127.0.0.1')
        self.assertTrue(comment.viewer_hash)

    def test_submission_notifies_admins(self):
        self._submit()
        notification = Notification.objects.get(recipient=self.admin)
        self.assertEqual(notification.type, 'comment')
        self.assertEqual(notification.target_id, self.post.id)

    def test_markup_is_stripped(self):
        response = self._submit(guest_name='<b>Ram</b>', content='<a href="http://spam">Nice</a> trip')
        comment = Comment.objects.get(pk=response.data['id'])
        self.assertEqual(comment.guest_name, 'Ram')
        self.assertEqual(comment.content, 'Nice trip')

    def test_empty_after_stripping_rejected(self):
        response = self._submit(content='<p></p>')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('content', response.data)

    def test_too_long_rejected(self):
        response = self._submit(content='a' * 2001)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unpublished_target_404(self):
        draft = TestDataFactory.create_post(title='Draft', status='draft')
        response = self._submit(target_id=str(draft.id))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_parent_on_other_target_rejected(self):
        other = TestDataFactory.create_post(title='Other')
        parent = TestDataFactory.create_comment('post', other.id)
        response = self._submit(parent_id=str(parent.id))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('parent_id', response.data)

    def test_reply_to_reply_attaches_to_root(self):
        root = TestDataFactory.create_comment('post', self.post.id)
        reply = TestDataFactory.create_comment('post', self.post.id, parent=root)
        response = self._submit(parent_id=str(reply.id))
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        comment = Comment.objects.get(pk=response.data['id'])
        self.assertEqual(comment.parent_id, root.id)

    def test_public_list_requires_target(self):
        response = self.client.get('/api/v1/comments/?target_type=post')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_public_list_shows_approved_threads(self):
        root = TestDataFactory.create_comment('post', self.post.id, content='Root')
        TestDataFactory.create_comment('post', self.post.id, parent=root, content='Approved reply')
        TestDataFactory.create_comment('post', self.post.id, parent=root, content='Pending reply', status='pending')
        TestDataFactory.create_comment('post', self.post.id, content='Spam', status='spam')

        response = self.client.get(f'/api/v1/comments/?target_type=post&target_id={self.post.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        thread = response.data['results'][0]
        self.assertEqual(thread['content'], 'Root')
        self.assertEqual([reply['content'] for reply in thread['replies']], ['Approved reply'])
        self.assertNotIn('guest_email', thread)

    def test_post_comments_shortcut(self):
        TestDataFactory.create_comment('post', self.post.id)
        response = self.client.get(f'/api/v1/comments/post/{self.post.id}/')
        self.assertEqual(response.data['count'], 1)


class CommentModerationTests(APITestCase):
    """Test moderation endpoints"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        self.client.authenticate_user(self.editor)
        self.post = TestDataFactory.create_post(title='Janakpur')

    def test_requires_active_editor(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.get('/api/v1/comments/moderation/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_moderation_list_filters_status(self):
        TestDataFactory.create_comment('post', self.post.id, status='pending')
        TestDataFactory.create_comment('post', self.post.id, status='approved')
        response = self.client.get('/api/v1/comments/moderation/?status=pending')
        self.assertEqual(response.data['count'], 1)
        self.assertIn('guest_email', response.data['results'][0])

    def test_pending_count(self):
        TestDataFactory.create_comment('post', self.post.id, status='pending')
        TestDataFactory.create_comment('post', self.post.id, status='pending')
        response = self.client.get('/api/v1/comments/moderation/pending-count/')
        self.assertEqual(response.data, {'count': 2})

    def test_approve_reject_spam(self):
        comment = TestDataFactory.create_comment('post', self.post.id, status='pending')
        for action, expected in [('approve', 'approved'), ('reject', 'rejected'), ('spam', 'spam')]:
            response = self.client.post(f'/api/v1/comments/{comment.id}/{action}/')
            self.assertEqual(response.status_code, status.HTTP_200_OK)
            self.assertEqual(response.data['status'], expected)
        self.assertEqual(AuditLog.objects.filter(action='moderate', object_id=str(comment.id)).count(), 3)

    def test_edit_content(self):
        comment = TestDataFactory.create_comment('post', self.post.id, content='Typo')
        response = self.client.patch(f'/api/v1/comments/{comment.id}/', {'content': 'Fixed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['content'], 'Fixed')

    def test_delete_cascades_replies(self):
        root = TestDataFactory.create_comment('post', self.post.id)
        TestDataFactory.create_comment('post', self.post.id, parent=root)
        response = self.client.delete(f'/api/v1/comments/{root.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(Comment.objects.count(), 0)

    def test_batch_approve(self):
        pending = [TestDataFactory.create_comment('post', self.post.id, status='pending') for _ in range(3)]
        approved = TestDataFactory.create_comment('post', self.post.id)
        ids = [str(comment.id) for comment in pending] + [str(approved.id)]
        response = self.client.post('/api/v1/comments/batch/approve/', {'ids': ids}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'updated': 3})
        self.assertFalse(Comment.objects.filter(status='pending').exists())
        self.assertTrue(AuditLog.objects.filter(action='moderate', object_id='batch').exists())

    def test_batch_delete(self):
        comments = [TestDataFactory.create_comment('post', self.post.id) for _ in range(2)]
        response = self.client.post(
            '/api/v1/comments/batch/delete/', {'ids': [str(c.id) for c in comments]}, format='json'
        )
        self.assertEqual(response.data, {'deleted': 2})

    def test_batch_requires_ids(self):
        response = self.client.post('/api/v1/comments/batch/approve/', {'ids': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class LikeTests(APITestCase):
    """Test like toggling and counters"""

    def setUp(self):
        super().setUp()
        self.video = TestDataFactory.create_video(title='Upper Mustang')

    def test_toggle_like(self):
        url = f'/api/v1/content/video/{self.video.id}/like/'
        response = self.client.post(url)
        self.assertEqual(response.data, {'liked': True, 'like_count': 1})
        self.video.refresh_from_db()
        self.assertEqual(self.video.like_count, 1)

        response = self.client.post(url)
        self.assertEqual(response.data, {'liked': False, 'like_count': 0})
        self.assertFalse(ContentLike.objects.exists())

    def test_different_viewers_counted_separately(self):
        url = f'/api/v1/content/video/{self.video.id}/like/'
        self.client.post(url, REMOTE_ADDR='10.0.0.1')
        response = self.client.post(url, REMOTE_ADDR='10.0.0.2')
        self.assertEqual(response.data['like_count'], 2)

    def test_like_status(self):
        self.client.post(f'/api/v1/content/video/{self.video.id}/like/')
        response = self.client.get(f'/api/v1/content/video/{self.video.id}/like-status/')
        self.assertEqual(response.data, {'liked': True, 'like_count': 1})
        response = self.client.get(f'/api/v1/content/video/{self.video.id}/like-status/', REMOTE_ADDR='10.9.9.9')
        self.assertEqual(response.data, {'liked': False, 'like_count': 1})

    def test_hotels_cannot_be_liked(self):
        hotel = TestDataFactory.create_hotel()
        response = self.client.post(f'/api/v1/content/hotel/{hotel.id}/like/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unpublished_cannot_be_liked(self):
        draft = TestDataFactory.create_video(status='draft')
        response = self.client.post(f'/api/v1/content/video/{draft.id}/like/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_top_liked(self):
        TestDataFactory.create_post(title='Loved', like_count=40)
        TestDataFactory.create_post(title='Ignored', like_count=1)
        response = self.client.get('/api/v1/content/post/top/?limit=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['title'], 'Loved')
        self.assertEqual(response.data['results'][0]['like_count'], 40)

    def test_top_liked_rejects_hotels(self):
        response = self.client.get('/api/v1/content/hotel/top/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ViewTrackingTests(APITestCase):
    """Test view recording, stats and trending"""

    def setUp(self):
        super().setUp()
        self.author = TestDataFactory.create_editor()
        self.post = TestDataFactory.create_post(title='Rara Lake Trek', author=self.author)

    def _record(self, **extra):
        return self.client.post(
            '/api/v1/views/', {'target_type': 'post', 'target_id': str(self.post.id)}, format='json', **extra
        )

    def test_view_deduplicated_per_viewer(self):
        self.assertTrue(self._record().data['recorded'])
        self.assertFalse(self._record().data['recorded'])
        self.assertTrue(self._record(REMOTE_ADDR='10.1.1.1').data['recorded'])
        self.post.refresh_from_db()
        self.assertEqual(self.post.view_count, 2)

    def test_old_view_does_not_block(self):
        self._record()
        _age_views(ContentView.objects.all(), 2)
        self.assertTrue(self._record().data['recorded'])

    def test_unknown_target_404(self):
        response = self.client.post(
            '/api/v1/views/', {'target_type': 'post', 'target_id': '00000000-0000-0000-0000-000000000000'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_milestone_notifies_author(self):
        ContentView.objects.bulk_create([
            ContentView(target_type='post', target_id=self.post.id, viewer_hash=f'viewer-{index}')
            for index in range(99)
        ])
        self._record()
        notification = Notification.objects.get(recipient=self.author)
        self.assertEqual(notification.type, 'milestone')
        self.assertIn('100', notification.title)

    def test_stats(self):
        self._record()
        self._record(REMOTE_ADDR='10.1.1.1')
        response = self.client.get(f'/api/v1/views/post/{self.post.id}/')
        self.assertEqual(response.data['total_views'], 2)
        self.assertEqual(response.data['unique_viewers'], 2)

    def test_trending(self):
        quiet = TestDataFactory.create_post(title='Quiet')
        ContentView.objects.bulk_create(
            [ContentView(target_type='post', target_id=self.post.id, viewer_hash=f'v{i}') for i in range(3)]
            + [ContentView(target_type='post', target_id=quiet.id, viewer_hash='v0')]
        )
        response = self.client.get('/api/v1/views/trending/post/?days=7')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['days'], 7)
        self.assertEqual([row['title'] for row in response.data['results']], ['Rara Lake Trek', 'Quiet'])
        self.assertEqual(response.data['results'][0]['views'], 3)

    def test_trending_rejects_regions(self):
        response = self.client.get('/api/v1/views/trending/region/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class EngagementThrottleTests(APITestCase):
    """Test the rate limit on public engagement writes"""

    def setUp(self):
        super().setUp()
        self.post = TestDataFactory.create_post(title='Bandipur')

    @mock.patch.dict(SimpleRateThrottle.THROTTLE_RATES, {'engagement': '2/min'})
    def test_like_burst_is_throttled(self):
        url = f'/api/v1/content/post/{self.post.id}/like/'
        self.assertEqual(self.client.post(url).status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.post(url).status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.post(url).status_code, status.HTTP_429_TOO_MANY_REQUESTS)

        # Reads are not counted against the bucket
        response = self.client.get(f'/api/v1/content/post/{self.post.id}/like-status/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    @mock.patch.dict(SimpleRateThrottle.THROTTLE_RATES, {'engagement': '1/min'})
    def test_buckets_are_per_ip(self):
        self.client.post('/api/v1/views/', {'target_type': 'post', 'target_id': str(self.post.id)}, format='json')
        response = self.client.post(
            '/api/v1/views/', {'target_type': 'post', 'target_id': str(self.post.id)}, format='json',
            REMOTE_ADDR='10.0.0.2',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post('/api/v1/views/', {'target_type': 'post', 'target_id': str(self.post.id)}, format='json')
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)


class ViewAggregationTests(TestCase):
    """Test daily roll-up and pruning"""

    def setUp(self):
        self.post = TestDataFactory.create_post(title='Lumbini')

    def _views(self, count, days_ago, prefix='v'):
        ContentView.objects.bulk_create([
            ContentView(target_type='post', target_id=self.post.id, viewer_hash=f'{prefix}{i % 2}')
            for i in range(count)
        ])
        recent = ContentView.objects.filter(created_at__gte=timezone.now() - timedelta(minutes=5))
        _age_views(recent, days_ago)

    def test_aggregate_yesterday(self):
        self._views(3, 1)
        written = services.aggregate_views()
        self.assertEqual(written, 1)
        aggregate = ViewDailyAggregate.objects.get(target_id=self.post.id)
        self.assertEqual(aggregate.view_count, 3)
        self.assertEqual(aggregate.unique_viewers, 2)

    def test_aggregate_is_idempotent(self):
        self._views(3, 1)
        services.aggregate_views()
        services.aggregate_views()
        self.assertEqual(ViewDailyAggregate.objects.count(), 1)
        self.assertEqual(services.total_views('post', self.post.id), 3)

    def test_total_keeps_days_left_unaggregated(self):
        self._views(1, 3, prefix='a')
        self._views(1, 2, prefix='b')
        services.aggregate_views(timezone.localdate() - timedelta(days=2))
        self.assertEqual(services.total_views('post', self.post.id), 2)

        self.assertTrue(services.record_view('post', self.post.id, 'fresh-viewer'))
        self.post.refresh_from_db()
        self.assertEqual(self.post.view_count, 3)

    def test_today_cannot_be_aggregated(self):
        with self.assertRaises(ValueError):
            services.aggregate_views(timezone.localdate())

    def test_prune_keeps_totals(self):
        self._views(4, 120, prefix='old')
        self._views(2, 0, prefix='new')
        before = services.total_views('post', self.post.id)

        deleted = services.prune_views(days=90)

        self.assertEqual(deleted, 4)
        self.assertEqual(ContentView.objects.count(), 2)
        self.assertEqual(services.total_views('post', self.post.id), before)

    def test_aggregate_command(self):
        self._views(2, 2)
        out = StringIO()
        call_command('aggregate_views', days=3, stdout=out)
        self.assertIn('Done. 1 aggregate row(s) written.', out.getvalue())

    def test_aggregate_command_bad_date(self):
        with self.assertRaises(CommandError):
            call_command('aggregate_views', date='yesterday', stdout=StringIO())

    def test_prune_command_dry_run(self):
        self._views(3, 200)
        out = StringIO()
        call_command('prune_views', days=90, dry_run=True, stdout=out)
        self.assertIn('3 raw view(s)', out.getvalue())
        self.assertEqual(ContentView.objects.count(), 3)

    def test_prune_command(self):
        self._views(3, 200)
        out = StringIO()
        call_command('prune_views', days=90, stdout=out)
        self.assertEqual(ContentView.objects.count(), 0)
        self.assertEqual(ViewDailyAggregate.objects.get(target_id=self.post.id).view_count, 3)


class ViewAdminApiTests(APITestCase):
    """Test admin-only view maintenance endpoints"""

    def setUp(self):
        super().setUp()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_editor_forbidden(self):
        self.client.authenticate_user(TestDataFactory.create_editor())
        response = self.client.get('/api/v1/views/admin/summary/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_summary(self):
        post = TestDataFactory.create_post()
        ContentView.objects.create(target_type='post', target_id=post.id, viewer_hash='a')
        response = self.client.get('/api/v1/views/admin/summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['raw_views'], 1)
        self.assertEqual(response.data['by_type'], {'post': 1})

    def test_aggregate_bad_date(self):
        response = self.client.post('/api/v1/views/admin/aggregate/', {'date': '19-10-2026'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_aggregate_today_rejected(self):
        response = self.client.post(
            '/api/v1/views/admin/aggregate/', {'date': timezone.localdate().isoformat()}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_prune(self):
        response = self.client.post('/api/v1/views/admin/prune/')
        self.assertEqual(response.data, {'deleted': 0})
