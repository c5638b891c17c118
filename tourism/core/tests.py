"""
Test suite for the core module
Tests: Auth, User management, Permissions, Slugs, Cache tags, Search, Audit logs
"""
from io import StringIO
from unittest import mock

from django.core.cache import cache
from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from tourism.content.models import Post
from tourism.core.cache_utils import build_tagged_key, get_tag_versions, invalidate_tags, TAG_POST, TAG_REGION
from tourism.core.models import AuditLog, User
from tourism.core.pagination import get_page_params
from tourism.core.permissions import can_modify, is_active_editor, is_admin
from tourism.core.revalidation import RevalidationMiddleware, batched_revalidation, notify_frontend
from tourism.core.sanitize import clean_rich_text, strip_markup
from tourism.core.test_utils import TestDataFactory, AuthenticatedAPIClient, APITestCase
from tourism.core.utils import generate_viewer_hash, unique_slug
from tourism.notifications.models import Notification


class AuthTests(APITestCase):
    """Test registration, login and the current-user endpoint"""

    def test_register_creates_pending_editor(self):
        admin = TestDataFactory.create_admin()
        response = self.client.post('/api/v1/auth/register/', {
            'username': 'newguide',
            'email': 'guide@example.com',
            'password': 'Sunrise-Trail-2024',
            'password_confirm': 'Sunrise-Trail-2024',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertEqual(response.data['user']['role'], 'editor')
        self.assertFalse(response.data['user']['is_approved'])
        self.assertFalse(response.data['user']['is_active_editor'])
        self.assertTrue(Notification.objects.filter(recipient=admin, type='new_user').exists())

    def test_register_password_mismatch(self):
        response = self.client.post('/api/v1/auth/register/', {
            'username': 'newguide',
            'password': 'Sunrise-Trail-2024',
            'password_confirm': 'Sunset-Trail-2024',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_duplicate_email(self):
        TestDataFactory.create_user(email='taken@example.com')
        response = self.client.post('/api/v1/auth/register/', {
            'username': 'another',
            'email': 'TAKEN@example.com',
            'password': 'Sunrise-Trail-2024',
            'password_confirm': 'Sunrise-Trail-2024',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_login_returns_tokens_and_user(self):
        TestDataFactory.create_editor(username='writer', password='testpass123')
        response = self.client.post('/api/v1/auth/login/', {'username': 'writer', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['username'], 'writer')

    def test_login_rejected_for_blocked_user(self):
        user = TestDataFactory.create_editor(username='blocked', password='testpass123')
        user.is_active = False
        user.save()
        response = self.client.post('/api/v1/auth/login/', {'username': 'blocked', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_update_profile(self):
        user = TestDataFactory.create_editor()
        self.client.authenticate_user(user)
        response = self.client.patch('/api/v1/auth/me/', {'first_name': 'Maya', 'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.first_name, 'Maya')
        # Role is read-only on the profile endpoint
        self.assertEqual(user.role, 'editor')


class UserManagementTests(APITestCase):
    """Test admin-only user management"""

    def setUp(self):
        super().setUp()
        self.admin = TestDataFactory.create_admin()
        self.client.authenticate_user(self.admin)

    def test_editor_cannot_list_users(self):
        editor = TestDataFactory.create_editor()
        client = AuthenticatedAPIClient().authenticate_user(editor)
        response = client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_users_paginated(self):
        TestDataFactory.create_user()
        response = self.client.get('/api/v1/users/?role=editor')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertIn('total_pages', response.data)

    def test_user_counts(self):
        TestDataFactory.create_user()
        TestDataFactory.create_editor()
        response = self.client.get('/api/v1/users/counts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 3)
        self.assertEqual(response.data['admins'], 1)
        self.assertEqual(response.data['pending'], 1)

    def test_activate_approves_and_notifies(self):
        user = TestDataFactory.create_user()
        response = self.client.post(f'/api/v1/users/{user.pk}/activate/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertTrue(user.is_approved)
        self.assertTrue(Notification.objects.filter(recipient=user, type='verified').exists())

    def test_block_and_unblock(self):
        user = TestDataFactory.create_editor()
        response = self.client.post(f'/api/v1/users/{user.pk}/block/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertIsNotNone(user.banned_at)
        self.assertFalse(user.is_active)

        response = self.client.post(f'/api/v1/users/{user.pk}/unblock/')
        user.refresh_from_db()
        self.assertIsNone(user.banned_at)
        self.assertTrue(user.is_active)

    def test_cannot_block_self(self):
        response = self.client.post(f'/api/v1/users/{self.admin.pk}/block/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_demote_self(self):
        response = self.client.put(f'/api/v1/users/{self.admin.pk}/role/', {'role': 'editor'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_change_role(self):
        user = TestDataFactory.create_editor()
        response = self.client.put(f'/api/v1/users/{user.pk}/role/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.role, 'admin')
        self.assertTrue(AuditLog.objects.filter(action='user_change', object_id=str(user.pk)).exists())

    def test_cannot_delete_self(self):
        response = self.client.delete(f'/api/v1/users/{self.admin.pk}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PermissionHelperTests(TestCase):
    """Test role helpers"""

    def test_unapproved_editor_is_not_active_editor(self):
        user = TestDataFactory.create_user()
        self.assertFalse(is_active_editor(user))
        self.assertFalse(is_admin(user))

    def test_banned_editor_is_not_active_editor(self):
        user = TestDataFactory.create_editor()
        user.banned_at = user.created_at
        self.assertFalse(is_active_editor(user))

    def test_superuser_is_admin(self):
        user = TestDataFactory.create_user(is_superuser=True)
        self.assertTrue(is_admin(user))
        self.assertTrue(is_active_editor(user))

    def test_editor_modifies_only_own_rows(self):
        editor = TestDataFactory.create_editor()
        other = TestDataFactory.create_editor()
        own = TestDataFactory.create_post(author=editor)
        foreign = TestDataFactory.create_post(author=other)
        self.assertTrue(can_modify(editor, own))
        self.assertFalse(can_modify(editor, foreign))
        self.assertTrue(can_modify(TestDataFactory.create_admin(), foreign))


class SlugTests(TestCase):
    """Test slug generation on content rows"""

    def test_slug_from_title(self):
        post = TestDataFactory.create_post(title='Sunrise at Poon Hill')
        self.assertEqual(post.slug, 'sunrise-at-poon-hill')

    def test_trash_slug_is_reserved(self):
        post = TestDataFactory.create_post(title='Trash')
        self.assertEqual(post.slug, 'trash-2')
        response = self.client.get('/api/v1/posts/trash-2/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'Trash')

    def test_slug_collision_gets_suffix(self):
        TestDataFactory.create_post(title='Lakeside')
        second = TestDataFactory.create_post(title='Lakeside')
        third = TestDataFactory.create_post(title='Lakeside')
        self.assertEqual(second.slug, 'lakeside-2')
        self.assertEqual(third.slug, 'lakeside-3')

    def test_trashed_row_releases_slug(self):
        first = TestDataFactory.create_post(title='Lakeside')
        first.soft_delete()
        second = TestDataFactory.create_post(title='Lakeside')
        self.assertEqual(second.slug, 'lakeside')

    def test_slug_stable_on_rename(self):
        post = TestDataFactory.create_post(title='Old Title')
        post.title = 'New Title'
        post.save()
        self.assertEqual(post.slug, 'old-title')

    def test_empty_title_falls_back(self):
        self.assertEqual(unique_slug(Post, '!!!'), 'item')

    def test_published_at_set_on_first_publish(self):
        post = TestDataFactory.create_post(status='draft')
        self.assertIsNone(post.published_at)
        post.set_status('published')
        self.assertIsNotNone(post.published_at)


class SanitizeTests(TestCase):
    """Test markup cleaning"""

    def test_strip_markup(self):
        self.assertEqual(strip_markup('  <b>Hello</b> <i>there</i> '), 'Hello there')

    def test_clean_rich_text_keeps_allowed_tags(self):
        cleaned = clean_rich_text('<p>Hi <a href="https://example.com" onclick="x()">link</a></p><script>bad()</script>')
        self.assertIn('<p>', cleaned)
        self.assertIn('href="https://example.com"', cleaned)
        self.assertNotIn('onclick', cleaned)
        self.assertNotIn('<script>', cleaned)

    def test_clean_rich_text_drops_javascript_links(self):
        cleaned = clean_rich_text('<a href="javascript:alert(1)">x</a>')
        self.assertNotIn('javascript', cleaned)


class ViewerHashTests(TestCase):
    """Test anonymous viewer identity"""

    def test_hash_depends_on_context_and_client(self):
        factory = APIRequestFactory()
        request = factory.get('/', HTTP_USER_AGENT='Browser', REMOTE_ADDR='10.0.0.1')
        other = factory.get('/', HTTP_USER_AGENT='Browser', REMOTE_ADDR='10.0.0.2')
        like_hash = generate_viewer_hash(request, 'like')
        self.assertEqual(len(like_hash), 32)
        self.assertEqual(like_hash, generate_viewer_hash(request, 'like'))
        self.assertNotEqual(like_hash, generate_viewer_hash(request, 'view'))
        self.assertNotEqual(like_hash, generate_viewer_hash(other, 'like'))

    def test_forwarded_for_wins(self):
        factory = APIRequestFactory()
        first = factory.get('/', HTTP_X_FORWARDED_FOR='1.1.1.1, 10.0.0.1', REMOTE_ADDR='10.0.0.1')
        second = factory.get('/', HTTP_X_FORWARDED_FOR='1.1.1.1', REMOTE_ADDR='10.0.0.9')
        self.assertEqual(generate_viewer_hash(first, 'view'), generate_viewer_hash(second, 'view'))


class PaginationTests(TestCase):
    """Test page/limit parsing"""

    def test_limit_clamped(self):
        factory = APIRequestFactory()
        request = Request(factory.get('/', {'page': '0', 'limit': '500'}))
        self.assertEqual(get_page_params(request), (1, 100))
        request = Request(factory.get('/', {'page': 'x', 'limit': 'y'}))
        self.assertEqual(get_page_params(request), (1, 10))


class CacheTagTests(APITestCase):
    """Test tag-versioned response caching"""

    def test_invalidating_tag_changes_keys(self):
        before = build_tagged_key('posts', [TAG_POST], 1)
        self.assertEqual(before, build_tagged_key('posts', [TAG_POST], 1))
        invalidate_tags(TAG_POST, notify=False)
        self.assertNotEqual(before, build_tagged_key('posts', [TAG_POST], 1))

    def test_unrelated_tag_untouched(self):
        region_version = get_tag_versions([TAG_REGION])
        invalidate_tags(TAG_POST, notify=False)
        self.assertEqual(region_version, get_tag_versions([TAG_REGION]))

    def test_public_list_hit_then_invalidated_on_save(self):
        TestDataFactory.create_post(title='First')
        first = self.client.get('/api/v1/posts/')
        self.assertEqual(first['X-Cache'], 'MISS')
        second = self.client.get('/api/v1/posts/')
        self.assertEqual(second['X-Cache'], 'HIT')

        with self.captureOnCommitCallbacks(execute=True):
            TestDataFactory.create_post(title='Second')
        third = self.client.get('/api/v1/posts/')
        self.assertEqual(third['X-Cache'], 'MISS')
        self.assertEqual(third.data['count'], 2)

    def test_authenticated_requests_bypass_cache(self):
        self.client.authenticate_user(TestDataFactory.create_editor())
        response = self.client.get('/api/v1/posts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.has_header('X-Cache'))

    @override_settings(FRONTEND_REVALIDATE_URL='http://frontend.test/api/revalidate', FRONTEND_REVALIDATE_SECRET='s3cret')
    def test_notify_frontend_posts_tags(self):
        with mock.patch('tourism.core.revalidation.requests.post') as post:
            notify_frontend(['Post'])
        post.assert_called_once()
        _, kwargs = post.call_args
        self.assertEqual(kwargs['json'], {'tags': ['Post']})
        self.assertEqual(kwargs['headers']['X-Revalidate-Secret'], 's3cret')

    @override_settings(FRONTEND_REVALIDATE_URL='')
    def test_notify_frontend_disabled_without_url(self):
        with mock.patch('tourism.core.revalidation.requests.post') as post:
            notify_frontend(['Post'])
        post.assert_not_called()

    @override_settings(FRONTEND_REVALIDATE_URL='http://frontend.test/api/revalidate')
    def test_engagement_tags_stay_on_server(self):
        with mock.patch('tourism.core.revalidation.requests.post') as post:
            self.assertFalse(notify_frontend(['ViewStats', 'LikeStatus']))
        post.assert_not_called()

    @override_settings(FRONTEND_REVALIDATE_URL='http://frontend.test/api/revalidate')
    def test_batch_sends_one_call(self):
        with mock.patch('tourism.core.revalidation.requests.post') as post:
            with batched_revalidation():
                invalidate_tags(TAG_POST)
                invalidate_tags(TAG_REGION, TAG_POST)
                post.assert_not_called()
        post.assert_called_once()
        self.assertEqual(post.call_args[1]['json'], {'tags': ['Post', 'Region']})

    @override_settings(FRONTEND_REVALIDATE_URL='http://frontend.test/api/revalidate')
    def test_middleware_sends_once_per_request(self):
        def view(request):
            invalidate_tags(TAG_POST)
            invalidate_tags(TAG_REGION)
            return 'response'

        with mock.patch('tourism.core.revalidation.requests.post') as post:
            result = RevalidationMiddleware(view)(APIRequestFactory().post('/'))
        self.assertEqual(result, 'response')
        post.assert_called_once()


class SearchAndHealthTests(APITestCase):
    """Test global search and health check"""

    def test_search_returns_published_matches_only(self):
        TestDataFactory.create_post(title='Annapurna Base Camp')
        TestDataFactory.create_post(title='Annapurna Draft', status='draft')
        TestDataFactory.create_hotel(name='Annapurna Lodge')
        response = self.client.get('/api/v1/search/?q=annapurna')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['posts']), 1)
        self.assertEqual(len(response.data['hotels']), 1)
        self.assertEqual(response.data['posts'][0]['url'], '/blogs/annapurna-base-camp')

    def test_empty_search(self):
        response = self.client.get('/api/v1/search/')
        self.assertEqual(response.data['posts'], [])

    def test_health(self):
        response = self.client.get('/api/v1/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ok')


class AuditLogTests(APITestCase):
    """Test audit log visibility"""

    def test_editor_sees_only_own_entries(self):
        editor = TestDataFactory.create_editor()
        other = TestDataFactory.create_editor()
        AuditLog.objects.create(user=editor, action='create', model_name='Post', object_id='1')
        AuditLog.objects.create(user=other, action='create', model_name='Post', object_id='2')
        self.client.authenticate_user(editor)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_admin_sees_everything(self):
        editor = TestDataFactory.create_editor()
        AuditLog.objects.create(user=editor, action='create', model_name='Post', object_id='1')
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.get('/api/v1/audit-logs/?model=Post')
        self.assertEqual(response.data['count'], 1)


class CheckCacheCommandTests(TestCase):
    """Test the cache check management command"""

    def setUp(self):
        cache.clear()

    def test_reports_success(self):
        out = StringIO()
        call_command('check_cache', stdout=out)
        output = out.getvalue()
        self.assertIn('Tag invalidation: Success', output)
        self.assertIn('ALL CHECKS PASSED', output)

    @mock.patch('tourism.core.cache_utils.notify_frontend')
    def test_flush_tags(self, mock_notify):
        before = get_tag_versions([TAG_POST])
        call_command('check_cache', flush_tags=True, stdout=StringIO())
        self.assertNotEqual(get_tag_versions([TAG_POST]), before)
        mock_notify.assert_called_once()
