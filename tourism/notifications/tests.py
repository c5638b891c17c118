"""
Test suite for the notifications module
Tests: Emission helpers, Listing, Unread counts, Mark read, Delete
"""
from rest_framework import status

from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.notifications.models import Notification
from tourism.notifications.services import notify_admins, notify_user, notify_view_milestone


class NotificationServiceTests(APITestCase):
    """Test the helpers other apps call"""

    def test_notify_admins_skips_actor(self):
        first = TestDataFactory.create_admin()
        second = TestDataFactory.create_admin()
        TestDataFactory.create_editor()
        sent = notify_admins('content', 'New post', actor=first)
        self.assertEqual(sent, 1)
        self.assertEqual(Notification.objects.get().recipient, second)

    def test_editor_content_notifies_admins(self):
        admin = TestDataFactory.create_admin()
        editor = TestDataFactory.create_editor()
        self.client.authenticate_user(editor)
        self.client.post('/api/v1/posts/', {'title': 'Gosaikunda'}, format='json')
        notification = Notification.objects.get(recipient=admin)
        self.assertEqual(notification.type, 'content')
        self.assertEqual(notification.actor, editor)

    def test_admin_content_is_silent(self):
        admin = TestDataFactory.create_admin()
        TestDataFactory.create_admin()
        self.client.authenticate_user(admin)
        self.client.post('/api/v1/posts/', {'title': 'Gosaikunda'}, format='json')
        self.assertFalse(Notification.objects.exists())

    def test_milestone_only_on_exact_count(self):
        author = TestDataFactory.create_editor()
        post = TestDataFactory.create_post(title='Namche', author=author)
        self.assertIsNone(notify_view_milestone('post', post, 99))
        notification = notify_view_milestone('post', post, 1000)
        self.assertEqual(notification.recipient, author)
        self.assertEqual(notification.title, 'Namche reached 1,000 views')

    def test_milestone_without_author(self):
        post = TestDataFactory.create_post(title='Orphan')
        self.assertIsNone(notify_view_milestone('post', post, 100))


class NotificationApiTests(APITestCase):
    """Test the current user's notification endpoints"""

    def setUp(self):
        super().setUp()
        self.user = TestDataFactory.create_editor()
        self.other = TestDataFactory.create_editor()
        self.client.authenticate_user(self.user)
        self.first = notify_user(self.user, 'comment', 'First')
        self.second = notify_user(self.user, 'content', 'Second')
        notify_user(self.other, 'comment', 'Not mine')

    def test_anonymous_rejected(self):
        self.client.logout()
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_own_only(self):
        response = self.client.get('/api/v1/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertNotIn('Not mine', [row['title'] for row in response.data['results']])

    def test_unread_filter_and_count(self):
        self.client.post(f'/api/v1/notifications/{self.first.id}/read/')
        response = self.client.get('/api/v1/notifications/?unread=true')
        self.assertEqual([row['title'] for row in response.data['results']], ['Second'])
        response = self.client.get('/api/v1/notifications/unread-count/')
        self.assertEqual(response.data, {'count': 1})

    def test_mark_read(self):
        response = self.client.patch(f'/api/v1/notifications/{self.first.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_read'])

    def test_cannot_touch_others(self):
        foreign = Notification.objects.get(recipient=self.other)
        response = self.client.post(f'/api/v1/notifications/{foreign.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.delete(f'/api/v1/notifications/{foreign.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_all_read(self):
        response = self.client.post('/api/v1/notifications/read-all/')
        self.assertEqual(response.data, {'updated': 2})
        self.assertFalse(Notification.objects.filter(recipient=self.user, is_read=False).exists())
        self.assertTrue(Notification.objects.filter(recipient=self.other, is_read=False).exists())

    def test_delete(self):
        response = self.client.delete(f'/api/v1/notifications/{self.second.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(Notification.objects.filter(recipient=self.user).count(), 1)
