"""
Test suite for the reports module
Tests: Dashboard statistics, Top content
"""
from rest_framework import status

from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.hero.models import HeroSlide


class DashboardStatsTests(APITestCase):
    """Test the dashboard home numbers"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        TestDataFactory.create_post(type='event', view_count=10)
        TestDataFactory.create_post(status='draft')
        trashed = TestDataFactory.create_post()
        trashed.soft_delete()
        TestDataFactory.create_video(view_count=5)
        TestDataFactory.create_hotel(status='draft')
        HeroSlide.objects.create(custom_title='Hero')
        post = TestDataFactory.create_post(title='Commented')
        TestDataFactory.create_comment('post', post.id, status='pending')

    def test_requires_active_editor(self):
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_editor_stats(self):
        self.client.authenticate_user(self.editor)
        response = self.client.get('/api/v1/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        posts = response.data['posts']
        self.assertEqual(posts['published'], 2)
        self.assertEqual(posts['draft'], 1)
        self.assertEqual(posts['total'], 3)
        self.assertEqual(posts['trashed'], 1)
        self.assertEqual(posts['by_type']['event'], 1)
        self.assertEqual(response.data['hotels']['draft'], 1)
        self.assertEqual(response.data['hero_slides'], {'total': 1, 'active': 1})
        self.assertEqual(response.data['comments']['pending'], 1)
        self.assertEqual(response.data['engagement']['total_views'], 15)
        self.assertNotIn('users', response.data)
        self.assertEqual(response['Cache-Control'], 'private, max-age=60')

    def test_admin_gets_user_counts(self):
        self.client.authenticate_user(TestDataFactory.create_admin())
        TestDataFactory.create_user()
        response = self.client.get('/api/v1/dashboard/stats/')
        users = response.data['users']
        self.assertEqual(users['total'], 3)
        self.assertEqual(users['admins'], 1)
        self.assertEqual(users['pending'], 1)


class TopContentTests(APITestCase):
    """Test the most viewed content lists"""

    def test_top_content(self):
        self.client.authenticate_user(TestDataFactory.create_editor())
        TestDataFactory.create_post(title='Popular', view_count=100)
        TestDataFactory.create_post(title='Less', view_count=5)
        TestDataFactory.create_post(title='Draft', view_count=1000, status='draft')
        response = self.client.get('/api/v1/dashboard/top-content/?limit=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['title'] for row in response.data['posts']], ['Popular'])
        self.assertEqual(response.data['posts'][0]['view_count'], 100)
        self.assertEqual(response.data['videos'], [])
