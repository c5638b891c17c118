"""
Test suite for the hero module
Tests: Public resolution, Scheduling, Dashboard CRUD, Reorder, Toggle
"""
from datetime import timedelta

from django.utils import timezone
from rest_framework import status

from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.hero.models import HeroSlide


class HeroPublicTests(APITestCase):
    """Test the public slide list"""

    def test_content_slide_resolves_from_post(self):
        post = TestDataFactory.create_post(title='Tiji Festival', short_description='Masked dances', cover_image='https://cdn.example.com/tiji.jpg')
        HeroSlide.objects.create(content_type='post', content_id=post.id)
        response = self.client.get('/api/v1/hero-slides/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        slide = response.data['results'][0]
        self.assertEqual(slide['title'], 'Tiji Festival')
        self.assertEqual(slide['description'], 'Masked dances')
        self.assertEqual(slide['image'], 'https://cdn.example.com/tiji.jpg')
        self.assertEqual(slide['link'], '/blogs/tiji-festival')
        self.assertEqual(slide['content']['id'], str(post.id))

    def test_custom_fields_override_content(self):
        video = TestDataFactory.create_video(title='Everest Flight')
        HeroSlide.objects.create(content_type='video', content_id=video.id, custom_title='Fly over Everest')
        slide = self.client.get('/api/v1/hero-slides/').data['results'][0]
        self.assertEqual(slide['title'], 'Fly over Everest')
        self.assertEqual(slide['image'], video.thumbnail_url)

    def test_unpublished_content_falls_back_to_custom(self):
        post = TestDataFactory.create_post(title='Hidden', status='draft')
        HeroSlide.objects.create(content_type='post', content_id=post.id, custom_title='Coming soon')
        slide = self.client.get('/api/v1/hero-slides/').data['results'][0]
        self.assertEqual(slide['title'], 'Coming soon')
        self.assertIsNone(slide['content'])

    def test_schedule_and_active_flag(self):
        now = timezone.now()
        HeroSlide.objects.create(custom_title='Live', sort_order=1)
        HeroSlide.objects.create(custom_title='First', sort_order=0, starts_at=now - timedelta(days=1))
        HeroSlide.objects.create(custom_title='Future', starts_at=now + timedelta(days=1))
        HeroSlide.objects.create(custom_title='Expired', ends_at=now - timedelta(hours=1))
        HeroSlide.objects.create(custom_title='Off', is_active=False)
        response = self.client.get('/api/v1/hero-slides/')
        self.assertEqual([slide['title'] for slide in response.data['results']], ['First', 'Live'])


class HeroDashboardTests(APITestCase):
    """Test slide management"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        self.client.authenticate_user(self.editor)

    def test_anonymous_rejected(self):
        self.client.logout()
        response = self.client.get('/api/v1/hero-slides/admin/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_custom_slide_appends(self):
        HeroSlide.objects.create(custom_title='Existing', sort_order=4)
        response = self.client.post('/api/v1/hero-slides/admin/', {
            'custom_title': 'Visit Nepal 2026',
            'custom_image': 'https://cdn.example.com/hero.jpg',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sort_order'], 5)
        self.assertEqual(response.data['content_type'], 'custom')
        self.assertEqual(response.data['created_by'], self.editor.pk)

    def test_custom_slide_needs_title(self):
        response = self.client.post('/api/v1/hero-slides/admin/', {'custom_image': 'https://cdn.example.com/x.jpg'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('custom_title', response.data)

    def test_content_slide_needs_existing_target(self):
        response = self.client.post('/api/v1/hero-slides/admin/', {
            'content_type': 'post',
            'content_id': '00000000-0000-0000-0000-000000000000',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('content_id', response.data)

    def test_content_slide_accepts_draft_target(self):
        post = TestDataFactory.create_post(status='draft')
        response = self.client.post('/api/v1/hero-slides/admin/', {
            'content_type': 'post',
            'content_id': str(post.id),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_schedule_must_be_ordered(self):
        now = timezone.now()
        response = self.client.post('/api/v1/hero-slides/admin/', {
            'custom_title': 'Backwards',
            'starts_at': (now + timedelta(days=2)).isoformat(),
            'ends_at': (now + timedelta(days=1)).isoformat(),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('ends_at', response.data)

    def test_counts(self):
        HeroSlide.objects.create(custom_title='A')
        HeroSlide.objects.create(custom_title='B', is_active=False)
        response = self.client.get('/api/v1/hero-slides/admin/counts/')
        self.assertEqual(response.data, {'total': 2, 'active': 1})

    def test_reorder(self):
        first = HeroSlide.objects.create(custom_title='A', sort_order=0)
        second = HeroSlide.objects.create(custom_title='B', sort_order=1)
        response = self.client.put('/api/v1/hero-slides/admin/reorder/', {
            'orders': [
                {'id': str(first.id), 'sort_order': 1},
                {'id': str(second.id), 'sort_order': 0},
            ]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['custom_title'] for row in response.data], ['B', 'A'])

    def test_reorder_unknown_ids(self):
        slide = HeroSlide.objects.create(custom_title='A', sort_order=0)
        missing = '00000000-0000-0000-0000-000000000001'
        response = self.client.put('/api/v1/hero-slides/admin/reorder/', {
            'orders': [
                {'id': str(slide.id), 'sort_order': 9},
                {'id': missing, 'sort_order': 1},
            ]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['ids'], [missing])
        slide.refresh_from_db()
        self.assertEqual(slide.sort_order, 0)

    def test_toggle(self):
        slide = HeroSlide.objects.create(custom_title='A')
        response = self.client.post(f'/api/v1/hero-slides/{slide.id}/toggle/')
        self.assertFalse(response.data['is_active'])

    def test_update_and_delete(self):
        slide = HeroSlide.objects.create(custom_title='Old')
        response = self.client.patch(f'/api/v1/hero-slides/{slide.id}/', {'custom_title': 'New'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['custom_title'], 'New')

        response = self.client.delete(f'/api/v1/hero-slides/{slide.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(HeroSlide.objects.exists())
