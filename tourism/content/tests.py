"""
Test suite for the content module
Tests: Posts, Events, Attractions, Videos (URL parsing), Photo galleries and their images
"""
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.content.models import Post, PhotoImage
from tourism.content.video_urls import detect_platform, extract_video_id, default_thumbnail


class VideoUrlTests(TestCase):
    """Test platform detection and id extraction"""

    def test_detect_platform(self):
        self.assertEqual(detect_platform('https://www.youtube.com/watch?v=dQw4w9WgXcQ'), 'youtube')
        self.assertEqual(detect_platform('https://youtu.be/dQw4w9WgXcQ'), 'youtube')
        self.assertEqual(detect_platform('https://vimeo.com/76979871'), 'vimeo')
        self.assertEqual(detect_platform('https://www.tiktok.com/@nepal/video/7234567890123456789'), 'tiktok')
        self.assertIsNone(detect_platform('https://example.com/movie.mp4'))
        self.assertIsNone(detect_platform(None))

    def test_extract_youtube_ids(self):
        for url in [
            'https://www.youtube.com/watch?v=dQw4w9WgXcQ',
            'https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ',
            'https://youtu.be/dQw4w9WgXcQ',
            'https://www.youtube.com/embed/dQw4w9WgXcQ',
            'https://www.youtube.com/shorts/dQw4w9WgXcQ',
        ]:
            self.assertEqual(extract_video_id('youtube', url), 'dQw4w9WgXcQ', url)

    def test_extract_other_platforms(self):
        self.assertEqual(extract_video_id('vimeo', 'https://vimeo.com/channels/staffpicks/76979871'), '76979871')
        self.assertEqual(
            extract_video_id('tiktok', 'https://www.tiktok.com/@nepal/video/7234567890123456789'),
            '7234567890123456789'
        )
        self.assertIsNone(extract_video_id('vimeo', 'https://vimeo.com/about'))
        self.assertIsNone(extract_video_id('dailymotion', 'https://dailymotion.com/video/x1'))

    def test_default_thumbnail(self):
        self.assertEqual(
            default_thumbnail('youtube', 'dQw4w9WgXcQ'),
            'https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg'
        )
        self.assertEqual(default_thumbnail('vimeo', '76979871'), '')


class PostPublicTests(APITestCase):
    """Test public post endpoints"""

    def test_list_only_published(self):
        TestDataFactory.create_post(title='Visible')
        TestDataFactory.create_post(title='Draft', status='draft')
        trashed = TestDataFactory.create_post(title='Trashed')
        trashed.soft_delete()
        response = self.client.get('/api/v1/posts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['title'], 'Visible')
        self.assertNotIn('content', response.data['results'][0])

    def test_filter_by_type_and_region_slug(self):
        region = TestDataFactory.create_region(name='Pokhara')
        TestDataFactory.create_post(title='Paragliding', type='activity', region=region)
        TestDataFactory.create_post(title='Rafting', type='activity')
        TestDataFactory.create_post(title='News', type='article', region=region)
        response = self.client.get('/api/v1/posts/?type=activity&region=pokhara')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['title'], 'Paragliding')

    def test_search(self):
        TestDataFactory.create_post(title='Everest Base Camp')
        TestDataFactory.create_post(title='Lumbini', short_description='Birthplace near the Everest foothills')
        TestDataFactory.create_post(title='Chitwan')
        response = self.client.get('/api/v1/posts/?search=everest')
        self.assertEqual(response.data['count'], 2)

    def test_popular_ordering(self):
        TestDataFactory.create_post(title='Quiet', view_count=3)
        TestDataFactory.create_post(title='Busy', view_count=300)
        response = self.client.get('/api/v1/posts/?ordering=popular')
        self.assertEqual(response.data['results'][0]['title'], 'Busy')

    def test_detail_by_slug(self):
        TestDataFactory.create_post(title='Tihar Festival', content={'blocks': []})
        response = self.client.get('/api/v1/posts/tihar-festival/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['content'], {'blocks': []})

    def test_draft_detail_hidden(self):
        TestDataFactory.create_post(title='Unreleased', status='draft')
        response = self.client.get('/api/v1/posts/unreleased/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_upcoming_events(self):
        today = timezone.localdate()
        TestDataFactory.create_post(title='Past', type='event', event_date=today - timedelta(days=10))
        TestDataFactory.create_post(
            title='Running', type='event',
            event_date=today - timedelta(days=2), event_end_date=today + timedelta(days=2)
        )
        TestDataFactory.create_post(title='Next Month', type='event', event_date=today + timedelta(days=30))
        TestDataFactory.create_post(title='Article', type='article', event_date=today + timedelta(days=1))
        response = self.client.get('/api/v1/events/upcoming/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        titles = [row['title'] for row in response.data['results']]
        self.assertEqual(titles, ['Running', 'Next Month'])

    def test_top_attractions(self):
        TestDataFactory.create_post(title='Phewa Lake', type='explore', is_featured=True, view_count=10)
        TestDataFactory.create_post(title='Sarangkot', type='explore', is_featured=True, view_count=90)
        TestDataFactory.create_post(title='Not Featured', type='explore', view_count=500)
        response = self.client.get('/api/v1/attractions/top/?limit=5')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['title'] for row in response.data], ['Sarangkot', 'Phewa Lake'])


class PostEditorTests(APITestCase):
    """Test post writes and lifecycle"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        self.client.authenticate_user(self.editor)

    def test_create_post(self):
        response = self.client.post('/api/v1/posts/', {
            'title': 'Dashain Guide',
            'type': 'event',
            'short_description': '<b>Big</b> festival<script>alert(1)</script>',
            'content': {'blocks': [{'type': 'paragraph', 'text': 'Hello'}]},
            'event_date': '2026-10-01',
            'event_end_date': '2026-10-15',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['slug'], 'dashain-guide')
        self.assertEqual(response.data['status'], 'draft')
        self.assertIsNone(response.data['published_at'])
        self.assertNotIn('<script>', response.data['short_description'])
        self.assertEqual(response.data['author']['username'], self.editor.username)

    def test_event_end_before_start(self):
        response = self.client.post('/api/v1/posts/', {
            'title': 'Backwards',
            'type': 'event',
            'event_date': '2026-10-15',
            'event_end_date': '2026-10-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('event_end_date', response.data)

    def test_duplicate_titles_get_suffixed_slugs(self):
        first = self.client.post('/api/v1/posts/', {'title': 'Trek Notes'}, format='json')
        second = self.client.post('/api/v1/posts/', {'title': 'Trek Notes'}, format='json')
        self.assertEqual(first.data['slug'], 'trek-notes')
        self.assertEqual(second.data['slug'], 'trek-notes-2')

    def test_editor_sees_drafts(self):
        TestDataFactory.create_post(title='Draft One', status='draft', author=self.editor)
        TestDataFactory.create_post(title='Live One')
        response = self.client.get('/api/v1/posts/?status=draft')
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['title'], 'Draft One')

    def test_publish_sets_published_at(self):
        post = TestDataFactory.create_post(title='Soon', status='draft', author=self.editor)
        response = self.client.post(f'/api/v1/posts/{post.id}/publish/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        post.refresh_from_db()
        self.assertEqual(post.status, 'published')
        self.assertIsNotNone(post.published_at)

    def test_cannot_edit_foreign_post(self):
        other = TestDataFactory.create_editor()
        post = TestDataFactory.create_post(title='Theirs', author=other)
        response = self.client.patch(f'/api/v1/posts/{post.slug}/', {'title': 'Mine now'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_own_post(self):
        post = TestDataFactory.create_post(title='Original', author=self.editor)
        response = self.client.patch(f'/api/v1/posts/{post.slug}/', {'title': 'Edited'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'Edited')
        self.assertEqual(response.data['slug'], 'original')

    def test_soft_delete_and_trash(self):
        post = TestDataFactory.create_post(title='Old', author=self.editor)
        response = self.client.delete(f'/api/v1/posts/{post.slug}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertTrue(Post.objects.filter(pk=post.pk).exists())

        response = self.client.get('/api/v1/posts/trash/')
        self.assertEqual(response.data['count'], 1)

        response = self.client.post(f'/api/v1/posts/{post.id}/restore/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['deleted_at'])

    def test_hard_delete_requires_admin(self):
        post = TestDataFactory.create_post(title='Gone', author=self.editor)
        post.soft_delete()
        response = self.client.delete(f'/api/v1/posts/{post.id}/hard-delete/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.delete(f'/api/v1/posts/{post.id}/hard-delete/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Post.objects.filter(pk=post.pk).exists())


class VideoTests(APITestCase):
    """Test video endpoints"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()

    def test_create_derives_platform_id_and_thumbnail(self):
        self.client.authenticate_user(self.editor)
        response = self.client.post('/api/v1/videos/', {
            'title': 'Kathmandu Durbar Square',
            'video_url': 'https://youtu.be/dQw4w9WgXcQ',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['platform'], 'youtube')
        self.assertEqual(response.data['video_id'], 'dQw4w9WgXcQ')
        self.assertEqual(response.data['thumbnail_url'], 'https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg')

    def test_unknown_platform_rejected(self):
        self.client.authenticate_user(self.editor)
        response = self.client.post('/api/v1/videos/', {
            'title': 'Mystery',
            'video_url': 'https://example.com/clip.mp4',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('platform', response.data)

    def test_unparseable_url_rejected(self):
        self.client.authenticate_user(self.editor)
        response = self.client.post('/api/v1/videos/', {
            'title': 'Broken',
            'video_url': 'https://vimeo.com/about',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('video_url', response.data)

    def test_url_change_switches_platform(self):
        video = TestDataFactory.create_video(author=self.editor)
        self.client.authenticate_user(self.editor)
        response = self.client.patch(f'/api/v1/videos/{video.id}/', {'video_url': 'https://vimeo.com/123456'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['platform'], 'vimeo')
        self.assertEqual(response.data['video_id'], '123456')
        self.assertEqual(response.data['thumbnail_url'], '')

    def test_url_change_refreshes_derived_thumbnail_only(self):
        derived = TestDataFactory.create_video(author=self.editor)
        custom = TestDataFactory.create_video(author=self.editor, title='Custom Thumb')
        custom.thumbnail_url = 'https://cdn.example.com/poster.jpg'
        custom.save()
        self.client.authenticate_user(self.editor)

        response = self.client.patch(f'/api/v1/videos/{derived.id}/', {'video_url': 'https://youtu.be/dQw4w9WgXcQ'}, format='json')
        self.assertEqual(response.data['thumbnail_url'], 'https://img.youtube.com/vi/dQw4w9WgXcQ/hqdefault.jpg')
        response = self.client.patch(f'/api/v1/videos/{custom.id}/', {'video_url': 'https://youtu.be/dQw4w9WgXcQ'}, format='json')
        self.assertEqual(response.data['thumbnail_url'], 'https://cdn.example.com/poster.jpg')

    def test_by_slug(self):
        TestDataFactory.create_video(title='Rara Lake')
        response = self.client.get('/api/v1/videos/by-slug/rara-lake/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['title'], 'Rara Lake')

    def test_filter_by_platform(self):
        TestDataFactory.create_video(title='Tube')
        response = self.client.get('/api/v1/videos/?platform=vimeo')
        self.assertEqual(response.data['count'], 0)
        response = self.client.get('/api/v1/videos/?platform=youtube')
        self.assertEqual(response.data['count'], 1)


class PhotoFeatureTests(APITestCase):
    """Test photo galleries and their image lists"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        self.feature = TestDataFactory.create_photo(title='Holi Colours', author=self.editor, images=2)

    def test_list_has_cover_and_count(self):
        response = self.client.get('/api/v1/photos/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        row = response.data['results'][0]
        self.assertEqual(row['image_count'], 2)
        first = self.feature.images.order_by('display_order').first()
        self.assertEqual(row['cover_image'], first.image_url)

    def test_detail_includes_images(self):
        response = self.client.get('/api/v1/photos/by-slug/holi-colours/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['images']), 2)

    def test_append_image_goes_last(self):
        self.client.authenticate_user(self.editor)
        response = self.client.post(f'/api/v1/photos/{self.feature.id}/images/', {
            'image_url': 'https://cdn.example.com/new.jpg',
            'caption': 'Crowd',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['display_order'], 2)

        response = self.client.get(f'/api/v1/photos/{self.feature.id}/images/')
        self.assertEqual(response.data[-1]['caption'], 'Crowd')

    def test_anonymous_cannot_append(self):
        response = self.client.post(f'/api/v1/photos/{self.feature.id}/images/', {
            'image_url': 'https://cdn.example.com/new.jpg',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_reorder_images(self):
        self.client.authenticate_user(self.editor)
        first, second = list(self.feature.images.order_by('display_order'))
        response = self.client.put(f'/api/v1/photos/{self.feature.id}/images/reorder/', {
            'orders': [
                {'id': str(first.id), 'display_order': 1},
                {'id': str(second.id), 'display_order': 0},
            ]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [str(second.id), str(first.id)])

    def test_reorder_rejects_foreign_images(self):
        self.client.authenticate_user(self.editor)
        other = TestDataFactory.create_photo(title='Other', author=self.editor, images=1)
        foreign = other.images.first()
        own = self.feature.images.first()
        response = self.client.put(f'/api/v1/photos/{self.feature.id}/images/reorder/', {
            'orders': [
                {'id': str(own.id), 'display_order': 5},
                {'id': str(foreign.id), 'display_order': 6},
            ]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['ids'], [str(foreign.id)])
        own.refresh_from_db()
        self.assertNotEqual(own.display_order, 5)

    def test_delete_image(self):
        self.client.authenticate_user(self.editor)
        image = self.feature.images.first()
        response = self.client.delete(f'/api/v1/photos/{self.feature.id}/images/{image.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PhotoImage.objects.filter(pk=image.pk).exists())

    def test_update_caption(self):
        self.client.authenticate_user(self.editor)
        image = self.feature.images.first()
        response = self.client.patch(
            f'/api/v1/photos/{self.feature.id}/images/{image.id}/', {'caption': 'Gulal'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['caption'], 'Gulal')
