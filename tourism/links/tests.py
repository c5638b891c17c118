"""
Test suite for the links module
Tests: Create, Resolve targets, Reorder, Replace set, Reverse lookup
"""
from rest_framework import status

from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.links.models import ContentLink


class ContentLinkTests(APITestCase):
    """Test related-content links of posts and regions"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        self.client.authenticate_user(self.editor)
        self.region = TestDataFactory.create_region(name='Ilam', author=self.editor)
        self.video = TestDataFactory.create_video(title='Tea Gardens')
        self.photo = TestDataFactory.create_photo(title='Ilam Hills', images=1)

    def _create(self, **overrides):
        data = {
            'source_type': 'region',
            'source_id': str(self.region.id),
            'target_type': 'video',
            'target_id': str(self.video.id),
        }
        data.update(overrides)
        return self.client.post('/api/v1/content-links/', data, format='json')

    def test_create_appends(self):
        first = self._create()
        second = self._create(target_type='photo', target_id=str(self.photo.id))
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data['display_order'], 0)
        self.assertEqual(second.data['display_order'], 1)
        self.assertEqual(first.data['target']['title'], 'Tea Gardens')
        self.assertFalse(first.data['target']['missing'])

    def test_duplicate_rejected(self):
        self._create()
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(ContentLink.objects.count(), 1)

    def test_self_link_rejected(self):
        post = TestDataFactory.create_post(author=self.editor)
        response = self._create(source_type='post', source_id=str(post.id), target_type='post', target_id=str(post.id))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('target_id', response.data)

    def test_missing_target_rejected(self):
        response = self._create(target_id='00000000-0000-0000-0000-000000000000')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_public_list_flags_hidden_targets(self):
        self._create()
        self.video.set_status('draft')
        self.client.logout()
        response = self.client.get(f'/api/v1/content-links/region/{self.region.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['results'][0]['target']['missing'])

    def test_unknown_source_type(self):
        response = self.client.get(f'/api/v1/content-links/hotel/{self.region.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_order(self):
        link = self._create().data
        response = self.client.patch(f"/api/v1/content-links/by-id/{link['id']}/", {'display_order': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['display_order'], 7)

    def test_replace_set(self):
        self._create()
        response = self.client.put(f'/api/v1/content-links/region/{self.region.id}/', {
            'links': [
                {'target_type': 'photo', 'target_id': str(self.photo.id)},
                {'target_type': 'video', 'target_id': str(self.video.id), 'display_order': 5},
            ]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data['results']
        self.assertEqual([row['target_type'] for row in results], ['photo', 'video'])
        self.assertEqual([row['display_order'] for row in results], [0, 5])
        self.assertEqual(ContentLink.objects.count(), 2)

    def test_replace_set_rejects_duplicates(self):
        response = self.client.put(f'/api/v1/content-links/region/{self.region.id}/', {
            'links': [
                {'target_type': 'video', 'target_id': str(self.video.id)},
                {'target_type': 'video', 'target_id': str(self.video.id)},
            ]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_replace_set_missing_source(self):
        response = self.client.put('/api/v1/content-links/post/00000000-0000-0000-0000-000000000000/', {
            'links': []
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_clear_set_and_count(self):
        self._create()
        self._create(target_type='photo', target_id=str(self.photo.id))
        response = self.client.get(f'/api/v1/content-links/region/{self.region.id}/count/')
        self.assertEqual(response.data, {'count': 2})

        response = self.client.delete(f'/api/v1/content-links/region/{self.region.id}/')
        self.assertEqual(response.data, {'deleted': 2})
        self.assertFalse(ContentLink.objects.exists())

    def test_reverse_lookup(self):
        self._create()
        response = self.client.get(f'/api/v1/content-links/target/video/{self.video.id}/')
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['source_title'], 'Ilam')

    def test_anonymous_cannot_create(self):
        self.client.logout()
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_other_editor_cannot_change_links(self):
        link = self._create().data
        self.client.authenticate_user(TestDataFactory.create_editor())

        response = self._create(target_type='photo', target_id=str(self.photo.id))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.put(f'/api/v1/content-links/region/{self.region.id}/', {'links': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.delete(f'/api/v1/content-links/region/{self.region.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.patch(f"/api/v1/content-links/by-id/{link['id']}/", {'display_order': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.delete(f"/api/v1/content-links/by-id/{link['id']}/")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(ContentLink.objects.count(), 1)

    def test_admin_can_change_any_links(self):
        self._create()
        self.client.authenticate_user(TestDataFactory.create_admin())
        response = self.client.put(f'/api/v1/content-links/region/{self.region.id}/', {'links': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ContentLink.objects.exists())

    def test_draft_source_hidden_from_public(self):
        draft = TestDataFactory.create_post(title='Secret Trek', status='draft', author=self.editor)
        self._create(source_type='post', source_id=str(draft.id))
        self._create()
        self.client.logout()

        response = self.client.get(f'/api/v1/content-links/target/video/{self.video.id}/')
        self.assertEqual([row['source_title'] for row in response.data['results']], ['Ilam'])
        response = self.client.get(f'/api/v1/content-links/post/{draft.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get(f'/api/v1/content-links/post/{draft.id}/count/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
