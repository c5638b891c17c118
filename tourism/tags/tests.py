"""
Test suite for the tags module
Tests: Tag CRUD, Search, Counts, Item tag sets (by id and by name), Tagged content
"""
from unittest import mock

from rest_framework import status
from rest_framework.throttling import SimpleRateThrottle

from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.tags.models import Tag, ContentTag


class TagTests(APITestCase):
    """Test the tag catalogue"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()

    def test_create_tag(self):
        self.client.authenticate_user(self.editor)
        response = self.client.post('/api/v1/tags/', {'name': 'White Water Rafting', 'tag_type': 'activity'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['slug'], 'white-water-rafting')
        self.assertEqual(response.data['usage_count'], 0)

    def test_duplicate_name_case_insensitive(self):
        Tag.objects.create(name='Trekking')
        self.client.authenticate_user(self.editor)
        response = self.client.post('/api/v1/tags/', {'name': 'trekking'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name', response.data)

    def test_anonymous_cannot_create(self):
        response = self.client.post('/api/v1/tags/', {'name': 'Nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    @mock.patch.dict(SimpleRateThrottle.THROTTLE_RATES, {'write': '1/min'})
    def test_dashboard_writes_are_throttled(self):
        self.client.authenticate_user(self.editor)
        self.assertEqual(self.client.post('/api/v1/tags/', {'name': 'Yoga'}, format='json').status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/tags/', {'name': 'Meditation'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(self.client.get('/api/v1/tags/').status_code, status.HTTP_200_OK)

    def test_list_with_usage_counts(self):
        tag = Tag.objects.create(name='Culture', tag_type='category')
        Tag.objects.create(name='Wildlife')
        post = TestDataFactory.create_post()
        ContentTag.objects.create(tag=tag, target_type='post', target_id=post.id)
        response = self.client.get('/api/v1/tags/?tag_type=category')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['usage_count'], 1)

    def test_search_prefix_first(self):
        Tag.objects.create(name='Mountain Biking')
        Tag.objects.create(name='Biking')
        Tag.objects.create(name='Kayaking')
        response = self.client.get('/api/v1/tags/search/?q=bik')
        self.assertEqual([row['name'] for row in response.data['results']], ['Biking', 'Mountain Biking'])

    def test_search_empty_query(self):
        response = self.client.get('/api/v1/tags/search/?q=')
        self.assertEqual(response.data, {'results': []})

    def test_count_by_type(self):
        Tag.objects.create(name='Hiking', tag_type='activity')
        Tag.objects.create(name='Temples', tag_type='category')
        Tag.objects.create(name='Misc')
        response = self.client.get('/api/v1/tags/count/')
        self.assertEqual(response.data, {'total': 3, 'by_type': {'activity': 1, 'category': 1, 'general': 1}})

    def test_by_slug_and_rename(self):
        tag = Tag.objects.create(name='Festivals')
        response = self.client.get('/api/v1/tags/by-slug/festivals/')
        self.assertEqual(response.data['id'], str(tag.id))

        self.client.authenticate_user(self.editor)
        response = self.client.patch(f'/api/v1/tags/{tag.id}/', {'name': 'Festivals and Jatras'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['slug'], 'festivals')

    def test_delete_removes_assignments(self):
        tag = Tag.objects.create(name='Old')
        post = TestDataFactory.create_post()
        ContentTag.objects.create(tag=tag, target_type='post', target_id=post.id)
        self.client.authenticate_user(self.editor)
        response = self.client.delete(f'/api/v1/tags/{tag.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(ContentTag.objects.exists())


class ContentTagTests(APITestCase):
    """Test tag sets of individual items"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        self.client.authenticate_user(self.editor)
        self.post = TestDataFactory.create_post(title='Chitwan Safari', author=self.editor)
        self.wildlife = Tag.objects.create(name='Wildlife')
        self.jungle = Tag.objects.create(name='Jungle')

    def _url(self, suffix=''):
        return f'/api/v1/content/post/{self.post.id}/tags/{suffix}'

    def test_replace_by_ids(self):
        response = self.client.put(self._url(), {'tag_ids': [str(self.wildlife.id), str(self.jungle.id)]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([tag['name'] for tag in response.data['tags']], ['Jungle', 'Wildlife'])

        response = self.client.put(self._url(), {'tag_ids': [str(self.jungle.id)]}, format='json')
        self.assertEqual([tag['name'] for tag in response.data['tags']], ['Jungle'])
        self.assertEqual(ContentTag.objects.count(), 1)

    def test_unknown_tag_ids(self):
        missing = '00000000-0000-0000-0000-000000000000'
        response = self.client.put(self._url(), {'tag_ids': [str(self.jungle.id), missing]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['ids'], [missing])
        self.assertFalse(ContentTag.objects.exists())

    def test_invalid_target_type(self):
        response = self.client.get(f'/api/v1/content/region/{self.post.id}/tags/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_item(self):
        response = self.client.put(
            '/api/v1/content/post/00000000-0000-0000-0000-000000000000/tags/', {'tag_ids': []}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_other_editor_cannot_replace_tags(self):
        ContentTag.objects.create(tag=self.wildlife, target_type='post', target_id=self.post.id)
        self.client.authenticate_user(TestDataFactory.create_editor())
        response = self.client.put(self._url(), {'tag_ids': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.put(self._url('by-name/'), {'names': ['Spam']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(ContentTag.objects.count(), 1)
        self.assertFalse(Tag.objects.filter(name='Spam').exists())

    def test_draft_item_tags_hidden_from_public(self):
        draft = TestDataFactory.create_post(title='Unreleased', status='draft', author=self.editor)
        self.assertEqual(self.client.get(f'/api/v1/content/post/{draft.id}/tags/').status_code, status.HTTP_200_OK)
        self.client.logout()
        response = self.client.get(f'/api/v1/content/post/{draft.id}/tags/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_replace_by_name_creates_general_tags(self):
        response = self.client.put(self._url('by-name/'), {'names': ['wildlife', 'Elephants', 'elephants', '<b>Rhino</b>']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(tag['name'] for tag in response.data['tags']), ['Elephants', 'Rhino', 'Wildlife'])
        self.assertEqual(Tag.objects.get(name='Elephants').tag_type, 'general')
        self.assertEqual(Tag.objects.count(), 4)

    def test_tagged_content_lists_published_items(self):
        hidden = TestDataFactory.create_post(title='Hidden', status='draft')
        ContentTag.objects.create(tag=self.wildlife, target_type='post', target_id=self.post.id)
        ContentTag.objects.create(tag=self.wildlife, target_type='post', target_id=hidden.id)
        self.client.logout()
        response = self.client.get(f'/api/v1/tags/{self.wildlife.id}/content/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['title'], 'Chitwan Safari')
        self.assertEqual(response.data['tag']['name'], 'Wildlife')
