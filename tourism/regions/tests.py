"""
Test suite for the regions module
Tests: Listing, Detail, Create/Update, Lifecycle (status, featured, trash, restore, hard delete)
"""
from rest_framework import status

from tourism.core.models import AuditLog
from tourism.core.test_utils import TestDataFactory, AuthenticatedAPIClient, APITestCase
from tourism.links.models import ContentLink
from tourism.regions.models import Region


class RegionPublicTests(APITestCase):
    """Test public region endpoints"""

    def test_list_only_published(self):
        TestDataFactory.create_region(name='Pokhara')
        TestDataFactory.create_region(name='Hidden Valley', status='draft')
        response = self.client.get('/api/v1/regions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['name'], 'Pokhara')

    def test_ranked_regions_first(self):
        TestDataFactory.create_region(name='Alpha')
        TestDataFactory.create_region(name='Zeta', attraction_rank=1)
        response = self.client.get('/api/v1/regions/')
        names = [row['name'] for row in response.data['results']]
        self.assertEqual(names, ['Zeta', 'Alpha'])

    def test_filter_by_province(self):
        TestDataFactory.create_region(name='Pokhara', province='Gandaki')
        TestDataFactory.create_region(name='Chitwan', province='Bagmati')
        response = self.client.get('/api/v1/regions/?province=gandaki')
        self.assertEqual(response.data['count'], 1)

    def test_detail_by_slug(self):
        TestDataFactory.create_region(name='Mustang')
        response = self.client.get('/api/v1/regions/mustang/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Mustang')

    def test_draft_detail_hidden(self):
        TestDataFactory.create_region(name='Secret', status='draft')
        response = self.client.get('/api/v1/regions/secret/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_attractions(self):
        region = TestDataFactory.create_region(name='Pokhara')
        TestDataFactory.create_post(title='Phewa Lake', type='explore', region=region)
        TestDataFactory.create_post(title='Lake Blog', type='article', region=region)
        response = self.client.get('/api/v1/regions/pokhara/attractions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['region']['name'], 'Pokhara')

    def test_anonymous_cannot_create(self):
        response = self.client.post('/api/v1/regions/', {'name': 'Nowhere'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class RegionEditorTests(APITestCase):
    """Test region writes by editors and admins"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        self.client.authenticate_user(self.editor)

    def test_create_region(self):
        response = self.client.post('/api/v1/regions/', {
            'name': 'Annapurna Region',
            'description': '<p>Mountains</p><script>x()</script>',
            'latitude': '28.596',
            'longitude': '83.820',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['slug'], 'annapurna-region')
        self.assertEqual(response.data['status'], 'draft')
        self.assertNotIn('<script>', response.data['description'])
        region = Region.objects.get(slug='annapurna-region')
        self.assertEqual(region.author, self.editor)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Region').exists())

    def test_invalid_latitude(self):
        response = self.client.post('/api/v1/regions/', {'name': 'Bad', 'latitude': '123.0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('latitude', response.data)

    def test_unapproved_editor_cannot_create(self):
        client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_user())
        response = client.post('/api/v1/regions/', {'name': 'Nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_editor_sees_drafts(self):
        TestDataFactory.create_region(name='Draft Region', status='draft', author=self.editor)
        response = self.client.get('/api/v1/regions/?status=draft')
        self.assertEqual(response.data['count'], 1)

    def test_update_own_region(self):
        TestDataFactory.create_region(name='Lumbini', author=self.editor)
        response = self.client.patch('/api/v1/regions/lumbini/', {'district': 'Rupandehi'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['district'], 'Rupandehi')

    def test_cannot_update_foreign_region(self):
        TestDataFactory.create_region(name='Lumbini', author=TestDataFactory.create_editor())
        response = self.client.patch('/api/v1/regions/lumbini/', {'district': 'Rupandehi'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_status_change_publishes(self):
        region = TestDataFactory.create_region(name='Draft', status='draft', author=self.editor)
        response = self.client.patch(f'/api/v1/regions/{region.pk}/status/', {'status': 'published'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        region.refresh_from_db()
        self.assertEqual(region.status, 'published')
        self.assertIsNotNone(region.published_at)

    def test_invalid_status(self):
        region = TestDataFactory.create_region(author=self.editor)
        response = self.client.patch(f'/api/v1/regions/{region.pk}/status/', {'status': 'archived'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_featured_toggle(self):
        region = TestDataFactory.create_region(author=self.editor)
        response = self.client.patch(f'/api/v1/regions/{region.pk}/featured/', {}, format='json')
        self.assertTrue(response.data['is_featured'])
        response = self.client.patch(f'/api/v1/regions/{region.pk}/featured/', {'is_featured': False}, format='json')
        self.assertFalse(response.data['is_featured'])

    def test_display_order_required(self):
        region = TestDataFactory.create_region(author=self.editor)
        response = self.client.patch(f'/api/v1/regions/{region.pk}/display-order/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.patch(f'/api/v1/regions/{region.pk}/display-order/', {'display_order': 3}, format='json')
        self.assertEqual(response.data['display_order'], 3)

    def test_trash_and_restore(self):
        region = TestDataFactory.create_region(name='Gorkha', author=self.editor)
        response = self.client.delete('/api/v1/regions/gorkha/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get('/api/v1/regions/trash/').data['count'], 1)

        # Slug is taken while the original is in the trash
        TestDataFactory.create_region(name='Gorkha')
        response = self.client.post(f'/api/v1/regions/{region.pk}/restore/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['slug'], 'gorkha-2')

    def test_restore_requires_trashed_row(self):
        region = TestDataFactory.create_region(author=self.editor)
        response = self.client.post(f'/api/v1/regions/{region.pk}/restore/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_hard_delete_admin_only(self):
        region = TestDataFactory.create_region(author=self.editor)
        region.soft_delete()
        response = self.client.delete(f'/api/v1/regions/{region.pk}/hard-delete/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_hard_delete_purges_references(self):
        region = TestDataFactory.create_region()
        photo = TestDataFactory.create_photo()
        ContentLink.objects.create(source_type='region', source_id=region.pk, target_type='photo', target_id=photo.pk)
        admin_client = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_admin())

        response = admin_client.delete(f'/api/v1/regions/{region.pk}/hard-delete/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        region.soft_delete()
        response = admin_client.delete(f'/api/v1/regions/{region.pk}/hard-delete/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Region.objects.filter(pk=region.pk).exists())
        self.assertFalse(ContentLink.objects.exists())
