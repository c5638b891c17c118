"""
Test suite for the hotels module
Tests: Listing filters, Detail, Create/Update validation, Branches (main branch handling)
"""
from rest_framework import status

from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.hotels.models import HotelBranch


class HotelPublicTests(APITestCase):
    """Test public hotel endpoints"""

    def test_list_only_published(self):
        TestDataFactory.create_hotel(name='Hotel Yak & Yeti')
        TestDataFactory.create_hotel(name='Unlisted Inn', status='draft')
        response = self.client.get('/api/v1/hotels/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)

    def test_filter_by_price_and_stars(self):
        TestDataFactory.create_hotel(name='Backpackers', price_range='budget', star_rating=2)
        TestDataFactory.create_hotel(name='Dwarika', price_range='luxury', star_rating=5)
        TestDataFactory.create_hotel(name='Middle', price_range='mid', star_rating=3)

        response = self.client.get('/api/v1/hotels/?price_range=luxury')
        self.assertEqual([row['name'] for row in response.data['results']], ['Dwarika'])

        response = self.client.get('/api/v1/hotels/?min_stars=3')
        self.assertEqual(response.data['count'], 2)

    def test_search_matches_branch_address(self):
        hotel = TestDataFactory.create_hotel(name='Temple Tree')
        TestDataFactory.create_branch(hotel, name='Lakeside', address='Gaurighat, Lakeside, Pokhara')
        TestDataFactory.create_branch(hotel, name='Old Town', address='Lakeside Road 2')
        TestDataFactory.create_hotel(name='Elsewhere')
        response = self.client.get('/api/v1/hotels/?search=lakeside')
        self.assertEqual(response.data['count'], 1)

    def test_detail_by_slug_with_branches(self):
        hotel = TestDataFactory.create_hotel(name='Fishtail Lodge')
        TestDataFactory.create_branch(hotel, name='Annex')
        TestDataFactory.create_branch(hotel, name='Main House', is_main=True)
        response = self.client.get('/api/v1/hotels/by-slug/fishtail-lodge/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['name'] for row in response.data['branches']], ['Main House', 'Annex'])

    def test_branches_of_draft_hotel_hidden(self):
        hotel = TestDataFactory.create_hotel(name='Closed', status='draft')
        response = self.client.get(f'/api/v1/hotels/{hotel.id}/branches/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class HotelEditorTests(APITestCase):
    """Test hotel and branch writes"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()
        self.client.authenticate_user(self.editor)
        self.hotel = TestDataFactory.create_hotel(name='Kantipur Temple House', author=self.editor)

    def test_create_hotel(self):
        response = self.client.post('/api/v1/hotels/', {
            'name': 'Barahi Resort',
            'star_rating': 4,
            'price_range': 'mid',
            'amenities': [' Wifi ', 'Pool', ''],
            'gallery': ['https://cdn.example.com/a.jpg'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['slug'], 'barahi-resort')
        self.assertEqual(response.data['amenities'], ['Wifi', 'Pool'])

    def test_invalid_star_rating(self):
        response = self.client.post('/api/v1/hotels/', {'name': 'Too Good', 'star_rating': 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('star_rating', response.data)

    def test_invalid_gallery_url(self):
        response = self.client.post('/api/v1/hotels/', {'name': 'Bad Gallery', 'gallery': ['not a url']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('gallery', response.data)

    def test_add_branch(self):
        response = self.client.post(f'/api/v1/hotels/{self.hotel.id}/branches/', {
            'name': 'Thamel',
            'address': 'Thamel Marg',
            'coordinates': {'lat': '27.715', 'lng': '85.312'},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['coordinates'], {'lat': 27.715, 'lng': 85.312})

    def test_invalid_coordinates(self):
        response = self.client.post(f'/api/v1/hotels/{self.hotel.id}/branches/', {
            'name': 'Nowhere',
            'coordinates': {'lat': 120, 'lng': 85},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('coordinates', response.data)

    def test_single_main_branch(self):
        first = TestDataFactory.create_branch(self.hotel, name='First', is_main=True)
        response = self.client.post(f'/api/v1/hotels/{self.hotel.id}/branches/', {
            'name': 'Second',
            'is_main': True,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        first.refresh_from_db()
        self.assertFalse(first.is_main)
        self.assertEqual(HotelBranch.objects.filter(hotel=self.hotel, is_main=True).count(), 1)

    def test_update_and_delete_branch(self):
        branch = TestDataFactory.create_branch(self.hotel, name='Patan')
        url = f'/api/v1/hotels/{self.hotel.id}/branches/{branch.id}/'
        response = self.client.patch(url, {'phone': '01-5555555'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['phone'], '01-5555555')

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(HotelBranch.objects.filter(pk=branch.pk).exists())

    def test_foreign_editor_cannot_add_branch(self):
        self.client.authenticate_user(TestDataFactory.create_editor())
        response = self.client.post(f'/api/v1/hotels/{self.hotel.id}/branches/', {'name': 'Sneaky'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_featured_toggle(self):
        response = self.client.patch(f'/api/v1/hotels/{self.hotel.id}/featured/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_featured'])
