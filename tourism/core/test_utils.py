"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from tourism.content.models import Post, Video, PhotoFeature, PhotoImage
from tourism.engagement.models import Comment
from tourism.hotels.models import Hotel, HotelBranch
from tourism.regions.models import Region
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='editor', is_approved=False,
                    is_superuser=False, **extra):
        """Create a test user (an unapproved editor by default)"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_approved=is_approved,
            is_superuser=is_superuser,
            **extra
        )

    @staticmethod
    def create_admin(username=None, **extra):
        return TestDataFactory.create_user(username=username, role='admin', is_approved=True, **extra)

    @staticmethod
    def create_editor(username=None, **extra):
        """Create an approved editor"""
        return TestDataFactory.create_user(username=username, role='editor', is_approved=True, **extra)

    @staticmethod
    def create_region(name=None, author=None, status='published', **extra):
        if not name:
            name = f'Region {TestDataFactory.random_string(6)}'
        return Region.objects.create(name=name, author=author, status=status, **extra)

    @staticmethod
    def create_post(title=None, author=None, type='article', status='published', region=None, **extra):
        if not title:
            title = f'Post {TestDataFactory.random_string(6)}'
        return Post.objects.create(title=title, author=author, type=type, status=status, region=region, **extra)

    @staticmethod
    def create_video(title=None, author=None, status='published', video_id=None, **extra):
        if not title:
            title = f'Video {TestDataFactory.random_string(6)}'
        if not video_id:
            video_id = TestDataFactory.random_string(11)
        return Video.objects.create(
            title=title,
            author=author,
            status=status,
            platform='youtube',
            video_url=f'https://www.youtube.com/watch?v={video_id}',
            video_id=video_id,
            thumbnail_url=f'https://img.youtube.com/vi/{video_id}/hqdefault.jpg',
            **extra
        )

    @staticmethod
    def create_photo(title=None, author=None, status='published', images=0, **extra):
        """Create a photo feature with `images` gallery images"""
        if not title:
            title = f'Gallery {TestDataFactory.random_string(6)}'
        feature = PhotoFeature.objects.create(title=title, author=author, status=status, **extra)
        for index in range(images):
            TestDataFactory.create_photo_image(feature, display_order=index)
        return feature

    @staticmethod
    def create_photo_image(feature, display_order=0, image_url=None):
        if not image_url:
            image_url = f'https://cdn.example.com/{TestDataFactory.random_string(8)}.jpg'
        return PhotoImage.objects.create(feature=feature, image_url=image_url, display_order=display_order)

    @staticmethod
    def create_hotel(name=None, author=None, status='published', **extra):
        if not name:
            name = f'Hotel {TestDataFactory.random_string(6)}'
        return Hotel.objects.create(name=name, author=author, status=status, **extra)

    @staticmethod
    def create_branch(hotel, name=None, is_main=False, **extra):
        if not name:
            name = f'Branch {TestDataFactory.random_string(6)}'
        return HotelBranch.objects.create(hotel=hotel, name=name, is_main=is_main, **extra)

    @staticmethod
    def create_comment(target_type, target_id, status='approved', parent=None, content=None, guest_name='Guest'):
        return Comment.objects.create(
            target_type=target_type,
            target_id=target_id,
            parent=parent,
            guest_name=guest_name,
            guest_email='guest@test.com',
            content=content or f'Comment {TestDataFactory.random_string(8)}',
            status=status,
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()


class APITestCase(TestCase):
    """TestCase with an empty cache and an unauthenticated API client"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
