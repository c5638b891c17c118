"""
Test suite for the media module
Tests: Upload validation, Library list, Gallery, Detail, Ownership, Storage cleanup, Upload throttle
"""
import io
import os
import shutil
import tempfile
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from PIL import Image
from rest_framework import status
from rest_framework.throttling import SimpleRateThrottle

from tourism.core.test_utils import TestDataFactory, APITestCase
from tourism.media.models import MediaFile
from tourism.notifications.models import Notification

TEMP_MEDIA_ROOT = tempfile.mkdtemp()


def make_image(name='phewa.png', size=(4, 3), fmt='PNG', content_type='image/png'):
    buffer = io.BytesIO()
    Image.new('RGB', size, color=(20, 120, 200)).save(buffer, fmt)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


def create_media(uploaded_by=None, **extra):
    defaults = {
        'file': f'uploads/2026/01/{TestDataFactory.random_string(8)}.jpg',
        'original_name': 'stock.jpg',
        'mime_type': 'image/jpeg',
        'size': 2048,
        'width': 800,
        'height': 600,
    }
    defaults.update(extra)
    return MediaFile.objects.create(uploaded_by=uploaded_by, **defaults)


@override_settings(MEDIA_ROOT=TEMP_MEDIA_ROOT)
class MediaTestCase(APITestCase):
    """Stores uploads in a temporary directory that is removed afterwards"""

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(TEMP_MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()


class MediaUploadTests(MediaTestCase):
    """Test uploads into the media library"""

    def setUp(self):
        super().setUp()
        self.admin = TestDataFactory.create_admin()
        self.editor = TestDataFactory.create_editor()

    def _upload(self, upload=None, **fields):
        return self.client.post('/api/v1/media/', {'file': upload or make_image(), **fields}, format='multipart')

    def test_upload_image(self):
        self.client.authenticate_user(self.editor)
        response = self._upload(alt='<b>Phewa</b> lake', caption='Morning boats')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['width'], 4)
        self.assertEqual(response.data['height'], 3)
        self.assertEqual(response.data['mime_type'], 'image/png')
        self.assertEqual(response.data['media_type'], 'image')
        self.assertEqual(response.data['original_name'], 'phewa.png')
        self.assertEqual(response.data['alt'], 'Phewa lake')
        self.assertEqual(response.data['uploaded_by']['username'], self.editor.username)
        self.assertIn('/media/uploads/', response.data['url'])

        media = MediaFile.objects.get(pk=response.data['id'])
        self.assertGreater(media.size, 0)
        self.assertTrue(os.path.exists(media.file.path))

    def test_upload_notifies_admins(self):
        self.client.authenticate_user(self.editor)
        self._upload()
        notification = Notification.objects.get(recipient=self.admin)
        self.assertEqual(notification.title, 'New Media Uploaded')
        self.assertIn('phewa.png', notification.message)

    def test_admin_upload_sends_no_notification(self):
        self.client.authenticate_user(self.admin)
        self.assertEqual(self._upload().status_code, status.HTTP_201_CREATED)
        self.assertFalse(Notification.objects.exists())

    def test_rejects_unsupported_type(self):
        self.client.authenticate_user(self.editor)
        upload = make_image(name='scan.bmp', fmt='BMP', content_type='image/bmp')
        response = self._upload(upload)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('file', response.data)
        self.assertFalse(MediaFile.objects.exists())

    def test_rejects_file_that_is_not_an_image(self):
        self.client.authenticate_user(self.editor)
        upload = SimpleUploadedFile('notes.png', b'plain text', content_type='image/png')
        response = self._upload(upload)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('file', response.data)

    @mock.patch('tourism.media.serializers.MAX_UPLOAD_SIZE', 10)
    def test_rejects_oversized_file(self):
        self.client.authenticate_user(self.editor)
        response = self._upload()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Maximum size', str(response.data['file'][0]))

    def test_anonymous_cannot_upload(self):
        self.assertEqual(self._upload().status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unapproved_editor_cannot_upload(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        self.assertEqual(self._upload().status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(MediaFile.objects.exists())

    @mock.patch.dict(SimpleRateThrottle.THROTTLE_RATES, {'upload': '1/min'})
    def test_uploads_are_throttled(self):
        self.client.authenticate_user(self.editor)
        self.assertEqual(self._upload().status_code, status.HTTP_201_CREATED)
        self.assertEqual(self._upload().status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(self.client.get('/api/v1/media/').status_code, status.HTTP_200_OK)
        self.assertEqual(MediaFile.objects.count(), 1)


class MediaLibraryTests(MediaTestCase):
    """Test listing, the public gallery and per-file access"""

    def setUp(self):
        super().setUp()
        self.editor = TestDataFactory.create_editor()

    def test_list_filters_by_media_type(self):
        create_media(original_name='a.jpg')
        create_media(original_name='b.jpg')
        create_media(original_name='brochure.pdf', media_type='document', mime_type='application/pdf')
        response = self.client.get('/api/v1/media/?media_type=image&limit=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['page_size'], 1)
        self.assertEqual(len(response.data['results']), 1)

        response = self.client.get('/api/v1/media/')
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(response.data['page_size'], 20)

    def test_gallery_shows_images_only(self):
        create_media(original_name='lake.jpg', is_featured=True)
        create_media(original_name='street.jpg')
        create_media(original_name='brochure.pdf', media_type='document', mime_type='application/pdf')
        response = self.client.get('/api/v1/media/gallery/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(row['original_name'] for row in response.data['results']), ['lake.jpg', 'street.jpg'])

        response = self.client.get('/api/v1/media/gallery/?featured=true')
        self.assertEqual([row['original_name'] for row in response.data['results']], ['lake.jpg'])

    def test_get_by_id(self):
        media = create_media(uploaded_by=self.editor, alt='Annapurna at dawn')
        response = self.client.get(f'/api/v1/media/{media.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['alt'], 'Annapurna at dawn')
        self.assertEqual(response.data['width'], 800)

    def test_missing_media(self):
        response = self.client.get('/api/v1/media/00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_uploader_edits_alt_text(self):
        media = create_media(uploaded_by=self.editor)
        self.client.authenticate_user(self.editor)
        response = self.client.patch(f'/api/v1/media/{media.id}/', {'alt': 'Boudha stupa', 'is_featured': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        media.refresh_from_db()
        self.assertEqual(media.alt, 'Boudha stupa')
        self.assertTrue(media.is_featured)

    def test_other_editor_cannot_delete(self):
        media = create_media(uploaded_by=self.editor)
        self.client.authenticate_user(TestDataFactory.create_editor())
        response = self.client.delete(f'/api/v1/media/{media.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.patch(f'/api/v1/media/{media.id}/', {'alt': 'Spam'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(MediaFile.objects.filter(pk=media.pk).exists())

    def test_admin_can_delete_any(self):
        media = create_media(uploaded_by=self.editor)
        self.client.authenticate_user(TestDataFactory.create_admin())
        self.assertEqual(self.client.delete(f'/api/v1/media/{media.id}/').status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(MediaFile.objects.exists())

    def test_delete_removes_stored_file(self):
        self.client.authenticate_user(self.editor)
        response = self.client.post('/api/v1/media/', {'file': make_image()}, format='multipart')
        path = MediaFile.objects.get(pk=response.data['id']).file.path
        self.assertTrue(os.path.exists(path))

        response = self.client.delete(f"/api/v1/media/{response.data['id']}/")
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(os.path.exists(path))

    def test_storage_failure_is_logged_and_row_deleted(self):
        media = create_media(uploaded_by=self.editor)
        self.client.authenticate_user(self.editor)
        with mock.patch('django.core.files.storage.FileSystemStorage.delete', side_effect=OSError('read-only')):
            with self.assertLogs('tourism.media', level='WARNING') as logs:
                response = self.client.delete(f'/api/v1/media/{media.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(MediaFile.objects.exists())
        self.assertIn('read-only', logs.output[0])
