"""
Django management command to check the cache configuration.

Usage:
    python manage.py check_cache
    python manage.py check_cache --flush-tags
"""
from django.core.management.base import BaseCommand
from django.core.cache import cache
from django.conf import settings

from tourism.core.cache_utils import ALL_TAGS, build_tagged_key, get_tag_versions, invalidate_tags


class Command(BaseCommand):
    help = 'Check the cache backend and the tag-versioned response keys'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush-tags',
            action='store_true',
            help='Invalidate every cache tag (drops all cached public responses)',
        )

    def handle(self, *args, **options):
        self.stdout.write("=" * 60)
        self.stdout.write(self.style.SUCCESS("Cache Configuration Check"))
        self.stdout.write("=" * 60)

        self.stdout.write(f"\n1. Cache Backend: {settings.CACHES['default']['BACKEND']}")
        self.stdout.write(f"2. Cache Location: {settings.CACHES['default'].get('LOCATION', 'N/A')}")

        self.stdout.write("\n3. Testing Cache Operations:")
        self.stdout.write("-" * 60)

        try:
            cache.set('check_cache_key', 'check_value', 60)
            self.stdout.write(self.style.SUCCESS("Cache SET: Success"))

            value = cache.get('check_cache_key')
            if value == 'check_value':
                self.stdout.write(self.style.SUCCESS("Cache GET: Success (value matches)"))
            else:
                self.stdout.write(self.style.ERROR(f"Cache GET: Failed (got: {value})"))

            cache.delete('check_cache_key')
            if cache.get('check_cache_key') is None:
                self.stdout.write(self.style.SUCCESS("Cache DELETE: Success"))
            else:
                self.stdout.write(self.style.ERROR("Cache DELETE: Failed"))

            self.stdout.write("\n4. Testing Tag Invalidation:")
            self.stdout.write("-" * 60)

            key_before = build_tagged_key('check_cache', ['CacheCheck'])
            cache.set(key_before, {'ok': True}, 60)
            invalidate_tags('CacheCheck', notify=False)
            key_after = build_tagged_key('check_cache', ['CacheCheck'])
            if key_before != key_after and cache.get(key_after) is None:
                self.stdout.write(self.style.SUCCESS("Tag invalidation: Success (old key unreachable)"))
            else:
                self.stdout.write(self.style.ERROR("Tag invalidation: Failed (key did not change)"))
            cache.delete(key_before)

            if options['flush_tags']:
                invalidate_tags(*ALL_TAGS)
                self.stdout.write(self.style.WARNING(f"Invalidated {len(ALL_TAGS)} tag(s)"))
            else:
                versions = dict(zip(ALL_TAGS, get_tag_versions(ALL_TAGS)))
                self.stdout.write(f"\n5. Tag versions ({len(versions)}):")
                for tag, version in versions.items():
                    self.stdout.write(f"   {tag}: {version}")

            self.stdout.write("\n" + "=" * 60)
            self.stdout.write(self.style.SUCCESS("ALL CHECKS PASSED - Cache is working!"))
            self.stdout.write("=" * 60)

        except Exception as e:
            self.stdout.write("\n" + "=" * 60)
            self.stdout.write(self.style.ERROR(f"ERROR: {str(e)}"))
            self.stdout.write("=" * 60)
            self.stdout.write(self.style.WARNING("\nTroubleshooting:"))
            self.stdout.write("   1. Check REDIS_URL in the environment")
            self.stdout.write("   2. Verify django-redis is installed")
            self.stdout.write("   3. Test the Redis connection from your server")
            raise
