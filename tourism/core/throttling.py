"""
Request rate limits.

Every API request counts against the general anon/user limits. On top of
that, dashboard writes, public engagement writes (comments, likes, views)
and media uploads each have their own, tighter bucket. Rates live in
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'].
"""
from rest_framework.permissions import SAFE_METHODS
from rest_framework.throttling import SimpleRateThrottle


class _UnsafeMethodThrottle(SimpleRateThrottle):
    """Counts only non-GET requests, per user when signed in and per IP otherwise"""

    def get_cache_key(self, request, view):
        if request.method in SAFE_METHODS:
            return None
        if request.user and request.user.is_authenticated:
            ident = f"user-{request.user.pk}"
        else:
            ident = self.get_ident(request)
        return self.cache_format % {'scope': self.scope, 'ident': ident}


class WriteRateThrottle(_UnsafeMethodThrottle):
    scope = 'write'


class EngagementRateThrottle(_UnsafeMethodThrottle):
    scope = 'engagement'


class UploadRateThrottle(_UnsafeMethodThrottle):
    scope = 'upload'
