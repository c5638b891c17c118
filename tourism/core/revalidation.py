"""
On-demand revalidation of the server-rendered frontend.

When FRONTEND_REVALIDATE_URL is configured, invalidated cache tags are POSTed
to it so the frontend can drop its own fetch cache for those tags.

Inside a request (see RevalidationMiddleware) or a `batched_revalidation()`
block the tags are collected and sent in one call when the block ends.
"""
import logging
import threading
from contextlib import contextmanager

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

REVALIDATE_TIMEOUT = 5  # seconds

# Engagement counters change on every like and page view; the frontend does not cache them
SERVER_ONLY_TAGS = {'ViewStats', 'LikeStatus'}

_thread_locals = threading.local()


def post_revalidation(tags):
    """POST {"tags": [...]} to the frontend. Returns True when the call succeeded."""
    url = getattr(settings, 'FRONTEND_REVALIDATE_URL', '')
    if not url or not tags:
        return False

    headers = {'Content-Type': 'application/json'}
    secret = getattr(settings, 'FRONTEND_REVALIDATE_SECRET', '')
    if secret:
        headers['X-Revalidate-Secret'] = secret

    tags = sorted(set(tags))
    try:
        response = requests.post(url, json={'tags': tags}, headers=headers, timeout=REVALIDATE_TIMEOUT)
        response.raise_for_status()
        logger.info(f"Frontend revalidated for tags: {tags}")
        return True
    except requests.RequestException as e:
        logger.warning(f"Frontend revalidation failed for tags {tags}: {str(e)}")
        return False


def notify_frontend(tags):
    """Send the tags now, or queue them when a batch is open. Returns True when sent or queued."""
    tags = [tag for tag in tags if tag and tag not in SERVER_ONLY_TAGS]
    if not tags:
        return False
    pending = getattr(_thread_locals, 'pending', None)
    if pending is not None:
        pending.update(tags)
        return True
    return post_revalidation(tags)


@contextmanager
def batched_revalidation():
    """Collect every tag invalidated inside the block and notify the frontend once at the end"""
    if getattr(_thread_locals, 'pending', None) is not None:
        # Nested block: the outer one sends
        yield
        return
    _thread_locals.pending = set()
    try:
        yield
    finally:
        pending = _thread_locals.pending
        _thread_locals.pending = None
        if pending:
            post_revalidation(pending)


class RevalidationMiddleware:
    """One frontend revalidation call per request, however many rows it touched"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        with batched_revalidation():
            return self.get_response(request)
