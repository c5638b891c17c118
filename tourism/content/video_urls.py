"""Video id and thumbnail derivation from share/watch URLs"""
import re

YOUTUBE_ID_RE = re.compile(
    r'(?:youtube\.com/(?:watch\?(?:.*&)?v=|embed/|shorts/|live/|v/)|youtu\.be/)([A-Za-z0-9_-]{11})'
)
VIMEO_ID_RE = re.compile(r'vimeo\.com/(?:.*?/)?(\d+)')
TIKTOK_ID_RE = re.compile(r'tiktok\.com/.*?/video/(\d+)')

PLATFORM_PATTERNS = {
    'youtube': YOUTUBE_ID_RE,
    'vimeo': VIMEO_ID_RE,
    'tiktok': TIKTOK_ID_RE,
}


def detect_platform(url):
    url = (url or '').lower()
    if 'youtube.com' in url or 'youtu.be' in url:
        return 'youtube'
    if 'vimeo.com' in url:
        return 'vimeo'
    if 'tiktok.com' in url:
        return 'tiktok'
    return None


def extract_video_id(platform, url):
    """Return the platform's video id from a URL, or None"""
    pattern = PLATFORM_PATTERNS.get(platform)
    if pattern is None or not url:
        return None
    match = pattern.search(url)
    return match.group(1) if match else None


def default_thumbnail(platform, video_id):
    # Only YouTube serves predictable thumbnail URLs
    if platform == 'youtube' and video_id:
        return f"https://img.youtube.com/vi/{video_id}/hqdefault.jpg"
    return ''
