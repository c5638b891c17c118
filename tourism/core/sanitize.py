"""
HTML sanitization for user supplied text.

Guest comments are plain text: every tag is stripped. Rich descriptions written
in the dashboard keep a small formatting allow-list.
"""
import bleach

RICH_TEXT_TAGS = [
    'a', 'b', 'blockquote', 'br', 'em', 'h2', 'h3', 'h4', 'i', 'li', 'ol',
    'p', 'strong', 'u', 'ul',
]
RICH_TEXT_ATTRIBUTES = {
    'a': ['href', 'title', 'rel', 'target'],
}
RICH_TEXT_PROTOCOLS = ['http', 'https', 'mailto']


def strip_markup(value):
    """Remove all markup and surrounding whitespace."""
    if not value:
        return ''
    return bleach.clean(value, tags=[], attributes={}, strip=True).strip()


def clean_rich_text(value):
    if not value:
        return ''
    return bleach.clean(
        value,
        tags=RICH_TEXT_TAGS,
        attributes=RICH_TEXT_ATTRIBUTES,
        protocols=RICH_TEXT_PROTOCOLS,
        strip=True,
    )
