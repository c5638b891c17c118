"""
Registry of the content types that comments, likes, views, tags, hero slides
and content links can point at.

Models are resolved lazily through the app registry so that the engagement
apps do not import the content apps at module load.
"""
import uuid

from django.apps import apps

TARGET_MODELS = {
    'post': 'content.Post',
    'video': 'content.Video',
    'photo': 'content.PhotoFeature',
    'hotel': 'hotels.Hotel',
    'region': 'regions.Region',
}

# Public site paths for posts depend on the post type
POST_PATHS = {
    'event': 'events',
    'activity': 'activities',
    'explore': 'attractions',
}


def get_target_model(target_type):
    label = TARGET_MODELS.get(target_type)
    if label is None:
        return None
    return apps.get_model(label)


def parse_uuid(value):
    """Return a UUID or None for malformed input"""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def get_target(target_type, target_id, published_only=True):
    """Fetch a target row, or None if the type is unknown or the row is missing/hidden"""
    model = get_target_model(target_type)
    target_uuid = parse_uuid(target_id)
    if model is None or target_uuid is None:
        return None
    queryset = model.objects.published() if published_only else model.objects.alive()
    return queryset.filter(pk=target_uuid).first()


def target_exists(target_type, target_id, published_only=True):
    return get_target(target_type, target_id, published_only) is not None


def public_url(target_type, obj):
    if target_type == 'post':
        return f"/{POST_PATHS.get(obj.type, 'blogs')}/{obj.slug}"
    section = {
        'video': 'videos',
        'photo': 'photos',
        'hotel': 'hotels',
        'region': 'regions',
    }.get(target_type)
    return f"/{section}/{obj.slug}" if section else ''


def target_image(target_type, obj):
    if target_type == 'video':
        return obj.thumbnail_url or ''
    if target_type == 'photo':
        first = obj.images.order_by('display_order', 'created_at').first()
        return first.image_url if first else ''
    return getattr(obj, 'cover_image', '') or ''


def describe_target(target_type, obj):
    """Summary dict used wherever one item is rendered as a card or link"""
    if target_type == 'post':
        description = obj.short_description
    else:
        description = getattr(obj, 'description', '')
    return {
        'id': str(obj.pk),
        'type': target_type,
        'title': obj.display_name,
        'slug': obj.slug,
        'description': description or '',
        'image': target_image(target_type, obj),
        'url': public_url(target_type, obj),
    }


def purge_target_references(target_type, target_id):
    """
    Remove rows in other apps that point at a target which is being
    permanently deleted. Returns the number of rows removed per table.
    """
    removed = {}
    Comment = apps.get_model('engagement', 'Comment')
    ContentLike = apps.get_model('engagement', 'ContentLike')
    ContentView = apps.get_model('engagement', 'ContentView')
    ContentTag = apps.get_model('tags', 'ContentTag')
    ContentLink = apps.get_model('links', 'ContentLink')
    HeroSlide = apps.get_model('hero', 'HeroSlide')

    for model in (Comment, ContentLike, ContentView, ContentTag):
        removed[model.__name__] = model.objects.filter(target_type=target_type, target_id=target_id).delete()[0]
    removed['ContentLink'] = (
        ContentLink.objects.filter(source_type=target_type, source_id=target_id).delete()[0]
        + ContentLink.objects.filter(target_type=target_type, target_id=target_id).delete()[0]
    )
    removed['HeroSlide'] = HeroSlide.objects.filter(content_type=target_type, content_id=target_id).delete()[0]
    return removed
