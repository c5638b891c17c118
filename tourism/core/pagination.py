"""Page/limit pagination producing the list envelope used by every list endpoint"""
from django.core.paginator import Paginator

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def get_page_params(request, default_limit=DEFAULT_LIMIT):
    """Read `page` (>= 1) and `limit` (clamped to 1..100) from the query string"""
    try:
        page = int(request.query_params.get('page', 1))
    except (TypeError, ValueError):
        page = 1
    try:
        limit = int(request.query_params.get('limit', default_limit))
    except (TypeError, ValueError):
        limit = default_limit
    return max(page, 1), min(max(limit, 1), MAX_LIMIT)


def build_page(request, items, default_limit=DEFAULT_LIMIT):
    """Return (page_obj, envelope-without-results) for a queryset or list"""
    page, limit = get_page_params(request, default_limit)
    paginator = Paginator(items, limit)
    page_obj = paginator.get_page(page)
    meta = {
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    }
    return page_obj, meta


def paginate_queryset(request, queryset, serializer_class, context=None, default_limit=DEFAULT_LIMIT):
    page_obj, meta = build_page(request, queryset, default_limit)
    serializer = serializer_class(page_obj.object_list, many=True, context=context or {'request': request})
    return {'results': serializer.data, **meta}
