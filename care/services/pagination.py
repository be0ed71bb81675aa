from typing import Optional, Tuple

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def page_params(query_params) -> Tuple[int, int]:
    """Read 1-indexed ``page`` and ``limit`` from query params, clamped."""
    try:
        page = int(query_params.get('page') or 1)
    except (TypeError, ValueError):
        page = 1
    try:
        limit = int(query_params.get('limit') or DEFAULT_LIMIT)
    except (TypeError, ValueError):
        limit = DEFAULT_LIMIT
    return max(1, page), min(MAX_LIMIT, max(1, limit))


def build_pagination(page: int, limit: int, total: int) -> dict:
    pagination: dict = {}
    if page * limit < total:
        pagination['next'] = {'page': page + 1, 'limit': limit}
    if page > 1:
        pagination['prev'] = {'page': page - 1, 'limit': limit}
    return pagination


def paginate(qs, page: int, limit: int, total: Optional[int] = None):
    """Return ``(items, pagination)`` for an ordered queryset."""
    total = qs.count() if total is None else total
    start = (page - 1) * limit
    items = list(qs[start:start + limit])
    return items, build_pagination(page, limit, total)
