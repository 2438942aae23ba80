# shared/utils/pagination.py
"""
Page/offset helper used by every list operation in the services layer.
"""
from typing import Any, List, Tuple

from django.conf import settings

DEFAULT_PAGE_SIZE = 10


def clamp_page(page, page_size) -> Tuple[int, int]:
    """Normalise caller supplied paging values (page < 1 -> 1, size < 1 -> default, size > max -> max)."""
    max_page_size = getattr(settings, 'ADMISSIONS_MAX_PAGE_SIZE', 100)

    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    try:
        page_size = int(page_size)
    except (TypeError, ValueError):
        page_size = DEFAULT_PAGE_SIZE

    if page < 1:
        page = 1
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    if page_size > max_page_size:
        page_size = max_page_size
    return page, page_size


def paginate(queryset, page=1, page_size=DEFAULT_PAGE_SIZE) -> Tuple[List[Any], int]:
    """
    Slice an ordered queryset.

    Returns:
        Tuple: (items on the requested page, total count before slicing)
    """
    page, page_size = clamp_page(page, page_size)
    total = queryset.count()
    offset = (page - 1) * page_size
    return list(queryset[offset:offset + page_size]), total
