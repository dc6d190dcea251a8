import math
from typing import List, Union

from school_directory.core.constants import MAX_PAGE_SIZE, MIN_PAGE_SIZE, PAGE_ELLIPSIS
from school_directory.core.exceptions import InvalidArgumentError
from school_directory.schemas.school import PaginationMeta

def check_page_args(page: int, limit: int):
    if page < 1:
        raise InvalidArgumentError("Page number must be greater than 0")
    if limit < MIN_PAGE_SIZE or limit > MAX_PAGE_SIZE:
        raise InvalidArgumentError(f"Limit must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}")

def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit

def page_window(current_page: int, total_pages: int) -> List[Union[int, str]]:
    """Page numbers to render around ``current_page``, with ellipses over skipped ranges."""
    if total_pages <= 0:
        return []

    window: List[Union[int, str]] = []
    if current_page > 3:
        window.append(1)
        if current_page > 4:
            window.append(PAGE_ELLIPSIS)

    first = max(1, current_page - 2)
    last = min(total_pages, current_page + 2)
    window.extend(range(first, last + 1))

    if current_page < total_pages - 2:
        if current_page < total_pages - 3:
            window.append(PAGE_ELLIPSIS)
        window.append(total_pages)

    return window

def compute_pagination(total: int, page: int, limit: int) -> PaginationMeta:
    total_pages = math.ceil(total / limit) if total > 0 else 0
    return PaginationMeta(
        current_page=page,
        total_pages=total_pages,
        limit=limit,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
        page_window=page_window(page, total_pages),
    )
