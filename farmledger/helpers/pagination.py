"""
Pagination Helpers
Offset arithmetic shared by the list endpoints.
"""
import math
from typing import List


def page_offset(page: int, limit: int) -> int:
    """Rows to skip for a 1-based page."""
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` rows, ``limit`` at a time."""
    return math.ceil(total / limit)


def page_window(page: int, pages: int, size: int = 5) -> List[int]:
    """
    Page numbers to show as buttons: at most ``size`` of them, centred on the
    current page where possible and clamped to the first and last pages.
    """
    if pages <= size:
        return list(range(1, pages + 1))
    half = size // 2
    if page <= half + 1:
        start = 1
    elif page >= pages - half:
        start = pages - size + 1
    else:
        start = page - half
    return list(range(start, start + size))
