"""Pagination helpers shared by admin list endpoints."""

import math
from typing import Any, Dict, List, Tuple


def page_bounds(page: int, limit: int) -> Tuple[int, int]:
    """Return (skip, limit) for a 1-based page number."""
    page = max(page, 1)
    limit = max(limit, 1)
    return (page - 1) * limit, limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` documents."""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def paginated(key: str, items: List[Any], total: int, page: int, limit: int) -> Dict[str, Any]:
    """Build the list envelope used by the admin dashboard."""
    return {
        key: items,
        "total_pages": total_pages(total, limit),
        "current_page": page,
        "total": total,
    }
