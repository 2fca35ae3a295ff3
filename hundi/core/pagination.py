"""Pagination — page/limit arithmetic shared by listing operations.

Invariants:
    - page and limit are 1-based and positive (validated by the listing operation)
    - page_count(0, n) == 0; otherwise ceil(total / limit)
    - limit never exceeds MAX_PAGE_LIMIT
"""

import math
from dataclasses import dataclass

MAX_PAGE_LIMIT = 100


@dataclass(frozen=True)
class PageInfo:
    total: int
    page: int
    pages: int


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit)


def build_page_info(total: int, page: int, limit: int) -> PageInfo:
    return PageInfo(total=total, page=page, pages=page_count(total, limit))
