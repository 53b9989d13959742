"""Page-button window for paginated results.

The pager shows a fixed number of contiguous page buttons centred on the
current page where possible and clamped at both ends, e.g. with 20 pages:

    page 1  -> [1, 2, 3, 4, 5]
    page 10 -> [8, 9, 10, 11, 12]
    page 20 -> [16, 17, 18, 19, 20]
"""

from dataclasses import dataclass, field
from typing import List

from app.config import settings

DEFAULT_WINDOW_SIZE = settings.PAGE_WINDOW_SIZE


def page_window(current_page: int, total_pages: int, size: int = DEFAULT_WINDOW_SIZE) -> List[int]:
    """Return the visible page numbers for ``current_page`` of ``total_pages``."""
    total_pages = max(total_pages, 1)
    current_page = min(max(current_page, 1), total_pages)

    start = max(current_page - size // 2, 1)
    end = min(start + size - 1, total_pages)

    # Near the last page the window would come up short: slide it left
    if end - start < size - 1:
        start = max(end - size + 1, 1)

    return list(range(start, end + 1))


@dataclass(frozen=True)
class PageWindow:
    """Derived pager view; never stored."""

    current_page: int
    total_pages: int
    pages: List[int] = field(default_factory=list)

    @classmethod
    def build(cls, current_page: int, total_pages: int, size: int = DEFAULT_WINDOW_SIZE) -> "PageWindow":
        total_pages = max(total_pages, 1)
        current_page = min(max(current_page, 1), total_pages)
        return cls(
            current_page=current_page,
            total_pages=total_pages,
            pages=page_window(current_page, total_pages, size),
        )

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def is_valid_page_request(current_page: int, total_pages: int, requested_page: int) -> bool:
    """True when ``requested_page`` is a real page other than the current one."""
    return requested_page != current_page and 1 <= requested_page <= total_pages
