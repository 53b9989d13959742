"""Search view state: immutable state container, pager window and debounce."""

from .debounce import Debouncer
from .pagination import PageWindow, page_window
from .search_state import SearchState, can_change_page, reduce


__all__ = [
    "Debouncer",
    "PageWindow",
    "page_window",
    "SearchState",
    "can_change_page",
    "reduce",
]
