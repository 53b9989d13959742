"""Controllers that drive interactive view state."""

from .search_controller import SearchController


__all__ = ["SearchController"]
