"""Search service interfaces."""

from .service import BoardSearchFilters, BoardSearchResult, BoardSearchService

__all__ = [
    "BoardSearchFilters",
    "BoardSearchResult",
    "BoardSearchService",
]
