"""Pydantic schemas for MovieScout.

All request/response models are defined here for easy import.
"""

from app.schemas.common import ApiResponse, PaginationMeta
from app.schemas.movie import Genre, Movie, MoviePage, MovieResponse
from app.schemas.search import TrendingEntry
from app.schemas.health import HealthCheckResponse

__all__ = [
    "ApiResponse",
    "PaginationMeta",
    "Genre",
    "Movie",
    "MoviePage",
    "MovieResponse",
    "TrendingEntry",
    "HealthCheckResponse",
]
