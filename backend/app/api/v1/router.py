"""API v1 router -- aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import genres, health, movies, trending

api_v1_router = APIRouter()

api_v1_router.include_router(health.router, tags=["health"])
api_v1_router.include_router(movies.router, prefix="/movies", tags=["movies"])
api_v1_router.include_router(genres.router, prefix="/genres", tags=["genres"])
api_v1_router.include_router(trending.router, prefix="/trending", tags=["trending"])
