"""Application configuration via Pydantic Settings."""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Movie catalog (TMDB)
    TMDB_API_KEY: str = ""
    TMDB_API_BASE_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL: str = "https://image.tmdb.org/t/p/w500"
    POSTER_PLACEHOLDER: str = "no-movie.png"

    # Search analytics store: "appwrite" or "database"
    ANALYTICS_BACKEND: str = "appwrite"

    # Appwrite TablesDB
    APPWRITE_ENDPOINT: str = "https://cloud.appwrite.io/v1"
    APPWRITE_PROJECT_ID: str = ""
    APPWRITE_DATABASE_ID: str = ""
    APPWRITE_TABLE_ID: str = ""
    APPWRITE_API_KEY: str = ""

    # Database (used when ANALYTICS_BACKEND=database)
    DATABASE_URL: str = "sqlite+aiosqlite:///./moviescout.db"

    @model_validator(mode="after")
    def fix_database_url(self) -> "Settings":
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://"""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            self.DATABASE_URL = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgres://"):
            self.DATABASE_URL = url.replace("postgres://", "postgresql+asyncpg://", 1)
        return self

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Search behaviour
    SEARCH_DEBOUNCE_MS: int = 500
    PAGE_TRANSITION_MIN_DELAY_MS: int = 200
    PAGE_WINDOW_SIZE: int = 5
    TRENDING_FETCH_LIMIT: int = 10
    TRENDING_DISPLAY_LIMIT: int = 5
    TRENDING_CACHE_TTL: int = 120  # seconds
    GENRE_CACHE_TTL: int = 60 * 60 * 24  # 24 hours

    # Outbound HTTP
    HTTP_TIMEOUT_SECONDS: float = 10.0
    HTTP_MAX_RETRIES: int = 3

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Frontend
    FRONTEND_URL: str = "http://localhost:5173"


settings = Settings()
