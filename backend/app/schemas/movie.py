"""Movie catalog Pydantic schemas.

These models sit at the catalog API boundary. They ignore unknown fields so
new catalog attributes never break validation, and they are frozen: a movie
is replaced wholesale on every fetch, never mutated.
"""

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config import settings


class Genre(BaseModel):
    """A catalog genre (e.g. 28 -> "Action")."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str


class Movie(BaseModel):
    """Uniform movie shape shared by list results and detail lookups."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str = ""
    overview: str = ""
    poster_path: Optional[str] = None
    release_date: str = ""
    original_language: str = ""
    vote_average: float = Field(default=0.0, ge=0, le=10)
    vote_count: int = Field(default=0, ge=0)
    popularity: float = Field(default=0.0, ge=0)
    genre_ids: Tuple[int, ...] = ()

    @field_validator("title", "overview", "release_date", "original_language", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("vote_average", "vote_count", "popularity", mode="before")
    @classmethod
    def _none_to_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _none_to_tuple(cls, value: Any) -> Any:
        return () if value is None else value

    @classmethod
    def from_detail(cls, payload: dict) -> "Movie":
        """Build a Movie from a full ``/movie/{id}`` record.

        The detail record lists ``genres`` as ``{id, name}`` objects; they are
        flattened to ``genre_ids`` so both fetch paths yield the same shape.
        """
        data = dict(payload)
        genres = data.pop("genres", None)
        if genres:
            data["genre_ids"] = [g["id"] for g in genres if isinstance(g, dict) and "id" in g]
        return cls.model_validate(data)

    @property
    def poster_url(self) -> str:
        """Full poster image URL, or the placeholder image when there is none."""
        if not self.poster_path:
            return settings.POSTER_PLACEHOLDER
        return f"{settings.TMDB_IMAGE_BASE_URL}/{self.poster_path.lstrip('/')}"

    @property
    def release_year(self) -> str:
        if not self.release_date:
            return "N/A"
        return self.release_date.split("-")[0]

    @property
    def rating_label(self) -> str:
        if not self.vote_average:
            return "N/A"
        return f"{self.vote_average:.1f}"


class MoviePage(BaseModel):
    """One page of search or discover results."""

    model_config = ConfigDict(frozen=True)

    page: int = 1
    results: List[Movie] = []
    total_pages: int = Field(default=1, ge=1)


class MovieResponse(BaseModel):
    """Movie as returned by the HTTP API, with display helpers resolved."""

    id: int
    title: str
    overview: str
    poster_path: Optional[str] = None
    poster_url: str
    release_date: str
    release_year: str
    original_language: str
    vote_average: float
    vote_count: int
    popularity: float
    rating_label: str
    genre_ids: List[int]
    genre_names: List[str] = []
    card_genres: List[str] = []
    hidden_genre_count: int = 0

    @classmethod
    def from_movie(cls, movie: Movie, genre_names: Optional[List[str]] = None) -> "MovieResponse":
        # Imported here: genre_service imports the catalog client, which imports this module
        from app.services.genre_service import summarize_genres

        names = genre_names or []
        card_genres, hidden = summarize_genres(names)
        return cls(
            **movie.model_dump(),
            poster_url=movie.poster_url,
            release_year=movie.release_year,
            rating_label=movie.rating_label,
            genre_names=names,
            card_genres=card_genres,
            hidden_genre_count=hidden,
        )
