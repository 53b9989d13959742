"""Genre id to display-name resolution."""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import structlog

from app.clients.catalog import CatalogClient
from app.core.exceptions import CatalogError
from app.schemas.movie import Genre

logger = structlog.get_logger(__name__)

GenreCatalog = Mapping[int, str]

# Card view shows this many genre tags before collapsing into "+N"
CARD_GENRE_LIMIT = 2


def build_genre_catalog(genres: Iterable[Genre]) -> Dict[int, str]:
    return {genre.id: genre.name for genre in genres}


def resolve_genre_names(
    genre_ids: Optional[Iterable[int]],
    catalog: Optional[GenreCatalog],
) -> List[str]:
    """Map genre ids to names in order, silently dropping unknown ids.

    Never raises: a missing id list or an absent/unloaded catalog both
    resolve to an empty list.
    """
    if not genre_ids or not catalog:
        return []
    return [catalog[genre_id] for genre_id in genre_ids if genre_id in catalog]


def summarize_genres(names: List[str], limit: int = CARD_GENRE_LIMIT) -> Tuple[List[str], int]:
    """Split names into the tags a card shows and the hidden overflow count."""
    shown = names[:limit]
    return shown, len(names) - len(shown)


class GenreService:
    """Loads the catalog genre list once and keeps it for the process."""

    def __init__(self, catalog_client: CatalogClient):
        self.catalog_client = catalog_client
        self._catalog: Optional[Dict[int, str]] = None
        self._genres: List[Genre] = []
        self.logger = logger.bind(service="genre_service")

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    @property
    def genres(self) -> List[Genre]:
        return list(self._genres)

    @property
    def catalog(self) -> Dict[int, str]:
        return dict(self._catalog or {})

    async def load(self) -> Dict[int, str]:
        """Fetch genres on first call; later calls reuse the loaded catalog.

        A failed load leaves the catalog unloaded (so the next call retries)
        and returns an empty mapping.
        """
        if self._catalog is not None:
            return dict(self._catalog)

        try:
            genres = await self.catalog_client.get_genres()
        except CatalogError as e:
            self.logger.error("genre_load_failed", error=str(e))
            return {}

        self._genres = genres
        self._catalog = build_genre_catalog(genres)
        self.logger.info("genres_loaded", count=len(genres))
        return dict(self._catalog)

    def resolve(self, genre_ids: Optional[Iterable[int]]) -> List[str]:
        return resolve_genre_names(genre_ids, self._catalog)
