"""Custom exception classes for the application."""

GENERIC_FETCH_ERROR = "Error fetching movies. Please try again later."
PAYLOAD_FETCH_ERROR = "Failed to fetch movies"


class MovieScoutException(Exception):
    """Base exception for all MovieScout errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(MovieScoutException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' not found")


class CatalogError(MovieScoutException):
    """Transient failure talking to the movie catalog.

    Covers network failures, non-2xx statuses and malformed payloads.
    ``user_message`` is the text safe to show in place of the movie grid.
    """

    def __init__(self, message: str, user_message: str = GENERIC_FETCH_ERROR):
        self.user_message = user_message
        super().__init__(message)


class CatalogHTTPError(CatalogError):
    """Raised when the catalog answers with a non-success status."""

    def __init__(self, status_code: int, path: str):
        self.status_code = status_code
        super().__init__(f"Catalog returned HTTP {status_code} for {path}")


class CatalogPayloadError(CatalogError):
    """Raised when the catalog payload carries a failure flag or cannot be parsed."""

    def __init__(self, message: str, user_message: str = GENERIC_FETCH_ERROR):
        super().__init__(f"Catalog payload error: {message}", user_message=user_message)


class AnalyticsError(MovieScoutException):
    """Raised when the search analytics store cannot be read or written."""

    def __init__(self, backend: str, message: str):
        super().__init__(f"Analytics error for {backend}: {message}")
