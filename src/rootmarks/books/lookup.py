"""
Book lookup against the Google Books volumes API.

Used to prefill title, author, page count and cover when adding a book.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from rootmarks.config import get_settings
from rootmarks.exceptions import BookLookupError

logger = structlog.get_logger()

DESCRIPTION_LIMIT = 200


def map_volume(item: dict[str, Any]) -> dict[str, Any]:
    """Map one volumes API item to a search result."""
    info = item.get("volumeInfo") or {}
    thumbnail = (info.get("imageLinks") or {}).get("thumbnail")
    description = info.get("description")
    return {
        "id": item.get("id", ""),
        "title": info.get("title") or "Unknown Title",
        "author": ", ".join(info.get("authors") or []) or "Unknown Author",
        "page_count": info.get("pageCount") or None,
        "cover_url": thumbnail.replace("http://", "https://") if thumbnail else None,
        "description": description[:DESCRIPTION_LIMIT] if description else None,
        "published_date": info.get("publishedDate") or None,
    }


class GoogleBooksClient:
    """Search the public volumes API. No API key is needed."""

    def __init__(
        self,
        base_url: str,
        max_results: int = 5,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.max_results = max_results
        self.timeout = timeout
        self._transport = transport

    async def search(self, query: str) -> list[dict[str, Any]]:
        """
        Return up to ``max_results`` candidates for a free-text query.

        Raises:
            ValueError: If the query is blank.
            BookLookupError: If the API cannot be reached or answers with an error.
        """
        query = query.strip()
        if not query:
            msg = "Query is required"
            raise ValueError(msg)

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.get(
                    self.base_url,
                    params={"q": query, "maxResults": self.max_results},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("book_lookup_failed", query=query, error=str(e))
            raise BookLookupError(str(e)) from e

        items = data.get("items") or []
        if not items:
            logger.info("book_lookup_empty", query=query)
        return [map_volume(item) for item in items]


# Module-level singleton
_book_lookup: GoogleBooksClient | None = None


def get_book_lookup() -> GoogleBooksClient:
    """Get or create the book lookup client (FastAPI dependency)."""
    global _book_lookup  # noqa: PLW0603
    if _book_lookup is None:
        settings = get_settings()
        _book_lookup = GoogleBooksClient(
            base_url=settings.book_lookup_url,
            max_results=settings.book_lookup_max_results,
            timeout=settings.book_lookup_timeout_seconds,
        )
    return _book_lookup


def reset_book_lookup() -> None:
    """Reset the lookup client singleton (for testing)."""
    global _book_lookup  # noqa: PLW0603
    _book_lookup = None
