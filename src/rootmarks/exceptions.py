"""Errors raised by clients of external services."""

from __future__ import annotations


class ExternalServiceError(Exception):
    """An upstream dependency failed. Rendered as 502 by the error handlers."""

    service = "External service"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or f"{self.service} unavailable")


class BookLookupError(ExternalServiceError):
    service = "Book search"


class PlantAnalysisError(ExternalServiceError):
    service = "Plant analysis"
