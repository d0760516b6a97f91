"""
Plant photo analysis with provider abstraction.

The default provider posts the image to an HTTP analysis service configured
through ``ROOTMARKS_PLANT_ANALYSIS_URL``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx
import structlog

from rootmarks.config import get_settings
from rootmarks.exceptions import PlantAnalysisError

logger = structlog.get_logger()


class BaseImageAnalyzer(ABC):
    """Abstract base class for plant image analyzers."""

    @abstractmethod
    async def analyze(self, image_data: str) -> str:
        """Return the free-text analysis of an image data URL."""
        ...


class HttpImageAnalyzer(BaseImageAnalyzer):
    """Send images to an analysis endpoint that answers ``{"analysis": "..."}``."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def analyze(self, image_data: str) -> str:
        """
        Analyze one image.

        Raises:
            PlantAnalysisError: If the service is not configured, fails, or returns no analysis.
        """
        if not self.url:
            msg = "Plant analysis service is not configured"
            raise PlantAnalysisError(msg)

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(self.url, headers=headers, json={"imageData": image_data})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("plant_analysis_failed", error=str(e))
            raise PlantAnalysisError(str(e)) from e

        analysis = data.get("analysis") if isinstance(data, dict) else None
        if not isinstance(analysis, str) or not analysis.strip():
            logger.warning("plant_analysis_empty")
            msg = "Plant analysis service returned no analysis"
            raise PlantAnalysisError(msg)
        return analysis


def _create_analyzer() -> BaseImageAnalyzer:
    """Create the analyzer based on configuration."""
    settings = get_settings()
    return HttpImageAnalyzer(
        url=settings.plant_analysis_url,
        api_key=settings.plant_analysis_api_key,
        timeout=settings.plant_analysis_timeout_seconds,
    )


# Module-level singleton
_analyzer: BaseImageAnalyzer | None = None


def get_plant_analyzer() -> BaseImageAnalyzer:
    """Get or create the analyzer singleton (FastAPI dependency)."""
    global _analyzer  # noqa: PLW0603
    if _analyzer is None:
        _analyzer = _create_analyzer()
    return _analyzer


def reset_plant_analyzer() -> None:
    """Reset the analyzer singleton (for testing)."""
    global _analyzer  # noqa: PLW0603
    _analyzer = None
