from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from ...core.config import ApiConfig
from ...models import utcnow
from ...schemas.tools import ApiRoutesDocument, ToolError
from .base import guarded

START_API_HINT = "Start the API with: python backend/scripts/run_api.py"

logger = logging.getLogger(__name__)


class ApiTools:
    """Relays the live REST API's OpenAPI document to agents.

    ``client`` is injectable so tests can mount an ``httpx.MockTransport``;
    without one a short-lived client is opened per call.
    """

    def __init__(self, config: ApiConfig, client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self._client = client

    @guarded("Failed to retrieve API routes")
    def get_api_routes(self) -> BaseModel:
        url = self.config.openapi_url
        logger.info("Fetching API routes from %s", url)
        try:
            response = self._get(url)
        except httpx.TransportError as exc:
            logger.warning("Could not reach API at %s: %s", url, exc)
            return ToolError(
                error="Could not connect to API",
                details=str(exc),
                hint=f"Make sure the Construction Estimation API is running. {START_API_HINT}",
            )

        if not response.is_success:
            return ToolError(
                error="Failed to fetch API routes",
                details=(
                    f"API returned status code {response.status_code}. "
                    f"Make sure the API is running at {self.config.base_url}"
                ),
                hint=START_API_HINT,
            )

        try:
            document = response.json()
        except ValueError as exc:
            return ToolError(error="Failed to parse OpenAPI JSON", details=str(exc))
        if not isinstance(document, dict):
            return ToolError(error="Failed to parse OpenAPI JSON", details="Document is not a JSON object")

        document["servers"] = [
            {
                "url": "{baseUrl}",
                "description": f"API base URL (e.g., {self.config.base_url} for development)",
            }
        ]
        return ApiRoutesDocument(
            openapi_spec=document,
            metadata={
                "development_urls": {"http": self.config.base_url},
                "note": "Replace {baseUrl} in the openapi_spec with your actual API base URL",
                "fetched_at": utcnow().isoformat(),
            },
        )

    def _get(self, url: str) -> httpx.Response:
        timeout = httpx.Timeout(self.config.request_timeout_seconds)
        if self._client is not None:
            return self._client.get(url, timeout=timeout)
        with httpx.Client(timeout=timeout) as client:
            return client.get(url)

