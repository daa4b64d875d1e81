"""
Client for the Kiwi.com Tequila flight search API.

Each search is a single authenticated GET against /v2/search. There is no
retry: a failed call is reported to the caller as-is.
"""

import asyncio
import json
import logging
from typing import Any, Dict

import aiohttp

from .config import KiwiSettings
from .errors import MalformedResponse, UpstreamError
from .models import SearchRequest, SearchResult

logger = logging.getLogger(__name__)

SEARCH_ENDPOINT = "/v2/search"
MAX_ERROR_TEXT = 500


def _reject_constant(name: str):
    """json.loads hook for NaN, Infinity and -Infinity, which JSON does not allow."""
    logger.error("Tequila response contains non-finite number %s", name)
    raise MalformedResponse(f"Failed to parse API response: non-finite number {name}")


class KiwiClient:
    """Client for interacting with the Tequila search API."""

    def __init__(self, settings: KiwiSettings):
        self.settings = settings

    @property
    def search_url(self) -> str:
        return f"{self.settings.base_url}{SEARCH_ENDPOINT}"

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.settings.api_key,
            "Accept": "application/json",
        }

    async def fetch(self, params: Dict[str, str]) -> Any:
        """
        Issue one GET request and decode the JSON body.

        Args:
            params: Query parameters for the search endpoint

        Returns:
            The decoded JSON document

        Raises:
            UpstreamError: On a non-2xx status, a transport failure or a timeout
            MalformedResponse: If the body is not valid JSON
        """
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.search_url, params=params, headers=self._headers()) as response:
                    body = await response.read()

                    if not 200 <= response.status < 300:
                        detail = body.decode("utf-8", errors="replace")[:MAX_ERROR_TEXT]
                        logger.error("Tequila returned HTTP %s: %s", response.status, detail)
                        raise UpstreamError(response.status, detail)

        except aiohttp.ClientError as e:
            logger.error("Tequila request failed: %s", e)
            raise UpstreamError(None, str(e)) from e
        except asyncio.TimeoutError as e:
            logger.error("Tequila request timed out after %ss", self.settings.timeout)
            raise UpstreamError(None, f"request timed out after {self.settings.timeout}s") from e

        try:
            return json.loads(body.decode("utf-8"), parse_constant=_reject_constant)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Failed to parse API response: %s", e)
            raise MalformedResponse(f"Failed to parse API response: {e}") from e

    async def search(self, request: SearchRequest) -> SearchResult:
        """
        Search for itineraries matching a validated request.

        Returns:
            SearchResult holding at most request.limit itineraries in provider order
        """
        logger.info("Searching for flights from %s to %s", request.fly_from, request.fly_to)
        payload = await self.fetch(request.to_query_params())
        result = SearchResult.from_api(payload, currency=request.curr, limit=request.limit)
        logger.info("Tequila returned %d itineraries, keeping %d", result.total_found, len(result))
        return result
