"""HTTP client for the recipe search, pagination and autocomplete endpoints.

All network access of the core goes through RecipeSearchClient. Transport and
protocol failures are translated into the typed errors of
recipe_search.utils.errors so that callers can tell a throttled request
(HTTP 429) from a transient network failure or a soft rejection.
"""

import asyncio
from typing import List, Optional

import aiohttp

from recipe_search.models.models import SearchPage
from recipe_search.utils.config import config
from recipe_search.utils.errors import SearchRejectedError, ThrottledError, TransientNetworkError
from recipe_search.utils.logger import logger


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Read a Retry-After header given in seconds. HTTP-date values are ignored."""
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def _unwrap(payload):
    """Strip the {"success", "data"} envelope some proxy endpoints add.

    Raises:
        SearchRejectedError: If the envelope reports success=false.
    """
    if isinstance(payload, dict):
        if payload.get("success") is False:
            raise SearchRejectedError(payload.get("message") or "Search request was rejected")
        if "data" in payload and "hits" not in payload:
            return payload["data"]
    return payload


class RecipeSearchClient:
    """Async client for an Edamam-style recipe search API.

    A fresh aiohttp session is opened per request; requests are idempotent reads
    and are never cancelled, superseded responses are discarded by the callers.
    """

    def __init__(
        self,
        search_url: Optional[str] = None,
        autocomplete_url: Optional[str] = None,
        app_id: Optional[str] = None,
        app_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Initialize client. Unset arguments fall back to the module config.

        Args:
            search_url: Search endpoint URL.
            autocomplete_url: Autocomplete endpoint URL.
            app_id: Edamam application id (optional when a proxy signs requests).
            app_key: Edamam application key.
            timeout: Total per-request timeout in seconds.
        """
        self.search_url = search_url or config.SEARCH_API_URL
        self.autocomplete_url = autocomplete_url or config.AUTOCOMPLETE_API_URL
        self.app_id = app_id if app_id is not None else config.EDAMAM_APP_ID
        self.app_key = app_key if app_key is not None else config.EDAMAM_APP_KEY
        self.timeout = timeout or config.REQUEST_TIMEOUT_SECONDS

    def _credentials(self) -> dict:
        if self.app_id and self.app_key:
            return {"app_id": self.app_id, "app_key": self.app_key}
        return {}

    async def _get_json(self, url: str, params: Optional[dict] = None):
        """GET a URL and decode its JSON body.

        Raises:
            ThrottledError: On HTTP 429.
            TransientNetworkError: On any other non-2xx status, connection error or timeout.
        """
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.get(url, params=params) as response:
                    if response.status == 429:
                        retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                        logger.warning(f"Search API throttled request (retry_after={retry_after})")
                        raise ThrottledError(retry_after=retry_after)
                    if response.status >= 400:
                        raise TransientNetworkError(
                            f"Search API returned HTTP {response.status}", status=response.status
                        )
                    return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransientNetworkError(f"Request to {url} failed: {e or type(e).__name__}") from e

    async def search(self, query: str) -> SearchPage:
        """Fetch the first page of results for a free-text query."""
        params = {"q": query, "type": "public", **self._credentials()}
        logger.debug("Searching recipes", extra={"query": query})
        payload = _unwrap(await self._get_json(self.search_url, params))
        return SearchPage.from_payload(payload)

    async def fetch_page(self, cursor: str) -> SearchPage:
        """Fetch the page a continuation cursor points at. The cursor URL is used verbatim."""
        logger.debug(f"Fetching next page: {cursor}")
        payload = _unwrap(await self._get_json(cursor))
        return SearchPage.from_payload(payload)

    async def autocomplete(self, partial_query: str) -> List[str]:
        """Fetch suggestion strings for a partial query."""
        params = {"q": partial_query, **self._credentials()}
        payload = _unwrap(await self._get_json(self.autocomplete_url, params))
        if not isinstance(payload, list):
            return []
        return [str(item) for item in payload]
