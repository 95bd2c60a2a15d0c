from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from photo_search.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings
from photo_search.errors import ServerError, TransportFailure
from photo_search.logging_conf import logger
from photo_search.models import SearchPage, SearchResponse

TOTAL_HEADER = "x-total"


def parse_total(value: Optional[str]) -> Optional[int]:
    """Read the x-total header; None when it is absent or not a number."""
    if value is None:
        return None
    raw = value.strip()
    # Plain ASCII digits only: no sign, no underscores
    if not (raw.isascii() and raw.isdigit()):
        logger.warning(f"Ignoring non-numeric {TOTAL_HEADER} header: {value!r}")
        return None
    return int(raw)


class UnsplashClient:
    def __init__(self,
        access_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None):
        if not access_key:
            raise ValueError("Missing UNSPLASH_ACCESS_KEY")
        self.access_key = access_key
        self.base = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.session = httpx.AsyncClient(
            base_url=self.base,
            timeout=timeout,
            headers={
                "Authorization": f"Client-ID {self.access_key}",
                "Accept-Version": "v1",
            },
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kw) -> "UnsplashClient":
        return cls(
            access_key=settings.access_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            **kw,
        )

    async def _request(self, method: str, path: str, **kw) -> httpx.Response:
        url = f"{self.base}{path}"
        logger.debug(f"{method} {url} params={kw.get('params')}")
        try:
            r = await self.session.request(method, path, **kw)
        except httpx.RequestError as e:
            # Timeouts and connection errors often carry an empty message
            message = str(e) or type(e).__name__
            logger.error(f"Request error for {method} {url}: {message}")
            raise TransportFailure(message) from e

        if not r.is_success:
            message = r.reason_phrase or f"HTTP {r.status_code}"
            logger.error(f"HTTP error {r.status_code} for {method} {url}: {message}")
            if r.status_code == 401:
                logger.error("Access key was rejected, check UNSPLASH_ACCESS_KEY")
            elif r.status_code == 403:
                logger.warning("Rate limit exceeded or access forbidden")
            raise ServerError(r.status_code, message)
        return r

    async def search_photos(self, criteria: str, page: int, per_page: int) -> SearchPage:
        """
        Fetch one page of photo search results.

        Args:
            criteria: The search query
            page: 1-based page number
            per_page: Number of photos per page

        Returns:
            The page's photos and the total match count from the x-total header
        """
        params: Dict[str, Any] = {"query": criteria, "page": page, "per_page": per_page}
        r = await self._request("GET", "/search/photos", params=params)

        try:
            body = SearchResponse.model_validate(r.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Unexpected search response body: {r.text[:200]}")
            raise ServerError(r.status_code, f"Invalid search response: {e}") from e

        total = parse_total(r.headers.get(TOTAL_HEADER))
        logger.debug(f"Page {page} of '{criteria}': {len(body.results)} photos, total={total}")
        return SearchPage(results=body.results, total=total)

    async def close(self):
        """Close the HTTP client session."""
        if self.session:
            await self.session.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
