"""HTTP client for the paginated Vertec model API."""

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from vertec_assist.config import get_settings
from vertec_assist.core.errors import FetchError

logger = logging.getLogger(__name__)

RETRY_MAX_ATTEMPTS = 3
RETRY_MULTIPLIER = 1
RETRY_MIN_WAIT = 1
RETRY_MAX_WAIT = 10


class ModelApiClient:
    """Async client that follows ``next`` links until the last page.

    Pages have the shape ``{"count", "next", "previous", "results"}``.
    """

    def __init__(
        self,
        timeout: float | None = None,
        page_limit: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            timeout: Request timeout in seconds. Defaults to settings.
            page_limit: Maximum number of pages followed. Defaults to settings.
            transport: Optional httpx transport (used by tests).
        """
        settings = get_settings()
        self._timeout = timeout or settings.request_timeout
        self._page_limit = page_limit or settings.api.vertec_page_limit
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ModelApiClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch_all(self, url: str) -> list[dict[str, Any]]:
        """Load every page starting at ``url`` and return the merged results."""
        if self._client is None:
            await self.connect()

        results: list[dict[str, Any]] = []
        current_url: str | None = url
        page_count = 0

        while current_url:
            if page_count >= self._page_limit:
                raise FetchError(
                    f"Stopped after {page_count} pages, next link keeps going",
                    url=current_url,
                )

            page_count += 1
            page = await self._fetch_page(current_url)
            page_results = page.get("results") or []
            results.extend(r for r in page_results if isinstance(r, dict))

            logger.info(f"Page {page_count} loaded: {len(page_results)} entries")
            current_url = page.get("next")

        logger.info(f"Loaded {len(results)} entries in total from {page_count} pages")
        return results

    async def _fetch_page(self, url: str) -> dict[str, Any]:
        try:
            response = await self._get(url)
            response.raise_for_status()
            page = response.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"API error: {e.response.status_code} for {url}",
                url=url,
                status_code=e.response.status_code,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"API error: {e}", url=url, cause=e) from e
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}", url=url, cause=e) from e

        if not isinstance(page, dict) or not isinstance(page.get("results", []), list):
            raise FetchError(f"Unexpected page format from {url}", url=url)
        return page

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
        wait=wait_exponential(
            multiplier=RETRY_MULTIPLIER, min=RETRY_MIN_WAIT, max=RETRY_MAX_WAIT
        ),
        reraise=True,
    )
    async def _get(self, url: str) -> httpx.Response:
        return await self._client.get(url)
