import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from src.errors import ExtractionError
from src.modules.scraper.schemas import PageMetadata, ScrapeResult, SearchResultItem

logger = logging.getLogger(__name__)

DEFAULT_LOCATION: dict[str, Any] = {"country": "US", "languages": ["en"]}

# Structured side-channel extraction requested alongside the markdown body
EXTRACT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "author": {"type": "string"},
        "publishedAt": {"type": "string"},
    },
}

SCRAPE_OPTIONS: dict[str, Any] = {
    "formats": ["markdown", {"type": "json", "schema": EXTRACT_SCHEMA}],
    "onlyMainContent": True,
    "proxy": "auto",
    "location": DEFAULT_LOCATION,
}


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, httpx.RequestError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


class FirecrawlService:
    """Thin async client for the Firecrawl v2 scrape, map and search endpoints."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        base_url: str = "https://api.firecrawl.dev",
        max_retries: int = 2,
        retry_delay: float = 1.0,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._max_retries = max(1, max_retries)
        self._retry_delay = retry_delay

    # ── HTTP layer ──────────────────────────────────────────────

    async def _post(
        self, path: str, payload: dict[str, Any], attempts: int = 1
    ) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = {"Authorization": f"Bearer {self._api_key}"}
        data: Any = None
        for attempt in range(1, max(1, attempts) + 1):
            try:
                response = await self._client.post(url, json=payload, headers=headers)
                response.raise_for_status()
                data = response.json()
                break
            except (httpx.HTTPStatusError, httpx.RequestError, ValueError) as exc:
                if attempt >= attempts or not _is_retryable(exc):
                    raise ExtractionError(
                        f"Firecrawl {path} failed: {exc}", url=payload.get("url")
                    ) from exc
                wait = self._retry_delay * 2 ** (attempt - 1)
                logger.warning(
                    "Attempt %d/%d for %s failed: %s, retrying in %.1fs",
                    attempt, attempts, path, exc, wait,
                )
                await asyncio.sleep(wait)

        if not isinstance(data, dict) or data.get("success") is False:
            error = data.get("error") if isinstance(data, dict) else None
            raise ExtractionError(
                f"Firecrawl {path} returned an error: {error or 'unknown'}",
                url=payload.get("url"),
            )
        return data

    # ── Endpoints ───────────────────────────────────────────────

    async def scrape(self, url: str) -> ScrapeResult:
        data = await self._post(
            "/v2/scrape", {"url": url, **SCRAPE_OPTIONS}, attempts=self._max_retries
        )
        body = data.get("data")
        if not isinstance(body, dict):
            raise ExtractionError("Firecrawl scrape returned no data", url=url)

        structured = body.get("json")
        try:
            result = ScrapeResult(
                markdown=body.get("markdown"),
                structured=structured if isinstance(structured, dict) else {},
                metadata=PageMetadata.model_validate(body.get("metadata") or {}),
            )
        except ValidationError as exc:
            raise ExtractionError(f"Malformed scrape result: {exc}", url=url) from exc

        logger.info(
            "Scraped %s (%d chars)", url, len(result.markdown or "")
        )
        return result

    async def map(
        self,
        url: str,
        *,
        limit: int,
        search: str | None = None,
        location: dict[str, Any] | None = None,
    ) -> list[str]:
        payload: dict[str, Any] = {
            "url": url,
            "limit": limit,
            "location": location or DEFAULT_LOCATION,
        }
        if search:
            payload["search"] = search
        data = await self._post("/v2/map", payload)

        links: list[str] = []
        for link in data.get("links") or []:
            # v2 returns link objects, v1 returned bare strings
            href = link.get("url") if isinstance(link, dict) else link
            if isinstance(href, str) and href:
                links.append(href)
        return links

    async def search(
        self, query: str, *, limit: int, tbs: str | None = None
    ) -> list[SearchResultItem]:
        payload: dict[str, Any] = {"query": query, "limit": limit}
        if tbs:
            payload["tbs"] = tbs
        data = await self._post("/v2/search", payload)

        body = data.get("data")
        raw_items = body.get("web") if isinstance(body, dict) else body
        results: list[SearchResultItem] = []
        for raw in raw_items or []:
            if not isinstance(raw, dict) or not raw.get("url"):
                continue
            results.append(
                SearchResultItem(
                    title=raw.get("title"),
                    url=raw["url"],
                    description=raw.get("description"),
                )
            )
        return results
