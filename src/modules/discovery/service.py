import logging

from src.modules.scraper.schemas import SearchResultItem
from src.modules.scraper.service import DEFAULT_LOCATION, FirecrawlService

logger = logging.getLogger(__name__)

MAP_LIMIT = 25
SEARCH_LIMIT = 15
SEARCH_RECENCY = "qdr:y"  # past year


class DiscoveryService:
    """Finds candidate URLs for import. Read-only, failures propagate."""

    def __init__(self, extraction: FirecrawlService) -> None:
        self._extraction = extraction

    async def map_site(self, url: str, search: str | None = None) -> list[str]:
        links = await self._extraction.map(
            url, limit=MAP_LIMIT, search=search or None, location=DEFAULT_LOCATION
        )
        seen: set[str] = set()
        unique: list[str] = []
        for link in links:
            if link not in seen:
                seen.add(link)
                unique.append(link)
        logger.info("Mapped %s: %d links (%d unique)", url, len(links), len(unique))
        return unique[:MAP_LIMIT]

    async def search_web(self, query: str) -> list[SearchResultItem]:
        results = await self._extraction.search(
            query.strip(), limit=SEARCH_LIMIT, tbs=SEARCH_RECENCY
        )
        results = [r for r in results if r.url][:SEARCH_LIMIT]
        logger.info("Search '%s' returned %d results", query, len(results))
        return results
