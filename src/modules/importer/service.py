import logging
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from src.errors import ExtractionError
from src.modules.importer.dates import parse_published_at
from src.modules.importer.schemas import BulkProgress
from src.modules.persistence.contracts import ItemStoreContract
from src.modules.persistence.models import ItemStatus, SavedItem
from src.modules.scraper.service import FirecrawlService

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    return None


class ImportService:
    """Imports URLs into the item store through Firecrawl extraction."""

    def __init__(self, store: ItemStoreContract, extraction: FirecrawlService) -> None:
        self._store = store
        self._extraction = extraction

    async def import_url(
        self,
        url: str,
        user_id: str,
        initial_status: ItemStatus = ItemStatus.PROCESSING,
    ) -> SavedItem:
        """Create an item for ``url`` and drive it to COMPLETED or FAILED.

        Extraction and result-storage failures are recorded on the item,
        never raised.
        """
        item = await self._store.create(url, user_id, initial_status)

        try:
            result = await self._extraction.scrape(url)
        except ExtractionError as exc:
            logger.warning("Extraction failed for %s: %s", url, exc)
            failed = await self._store.update(item.id, user_id, status=ItemStatus.FAILED)
            return failed or item

        structured = result.structured
        published_at = None
        if structured.get("publishedAt"):
            published_at = parse_published_at(str(structured["publishedAt"]))

        try:
            completed = await self._store.update(
                item.id,
                user_id,
                title=result.metadata.title or _as_text(structured.get("title")),
                content=result.markdown or None,
                og_image=result.metadata.og_image or None,
                author=_as_text(structured.get("author")),
                published_at=published_at,
                status=ItemStatus.COMPLETED,
            )
        except SQLAlchemyError:
            logger.exception("Could not store extraction result for %s", url)
            failed = await self._store.update(item.id, user_id, status=ItemStatus.FAILED)
            return failed or item

        logger.info("Imported %s as item %s", url, item.id)
        return completed or item

    async def bulk_import(
        self, urls: list[str], user_id: str
    ) -> AsyncIterator[BulkProgress]:
        """Import ``urls`` one after another, yielding progress after each.

        Stopping iteration early leaves the remaining URLs untouched.
        """
        total = len(urls)
        succeeded = 0
        failed = 0
        logger.info("Bulk import started (%d urls)", total)
        try:
            for index, url in enumerate(urls, start=1):
                item = await self.import_url(url, user_id, ItemStatus.PENDING)
                if item.status == ItemStatus.COMPLETED:
                    succeeded += 1
                    status = "success"
                else:
                    failed += 1
                    status = "failed"
                yield BulkProgress(completed=index, total=total, url=url, status=status)
        finally:
            logger.info(
                "Bulk import finished: %d/%d processed, %d succeeded, %d failed",
                succeeded + failed, total, succeeded, failed,
            )
