"""Shared fixtures: a real SQLite item store and fakes for external services."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage
from sqlalchemy.exc import DataError

from src.config.database import build_engine, build_sessionmaker, create_tables
from src.dependencies import Services
from src.errors import ExtractionError
from src.modules.discovery.service import DiscoveryService
from src.modules.importer.service import ImportService
from src.modules.inference.service import InferenceService
from src.modules.persistence.models import ItemStatus
from src.modules.persistence.service import PersistenceService
from src.modules.scraper.schemas import PageMetadata, ScrapeResult, SearchResultItem
from src.modules.summarizer.service import SummaryService


def make_scrape_result(
    title: str = "An Article",
    markdown: str = "# An Article\n\nBody text.",
    author: str | None = "Jane Doe",
    published_at: str | None = "2024-03-05T10:00:00Z",
    og_image: str | None = "https://img.test/cover.png",
) -> ScrapeResult:
    structured: dict = {}
    if author is not None:
        structured["author"] = author
    if published_at is not None:
        structured["publishedAt"] = published_at
    return ScrapeResult(
        markdown=markdown,
        structured=structured,
        metadata=PageMetadata(title=title, og_image=og_image),
    )


class FakeFirecrawl:
    """Stands in for FirecrawlService; records every call it receives."""

    def __init__(self) -> None:
        self.results: dict[str, ScrapeResult | Exception] = {}
        self.links: list[str] = []
        self.search_results: list[SearchResultItem] = []
        self.scraped: list[str] = []
        self.map_calls: list[dict] = []
        self.search_calls: list[dict] = []

    async def scrape(self, url: str) -> ScrapeResult:
        self.scraped.append(url)
        result = self.results.get(url, make_scrape_result())
        if isinstance(result, Exception):
            raise result
        return result

    async def map(self, url, *, limit, search=None, location=None) -> list[str]:
        self.map_calls.append(
            {"url": url, "limit": limit, "search": search, "location": location}
        )
        return list(self.links)

    async def search(self, query, *, limit, tbs=None) -> list[SearchResultItem]:
        self.search_calls.append({"query": query, "limit": limit, "tbs": tbs})
        return list(self.search_results)


def fake_chat_model(*replies: str) -> GenericFakeChatModel:
    return GenericFakeChatModel(messages=iter([AIMessage(content=r) for r in replies]))


def extraction_error(url: str) -> ExtractionError:
    return ExtractionError("Firecrawl /v2/scrape failed: 500 Server Error", url=url)


@pytest_asyncio.fixture
async def store(tmp_path) -> AsyncIterator[PersistenceService]:
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'items.db'}")
    await create_tables(engine)
    yield PersistenceService(build_sessionmaker(engine))
    await engine.dispose()


@pytest.fixture
def firecrawl() -> FakeFirecrawl:
    return FakeFirecrawl()


@pytest.fixture
def importer(store, firecrawl) -> ImportService:
    return ImportService(store, firecrawl)


@pytest.fixture
def services(store, firecrawl, importer) -> Services:
    inference = InferenceService(
        summary_model=fake_chat_model("A short summary of the article."),
        tag_model=fake_chat_model("Python, Async, Web"),
    )
    return Services(
        store=store,
        importer=importer,
        discovery=DiscoveryService(firecrawl),
        summaries=SummaryService(store, inference),
    )


class CompletionRejectingStore(PersistenceService):
    """Item store whose COMPLETED writes fail for the given URLs, as an
    over-long column value would on Postgres."""

    def __init__(self, inner: PersistenceService, reject_urls: set[str]) -> None:
        super().__init__(inner._session_factory)
        self._reject_urls = reject_urls

    async def update(self, item_id, user_id, **fields):
        if fields.get("status") == ItemStatus.COMPLETED:
            item = await self.find_one(item_id, user_id)
            if item and item.url in self._reject_urls:
                raise DataError(
                    "UPDATE saved_items", {}, Exception("value too long for type")
                )
        return await super().update(item_id, user_id, **fields)
