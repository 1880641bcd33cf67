import pytest

from conftest import CompletionRejectingStore, extraction_error
from src.modules.importer.service import ImportService
from src.modules.persistence.models import ItemStatus


@pytest.mark.asyncio
async def test_success_then_failure_scenario(importer, store, firecrawl) -> None:
    firecrawl.results["https://b.test"] = extraction_error("https://b.test")

    events = [
        e async for e in importer.bulk_import(["https://a.test", "https://b.test"], "user-1")
    ]

    assert [e.model_dump() for e in events] == [
        {"completed": 1, "total": 2, "url": "https://a.test", "status": "success"},
        {"completed": 2, "total": 2, "url": "https://b.test", "status": "failed"},
    ]
    by_url = {i.url: i.status for i in await store.find_many("user-1")}
    assert by_url == {
        "https://a.test": ItemStatus.COMPLETED,
        "https://b.test": ItemStatus.FAILED,
    }


@pytest.mark.asyncio
async def test_one_event_per_url_in_input_order(importer, firecrawl) -> None:
    urls = [f"https://site.test/{n}" for n in range(6)]
    firecrawl.results[urls[1]] = extraction_error(urls[1])
    firecrawl.results[urls[4]] = extraction_error(urls[4])

    events = [e async for e in importer.bulk_import(urls, "user-1")]

    assert [e.url for e in events] == urls
    assert [e.completed for e in events] == list(range(1, len(urls) + 1))
    assert all(e.total == len(urls) for e in events)
    assert [e.status for e in events] == [
        "success", "failed", "success", "success", "failed", "success",
    ]


@pytest.mark.asyncio
async def test_urls_are_processed_sequentially(importer, firecrawl) -> None:
    urls = ["https://a.test", "https://b.test", "https://c.test"]
    seen_before_yield = []

    async for event in importer.bulk_import(urls, "user-1"):
        seen_before_yield.append(list(firecrawl.scraped))

    assert seen_before_yield == [urls[:1], urls[:2], urls[:3]]


@pytest.mark.asyncio
async def test_every_item_ends_terminal(importer, store, firecrawl) -> None:
    urls = ["https://a.test", "https://b.test", "https://c.test"]
    firecrawl.results["https://c.test"] = extraction_error("https://c.test")

    async for _ in importer.bulk_import(urls, "user-1"):
        pass

    items = await store.find_many("user-1")
    assert len(items) == 3
    assert all(i.status.is_terminal for i in items)


@pytest.mark.asyncio
async def test_stopping_early_processes_no_further_urls(importer, store, firecrawl) -> None:
    urls = ["https://a.test", "https://b.test", "https://c.test"]
    progress = importer.bulk_import(urls, "user-1")

    first = await progress.__anext__()
    await progress.aclose()

    assert first.completed == 1
    assert firecrawl.scraped == ["https://a.test"]
    items = await store.find_many("user-1")
    assert [(i.url, i.status) for i in items] == [("https://a.test", ItemStatus.COMPLETED)]


@pytest.mark.asyncio
async def test_bulk_items_are_created_pending(importer, store, firecrawl) -> None:
    statuses = []

    async def scrape(url):
        statuses.extend(i.status for i in await store.find_many("user-1"))
        raise extraction_error(url)

    firecrawl.scrape = scrape

    async for _ in importer.bulk_import(["https://a.test"], "user-1"):
        pass

    assert statuses == [ItemStatus.PENDING]


@pytest.mark.asyncio
async def test_failed_result_write_does_not_abort_pipeline(store, firecrawl) -> None:
    importer = ImportService(CompletionRejectingStore(store, {"https://b.test"}), firecrawl)
    urls = ["https://a.test", "https://b.test", "https://c.test"]

    events = [e async for e in importer.bulk_import(urls, "user-1")]

    assert [(e.url, e.status) for e in events] == [
        ("https://a.test", "success"),
        ("https://b.test", "failed"),
        ("https://c.test", "success"),
    ]
    by_url = {i.url: i.status for i in await store.find_many("user-1")}
    assert by_url["https://b.test"] == ItemStatus.FAILED
