from dataclasses import dataclass

import httpx
from fastapi import Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncEngine

from src.config.database import build_engine, build_sessionmaker
from src.config.settings import Settings
from src.modules.discovery.service import DiscoveryService
from src.modules.importer.service import ImportService
from src.modules.inference.service import InferenceService, build_chat_model
from src.modules.persistence.contracts import ItemStoreContract
from src.modules.persistence.service import PersistenceService
from src.modules.scraper.service import FirecrawlService
from src.modules.summarizer.service import SummaryService


@dataclass
class Services:
    """Collaborators built once at startup and shared by every request."""

    store: ItemStoreContract
    importer: ImportService
    discovery: DiscoveryService
    summaries: SummaryService
    engine: AsyncEngine | None = None
    http_client: httpx.AsyncClient | None = None

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
        if self.engine is not None:
            await self.engine.dispose()


def build_services(settings: Settings) -> Services:
    engine = build_engine(settings.database_url)
    store = PersistenceService(build_sessionmaker(engine))

    http_client = httpx.AsyncClient(timeout=settings.firecrawl_timeout)
    firecrawl = FirecrawlService(
        http_client,
        api_key=settings.firecrawl_api_key,
        base_url=settings.firecrawl_base_url,
        max_retries=settings.firecrawl_max_retries,
    )
    inference = InferenceService(
        summary_model=build_chat_model(settings.summary_model, settings.hf_api_token),
        tag_model=build_chat_model(settings.tag_model, settings.hf_api_token, temperature=0.0),
    )
    return Services(
        store=store,
        importer=ImportService(store, firecrawl),
        discovery=DiscoveryService(firecrawl),
        summaries=SummaryService(store, inference),
        engine=engine,
        http_client=http_client,
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_store(request: Request) -> ItemStoreContract:
    return get_services(request).store


def get_import_service(request: Request) -> ImportService:
    return get_services(request).importer


def get_discovery_service(request: Request) -> DiscoveryService:
    return get_services(request).discovery


def get_summary_service(request: Request) -> SummaryService:
    return get_services(request).summaries


async def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    # Authentication happens upstream; the proxy forwards the user id.
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing user identity")
    return x_user_id.strip()
