import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.config.database import create_tables
from src.config.settings import settings
from src.dependencies import build_services
from src.modules.discovery.router import router as discovery_router
from src.modules.items.router import router as items_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    services = build_services(settings)
    await create_tables(services.engine)
    logger.info("Database tables synced")
    app.state.services = services
    yield
    await services.aclose()


app = FastAPI(title="Read It Later", lifespan=lifespan)

# API routes
app.include_router(items_router, prefix="/api/items", tags=["items"])
app.include_router(discovery_router, prefix="/api/discover", tags=["discover"])


@app.get("/health")
async def health():
    return {"status": "ok"}
