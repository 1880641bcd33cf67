import logging

from fastapi import APIRouter, Depends, HTTPException

from src.dependencies import get_current_user_id, get_discovery_service
from src.errors import ExtractionError
from src.modules.discovery.schemas import (
    MapRequest,
    MapResponse,
    SearchRequest,
    SearchResponse,
)
from src.modules.discovery.service import DiscoveryService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user_id)])


@router.post("/map", response_model=MapResponse)
async def map_site(
    body: MapRequest, discovery: DiscoveryService = Depends(get_discovery_service)
):
    try:
        links = await discovery.map_site(body.url, body.search)
    except ExtractionError as exc:
        logger.error("Map failed for %s: %s", body.url, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return MapResponse(links=links)


@router.post("/search", response_model=SearchResponse)
async def search_web(
    body: SearchRequest, discovery: DiscoveryService = Depends(get_discovery_service)
):
    try:
        results = await discovery.search_web(body.query)
    except ExtractionError as exc:
        logger.error("Search failed for '%s': %s", body.query, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return SearchResponse(results=results)
