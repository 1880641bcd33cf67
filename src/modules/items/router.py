import json
import logging
import uuid
from contextlib import aclosing

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from src.dependencies import (
    get_current_user_id,
    get_import_service,
    get_store,
    get_summary_service,
)
from src.errors import ItemNotFoundError
from src.modules.importer.schemas import BulkImportRequest, ImportRequest
from src.modules.importer.service import ImportService
from src.modules.items.schemas import SaveSummaryRequest, SavedItemResponse
from src.modules.persistence.contracts import ItemStoreContract
from src.modules.summarizer.service import SummaryService

logger = logging.getLogger(__name__)

router = APIRouter()

_SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
    "Content-Encoding": "none",
}


@router.post("/import", response_model=SavedItemResponse, status_code=201)
async def import_url(
    body: ImportRequest,
    user_id: str = Depends(get_current_user_id),
    importer: ImportService = Depends(get_import_service),
):
    return await importer.import_url(body.url, user_id)


@router.post("/bulk-import")
async def bulk_import(
    body: BulkImportRequest,
    user_id: str = Depends(get_current_user_id),
    importer: ImportService = Depends(get_import_service),
) -> StreamingResponse:
    urls = body.urls

    async def event_stream():
        try:
            async with aclosing(importer.bulk_import(urls, user_id)) as progress:
                async for update in progress:
                    yield f"data: {update.model_dump_json()}\n\n"
        except Exception as exc:
            logger.exception("Bulk import aborted after unexpected error")
            yield f"data: {json.dumps({'error': str(exc)})}\n\n"
        yield "data: [DONE]\n\n"

    return StreamingResponse(
        event_stream(), media_type="text/event-stream", headers=_SSE_HEADERS
    )


@router.get("", response_model=list[SavedItemResponse])
async def list_items(
    user_id: str = Depends(get_current_user_id),
    store: ItemStoreContract = Depends(get_store),
):
    return await store.find_many(user_id)


@router.get("/{item_id}", response_model=SavedItemResponse)
async def get_item(
    item_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    store: ItemStoreContract = Depends(get_store),
):
    item = await store.find_one(item_id, user_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.post("/{item_id}/summary/stream")
async def stream_summary(
    item_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    summaries: SummaryService = Depends(get_summary_service),
) -> StreamingResponse:
    try:
        chunks = await summaries.open_summary_stream(item_id, user_id)
    except ItemNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    async def event_stream():
        try:
            async for chunk in chunks:
                yield f"data: {json.dumps({'token': chunk})}\n\n"
        except Exception as exc:
            logger.exception("Summary stream failed for item %s", item_id)
            yield f"data: {json.dumps({'error': str(exc)})}\n\n"
        yield "data: [DONE]\n\n"

    return StreamingResponse(
        event_stream(), media_type="text/event-stream", headers=_SSE_HEADERS
    )


@router.post("/{item_id}/summary", response_model=SavedItemResponse)
async def save_summary(
    item_id: uuid.UUID,
    body: SaveSummaryRequest,
    user_id: str = Depends(get_current_user_id),
    summaries: SummaryService = Depends(get_summary_service),
):
    try:
        return await summaries.save_summary_and_generate_tags(
            item_id, user_id, body.summary
        )
    except ItemNotFoundError:
        raise HTTPException(status_code=404, detail="Item not found")
