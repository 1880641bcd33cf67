import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from src.modules.persistence.models import ItemStatus


class SavedItemResponse(BaseModel):
    id: uuid.UUID
    user_id: str
    url: str
    status: ItemStatus
    title: str | None = None
    content: str | None = None
    og_image: str | None = None
    author: str | None = None
    published_at: datetime | None = None
    summary: str | None = None
    tags: list[str] = []
    created_at: datetime

    model_config = {"from_attributes": True}


class SaveSummaryRequest(BaseModel):
    summary: str = Field(..., min_length=1)
