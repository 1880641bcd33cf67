from pydantic import BaseModel, Field

from src.modules.importer.schemas import SubmittedUrl
from src.modules.scraper.schemas import SearchResultItem


class MapRequest(BaseModel):
    url: SubmittedUrl
    search: str | None = Field(default=None, max_length=500)


class MapResponse(BaseModel):
    links: list[str]


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=500)


class SearchResponse(BaseModel):
    results: list[SearchResultItem]
