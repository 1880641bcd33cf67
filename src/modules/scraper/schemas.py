from typing import Any

from pydantic import BaseModel, Field


class PageMetadata(BaseModel):
    """Subset of Firecrawl page metadata the importer uses."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    title: str | None = None
    og_image: str | None = Field(default=None, alias="ogImage")
    source_url: str | None = Field(default=None, alias="sourceURL")


class ScrapeResult(BaseModel):
    """Normalized result of a single Firecrawl scrape."""

    markdown: str | None = None
    structured: dict[str, Any] = Field(default_factory=dict)
    metadata: PageMetadata = Field(default_factory=PageMetadata)


class SearchResultItem(BaseModel):
    title: str | None = None
    url: str
    description: str | None = None
