from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
)

_HTTP_URL = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    # Validated as an http(s) URL but kept exactly as submitted
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError as exc:
        raise ValueError(f"Invalid URL: {value!r}") from exc
    return value


SubmittedUrl = Annotated[str, AfterValidator(_check_url)]


class ImportRequest(BaseModel):
    url: SubmittedUrl


class BulkImportRequest(BaseModel):
    urls: list[SubmittedUrl] = Field(..., min_length=1)

    @field_validator("urls")
    @classmethod
    def _dedupe(cls, urls: list[str]) -> list[str]:
        seen: set[str] = set()
        unique: list[str] = []
        for url in urls:
            if url not in seen:
                seen.add(url)
                unique.append(url)
        return unique


class BulkProgress(BaseModel):
    """Progress of a bulk import after one more URL has been processed."""

    completed: int = Field(..., ge=1)
    total: int = Field(..., ge=1)
    url: str
    status: Literal["success", "failed"]
