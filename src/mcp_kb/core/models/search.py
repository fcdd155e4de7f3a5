"""Search response models."""

from pydantic import BaseModel, Field


class DocumentReference(BaseModel):
    """A search hit pointing at the source file.

    Carries a browsable URL and a snippet instead of the full content,
    so the caller can read the source directly.
    """

    repository: str
    file: str
    url: str
    score: float = 0.0
    snippet: str = ""


class SearchResponse(BaseModel):
    """Response from a keyword search."""

    query: str
    results_count: int
    results: list[DocumentReference] = Field(default_factory=list)
    processing_time_ms: float | None = None
