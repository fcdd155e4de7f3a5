"""Indexed document and search result models."""

from datetime import datetime, timezone
from pathlib import PurePosixPath

from pydantic import BaseModel, Field


def make_document_id(owner: str, name: str, branch: str, path: str) -> str:
    """Build the composite document id ``owner/name/branch/path``."""
    return f"{owner}/{name}/{branch}/{path}"


def file_type_for(path: str) -> str:
    """Return the file extension without its dot, or ``unknown``."""
    suffix = PurePosixPath(path).suffix
    return suffix[1:] if suffix else "unknown"


class IndexedDocument(BaseModel):
    """A remote file held in the search index.

    The id is unique: re-indexing the same id replaces the stored
    document, there is no version history.
    """

    id: str
    owner: str
    name: str
    branch: str
    path: str
    content: str
    file_type: str = "unknown"
    size: int = 0
    content_hash: str = ""
    last_indexed: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        owner: str,
        name: str,
        branch: str,
        path: str,
        content: str,
        content_hash: str,
        size: int | None = None,
    ) -> "IndexedDocument":
        """Build a document, deriving id, file type and size."""
        return cls(
            id=make_document_id(owner, name, branch, path),
            owner=owner,
            name=name,
            branch=branch,
            path=path,
            content=content,
            file_type=file_type_for(path),
            size=size if size is not None else len(content.encode("utf-8")),
            content_hash=content_hash,
        )

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.name}"


class SearchResult(BaseModel):
    """A document matched by a keyword search."""

    document: IndexedDocument
    score: float = Field(ge=0.0, le=1.0)
    snippet: str = ""


class IndexStats(BaseModel):
    """Aggregate statistics over the index."""

    total_documents: int = 0
    repositories: set[str] = Field(default_factory=set)
    file_types: dict[str, int] = Field(default_factory=dict)


class RepositorySummary(BaseModel):
    """Per-repository document count."""

    owner: str
    name: str
    file_count: int
