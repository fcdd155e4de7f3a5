"""Sync pass state and result models."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class SyncState(str, Enum):
    """Orchestrator state. Held in memory only."""

    IDLE = "idle"
    RUNNING = "running"


class RepositorySyncResult(BaseModel):
    """Outcome of indexing one repository."""

    repository: str
    branch: str
    documents_indexed: int = 0
    documents_unchanged: int = 0
    files_matched: int = 0
    files_failed: int = 0
    files_from_cache: int = 0


class SyncStats(BaseModel):
    """Aggregate outcome of one sync pass.

    Partial success is normal: failed repositories and files are
    counted, not raised.
    """

    forced: bool = False
    documents_indexed: int = 0
    documents_unchanged: int = 0
    repositories_touched: int = 0
    repositories_failed: int = 0
    files_failed: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_seconds: float = 0.0

    def record(self, result: RepositorySyncResult) -> None:
        self.repositories_touched += 1
        self.documents_indexed += result.documents_indexed
        self.documents_unchanged += result.documents_unchanged
        self.files_failed += result.files_failed
