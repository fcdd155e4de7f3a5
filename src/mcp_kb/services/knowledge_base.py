"""Knowledge-base operations facade.

Every operation returns an OperationResult. Argument validation
failures, domain errors and unexpected exceptions are all turned into
structured failures instead of propagating to the caller.
"""

import functools
from typing import Any, Awaitable, Callable

import pydantic
import structlog
from pydantic import BaseModel, Field, field_validator, model_validator

from mcp_kb.core.exceptions import (
    BlocklistUnavailableError,
    KBError,
    PatternError,
    SpecificationUnavailableError,
    SyncUnavailableError,
)
from mcp_kb.core.models.blocklist import BlocklistEntry, BlocklistKind, BlocklistSource
from mcp_kb.core.models.operation import OperationResult
from mcp_kb.repositories.blocklist import BlocklistLedger
from mcp_kb.repositories.document_index import DocumentIndex
from mcp_kb.repositories.specification import SpecificationStore
from mcp_kb.services.retrieval import RetrievalService
from mcp_kb.services.sync import SyncOrchestrator
from mcp_kb.sources.patterns import compile_pattern

logger = structlog.get_logger(__name__)

MAX_SEARCH_RESULTS = 50


class SearchRequest(BaseModel):
    query: str
    max_results: int = Field(default=10, ge=1, le=MAX_SEARCH_RESULTS)


class BlocklistEntryRequest(BaseModel):
    """Arguments of ``add_blocklist_entry``."""

    kind: BlocklistKind
    server_name: str | None = None
    pattern: str | None = None
    reason: str
    version: str | None = None

    @field_validator("reason")
    @classmethod
    def reason_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("reason must not be empty")
        return value

    @model_validator(mode="after")
    def target_matches_kind(self) -> "BlocklistEntryRequest":
        if self.kind is BlocklistKind.SERVER and not self.server_name:
            raise ValueError("server entries require server_name")
        if self.kind is BlocklistKind.FILE_PATTERN:
            if not self.pattern:
                raise ValueError("file_pattern entries require pattern")
            try:
                compile_pattern(self.pattern)
            except PatternError as e:
                raise ValueError(e.message) from e
        return self


class BlocklistCheckRequest(BaseModel):
    server_name: str | None = None
    pattern: str | None = None

    @model_validator(mode="after")
    def has_target(self) -> "BlocklistCheckRequest":
        if not self.server_name and not self.pattern:
            raise ValueError("server_name or pattern is required")
        return self


def operation(name: str) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[OperationResult]]]:
    """Wrap an async method so its outcome is an OperationResult."""

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[OperationResult]]:
        @functools.wraps(func)
        async def wrapper(self: "KnowledgeBaseService", *args: Any, **kwargs: Any) -> OperationResult:
            try:
                data = await func(self, *args, **kwargs)
            except pydantic.ValidationError as e:
                errors = e.errors(include_url=False, include_context=False, include_input=False)
                logger.info("Invalid arguments", operation=name, errors=len(errors))
                return OperationResult.failure(
                    "invalid_arguments",
                    f"Invalid arguments for {name}",
                    details={"errors": errors},
                )
            except KBError as e:
                logger.warning("Operation failed", operation=name, code=e.code, error=e.message)
                return OperationResult.failure(e.code, e.message, e.details)
            except Exception as e:
                logger.exception("Operation failed unexpectedly", operation=name)
                return OperationResult.failure("internal_error", str(e) or type(e).__name__)
            return OperationResult.success(data)

        return wrapper

    return decorator


class KnowledgeBaseService:
    """Operations exposed to callers of the knowledge base.

    Subsystems that failed to start are passed as None together with
    the reason in ``unavailable``; their operations then fail with the
    matching ``*_unavailable`` code while the rest keep working.
    """

    def __init__(
        self,
        index: DocumentIndex,
        retrieval: RetrievalService,
        specification: SpecificationStore | None = None,
        ledger: BlocklistLedger | None = None,
        orchestrator: SyncOrchestrator | None = None,
        unavailable: dict[str, str] | None = None,
    ) -> None:
        self._index = index
        self._retrieval = retrieval
        self._specification = specification
        self._ledger = ledger
        self._orchestrator = orchestrator
        self.unavailable = unavailable or {}

    @property
    def orchestrator(self) -> SyncOrchestrator | None:
        return self._orchestrator

    @operation("search")
    async def search(self, query: str, max_results: int = 10) -> dict[str, Any]:
        request = SearchRequest(query=query, max_results=max_results)
        response = self._retrieval.search(request.query, limit=request.max_results)
        return response.model_dump(mode="json")

    @operation("list_repositories")
    async def list_repositories(self) -> dict[str, Any]:
        repositories = self._index.list_repositories()
        return {
            "total_repositories": len(repositories),
            "repositories": [r.model_dump() for r in repositories],
        }

    @operation("get_specification")
    async def get_specification(self) -> dict[str, Any]:
        if self._specification is None:
            raise SpecificationUnavailableError(
                self.unavailable.get("specification", "Specification store is not available")
            )
        return self._specification.load()

    @operation("add_blocklist_entry")
    async def add_blocklist_entry(
        self,
        kind: str,
        reason: str,
        server_name: str | None = None,
        pattern: str | None = None,
        version: str | None = None,
    ) -> dict[str, Any]:
        request = BlocklistEntryRequest(
            kind=kind,
            server_name=server_name,
            pattern=pattern,
            reason=reason,
            version=version,
        )
        ledger = self._require_ledger()
        stored = ledger.append(
            BlocklistEntry(
                kind=request.kind,
                server_name=request.server_name,
                pattern=request.pattern,
                reason=request.reason,
                version=request.version,
                source=BlocklistSource.USER,
            )
        )
        return stored.to_json_dict()

    @operation("check_blocklist")
    async def check_blocklist(
        self, server_name: str | None = None, pattern: str | None = None
    ) -> dict[str, Any]:
        request = BlocklistCheckRequest(server_name=server_name, pattern=pattern)
        status = self._require_ledger().is_blocked(request.server_name, request.pattern)
        return status.model_dump(exclude_none=True)

    @operation("trigger_sync")
    async def trigger_sync(self, force: bool = False) -> dict[str, Any]:
        if self._orchestrator is None:
            raise SyncUnavailableError(
                self.unavailable.get("sync", "No content provider is configured")
            )
        stats = await self._orchestrator.sync(force=force)
        data = stats.model_dump(mode="json")
        data["total_documents"] = len(self._index)
        return data

    @operation("get_stats")
    async def get_stats(self) -> dict[str, Any]:
        stats = self._index.get_stats()
        data: dict[str, Any] = {
            "total_documents": stats.total_documents,
            "repositories": sorted(stats.repositories),
            "file_types": stats.file_types,
            "sync_state": None,
            "sync_scheduled": False,
            "last_sync": None,
            "blocklist_entries": None,
            "integrity_violations": None,
            "unavailable": dict(self.unavailable),
        }
        if self._orchestrator is not None:
            data["sync_state"] = self._orchestrator.state.value
            data["sync_scheduled"] = self._orchestrator.scheduled
            if self._orchestrator.last_stats is not None:
                data["last_sync"] = self._orchestrator.last_stats.model_dump(mode="json")
        if self._ledger is not None:
            data["blocklist_entries"] = len(self._ledger.entries)
            data["integrity_violations"] = len(self._ledger.violations)
        return data

    def _require_ledger(self) -> BlocklistLedger:
        if self._ledger is None:
            raise BlocklistUnavailableError(
                self.unavailable.get("blocklist", "Blocklist ledger is not available")
            )
        return self._ledger
