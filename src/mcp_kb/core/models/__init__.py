"""Domain models for MCP-KB."""

from mcp_kb.core.models.blocklist import (
    Blocklist,
    BlocklistEntry,
    BlocklistKind,
    BlocklistSource,
    BlockStatus,
)
from mcp_kb.core.models.config import (
    BlocklistSettings,
    KnowledgeBaseConfig,
    StorageConfiguration,
    SyncConfiguration,
)
from mcp_kb.core.models.document import (
    IndexedDocument,
    IndexStats,
    RepositorySummary,
    SearchResult,
)
from mcp_kb.core.models.operation import OperationError, OperationResult
from mcp_kb.core.models.repository import (
    RepositoryClassification,
    RepositoryDescriptor,
    RepositoryStub,
    TreeEntry,
    TreeEntryKind,
)
from mcp_kb.core.models.search import DocumentReference, SearchResponse
from mcp_kb.core.models.sync import RepositorySyncResult, SyncState, SyncStats

__all__ = [
    "Blocklist",
    "BlocklistEntry",
    "BlocklistKind",
    "BlocklistSource",
    "BlockStatus",
    "BlocklistSettings",
    "KnowledgeBaseConfig",
    "StorageConfiguration",
    "SyncConfiguration",
    "IndexedDocument",
    "IndexStats",
    "RepositorySummary",
    "SearchResult",
    "OperationError",
    "OperationResult",
    "RepositoryClassification",
    "RepositoryDescriptor",
    "RepositoryStub",
    "TreeEntry",
    "TreeEntryKind",
    "DocumentReference",
    "SearchResponse",
    "RepositorySyncResult",
    "SyncState",
    "SyncStats",
]
