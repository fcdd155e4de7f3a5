"""Core domain models and exceptions for MCP-KB."""

from mcp_kb.core.exceptions import (
    BlocklistUnavailableError,
    ConfigError,
    IntegrityError,
    KBError,
    PatternError,
    PermanentProviderError,
    ProviderError,
    QueryTooShortError,
    SpecificationUnavailableError,
    SyncUnavailableError,
    TransientProviderError,
    ValidationError,
)
from mcp_kb.core.models import (
    BlocklistEntry,
    IndexedDocument,
    KnowledgeBaseConfig,
    RepositoryDescriptor,
    SearchResult,
    SyncConfiguration,
    SyncStats,
)

__all__ = [
    # Models
    "BlocklistEntry",
    "IndexedDocument",
    "KnowledgeBaseConfig",
    "RepositoryDescriptor",
    "SearchResult",
    "SyncConfiguration",
    "SyncStats",
    # Exceptions
    "KBError",
    "ConfigError",
    "ValidationError",
    "QueryTooShortError",
    "ProviderError",
    "TransientProviderError",
    "PermanentProviderError",
    "PatternError",
    "IntegrityError",
    "SyncUnavailableError",
    "BlocklistUnavailableError",
    "SpecificationUnavailableError",
]
