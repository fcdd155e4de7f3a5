"""Persisted stores and the in-memory document index."""

from mcp_kb.repositories.blocklist import BlocklistLedger
from mcp_kb.repositories.config_store import ConfigStore, StoragePaths
from mcp_kb.repositories.content_cache import ContentCache
from mcp_kb.repositories.document_index import DocumentIndex
from mcp_kb.repositories.factory import RepositoryFactory
from mcp_kb.repositories.specification import SpecificationStore

__all__ = [
    "BlocklistLedger",
    "ConfigStore",
    "ContentCache",
    "DocumentIndex",
    "RepositoryFactory",
    "SpecificationStore",
    "StoragePaths",
]
