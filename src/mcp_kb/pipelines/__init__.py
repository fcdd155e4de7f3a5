"""Processing pipelines for MCP-KB."""

from mcp_kb.pipelines.indexation import RepositoryIndexer

__all__ = ["RepositoryIndexer"]
