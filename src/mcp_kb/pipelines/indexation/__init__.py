"""Per-repository indexation pipeline."""

from mcp_kb.pipelines.indexation.pipeline import RepositoryIndexer

__all__ = ["RepositoryIndexer"]
