"""Remote repository sources for MCP-KB."""

from mcp_kb.sources.github import GitHubContentProvider
from mcp_kb.sources.patterns import PatternSet, compile_pattern
from mcp_kb.sources.provider import RepositoryContentProvider
from mcp_kb.sources.url_resolver import URLResolver

__all__ = [
    "GitHubContentProvider",
    "PatternSet",
    "RepositoryContentProvider",
    "URLResolver",
    "compile_pattern",
]
