"""Service layer for MCP-KB."""

from mcp_kb.services.builder import KnowledgeBase, build_knowledge_base
from mcp_kb.services.knowledge_base import KnowledgeBaseService
from mcp_kb.services.retrieval import RetrievalService
from mcp_kb.services.sync import SyncOrchestrator

__all__ = [
    "KnowledgeBase",
    "KnowledgeBaseService",
    "RetrievalService",
    "SyncOrchestrator",
    "build_knowledge_base",
]
