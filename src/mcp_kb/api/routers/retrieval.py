"""Retrieval API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from mcp_kb.api.dependencies import KnowledgeBaseServiceDep, unwrap

router = APIRouter()


class SearchRequest(BaseModel):
    """Request model for the search endpoint."""

    query: str = Field(..., max_length=1000, description="Search query")
    max_results: int = Field(default=10, description="Max results, 1 to 50")


@router.post("/search")
async def search(request: SearchRequest, service: KnowledgeBaseServiceDep) -> dict[str, Any]:
    """Keyword search returning file references with URLs."""
    return unwrap(await service.search(request.query, max_results=request.max_results))


@router.get("/search")
async def search_get(
    service: KnowledgeBaseServiceDep,
    query: Annotated[str, Query(max_length=1000)],
    max_results: int = 10,
) -> dict[str, Any]:
    """Keyword search (GET variant for simple queries)."""
    return unwrap(await service.search(query, max_results=max_results))


@router.get("/repositories")
async def list_repositories(service: KnowledgeBaseServiceDep) -> dict[str, Any]:
    """Indexed repositories with their document counts."""
    return unwrap(await service.list_repositories())


@router.get("/stats")
async def stats(service: KnowledgeBaseServiceDep) -> dict[str, Any]:
    """Index statistics and sync state."""
    return unwrap(await service.get_stats())
