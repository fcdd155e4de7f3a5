"""Specification API endpoints."""

from typing import Any

from fastapi import APIRouter

from mcp_kb.api.dependencies import KnowledgeBaseServiceDep, unwrap

router = APIRouter()


@router.get("/specification")
async def get_specification(service: KnowledgeBaseServiceDep) -> dict[str, Any]:
    """The stored protocol metadata, verbatim."""
    return unwrap(await service.get_specification())
