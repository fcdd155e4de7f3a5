"""Blocklist API endpoints."""

from typing import Any

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from mcp_kb.api.dependencies import KnowledgeBaseServiceDep, unwrap

router = APIRouter(prefix="/blocklist")


class BlocklistEntryCreate(BaseModel):
    """Request to append a ledger entry."""

    kind: str = Field(..., description="server or file_pattern")
    reason: str
    server_name: str | None = None
    pattern: str | None = None
    version: str | None = None


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_entry(request: BlocklistEntryCreate, service: KnowledgeBaseServiceDep) -> dict[str, Any]:
    """Append an entry. The stored entry carries its integrity hash."""
    return unwrap(
        await service.add_blocklist_entry(
            kind=request.kind,
            reason=request.reason,
            server_name=request.server_name,
            pattern=request.pattern,
            version=request.version,
        )
    )


@router.get("/check")
async def check(
    service: KnowledgeBaseServiceDep,
    server_name: str | None = None,
    pattern: str | None = None,
) -> dict[str, Any]:
    return unwrap(await service.check_blocklist(server_name=server_name, pattern=pattern))
