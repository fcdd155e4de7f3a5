"""Sync API endpoints."""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from mcp_kb.api.dependencies import KnowledgeBaseServiceDep, unwrap

router = APIRouter()


class SyncRequest(BaseModel):
    force: bool = False


@router.post("/sync")
async def trigger_sync(
    service: KnowledgeBaseServiceDep,
    request: SyncRequest | None = None,
) -> dict[str, Any]:
    """Run a sync pass, or wait for the one queued behind the running pass."""
    force = request.force if request is not None else False
    return unwrap(await service.trigger_sync(force=force))
