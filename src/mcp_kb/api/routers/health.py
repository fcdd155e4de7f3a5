"""Health check endpoint."""

from fastapi import APIRouter, Request

from mcp_kb import __version__

router = APIRouter()


@router.get("/health")
async def health(request: Request) -> dict:
    knowledge_base = request.app.state.knowledge_base
    return {
        "status": "degraded" if knowledge_base.unavailable else "ok",
        "version": __version__,
        "unavailable": sorted(knowledge_base.unavailable),
    }
