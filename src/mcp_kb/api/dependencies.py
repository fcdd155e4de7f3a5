"""FastAPI dependencies for dependency injection."""

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status

from mcp_kb.core.models.operation import OperationResult
from mcp_kb.services.knowledge_base import KnowledgeBaseService

STATUS_BY_CODE = {
    "invalid_arguments": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "config_error": status.HTTP_503_SERVICE_UNAVAILABLE,
    "blocklist_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    "specification_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    "sync_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    "provider_error": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_knowledge_base_service(request: Request) -> KnowledgeBaseService:
    """Get the knowledge-base service built by the app lifespan."""
    return request.app.state.knowledge_base.service


def unwrap(result: OperationResult) -> Any:
    """Return the result data, or raise the failure as an HTTPException."""
    if result.ok:
        return result.data
    error = result.error
    raise HTTPException(
        status_code=STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=error.model_dump(mode="json"),
    )


# Type aliases for dependency injection
KnowledgeBaseServiceDep = Annotated[KnowledgeBaseService, Depends(get_knowledge_base_service)]
