"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mcp_kb import __version__
from mcp_kb.api.routers import blocklist, health, retrieval, specification, sync
from mcp_kb.config import get_settings
from mcp_kb.config.logging import configure_logging
from mcp_kb.services.builder import KnowledgeBase, build_knowledge_base


def create_app(knowledge_base: KnowledgeBase | None = None, start_sync: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    When ``knowledge_base`` is None it is built from settings at startup.
    The periodic sync runs for the lifetime of the app when ``start_sync``.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(
            log_level=settings.log_level,
            json_logs=settings.json_logs or settings.is_production,
        )
        kb = knowledge_base or build_knowledge_base(settings)
        app.state.knowledge_base = kb
        if start_sync:
            kb.start()

        yield

        # Cleanup
        await kb.aclose()

    app = FastAPI(
        title="MCP-KB",
        description="Searchable knowledge base of MCP repositories",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(retrieval.router, prefix="/api/v1", tags=["Retrieval"])
    app.include_router(blocklist.router, prefix="/api/v1", tags=["Blocklist"])
    app.include_router(sync.router, prefix="/api/v1", tags=["Sync"])
    app.include_router(specification.router, prefix="/api/v1", tags=["Specification"])

    return app


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    run()
