"""Composition of the knowledge base from settings."""

from dataclasses import dataclass, field

import structlog

from mcp_kb.config.settings import Settings
from mcp_kb.core.exceptions import ConfigError
from mcp_kb.repositories.blocklist import BlocklistLedger
from mcp_kb.repositories.factory import RepositoryFactory
from mcp_kb.repositories.specification import SpecificationStore
from mcp_kb.services.knowledge_base import KnowledgeBaseService
from mcp_kb.services.retrieval import RetrievalService
from mcp_kb.services.sync import SyncOrchestrator
from mcp_kb.sources.github import GitHubContentProvider
from mcp_kb.sources.provider import RepositoryContentProvider
from mcp_kb.sources.url_resolver import URLResolver

logger = structlog.get_logger(__name__)


@dataclass
class KnowledgeBase:
    """The assembled services plus the resources they own."""

    service: KnowledgeBaseService
    factory: RepositoryFactory
    provider: RepositoryContentProvider | None = None
    orchestrator: SyncOrchestrator | None = None
    unavailable: dict[str, str] = field(default_factory=dict)

    def start(self, run_initial: bool = True) -> None:
        """Schedule periodic sync when an orchestrator is available."""
        if self.orchestrator is None:
            logger.info("Periodic sync not started", reason=self.unavailable.get("sync"))
            return
        try:
            self.orchestrator.start(run_initial=run_initial)
        except ConfigError as e:
            logger.error("Periodic sync not started", error=e.message)

    async def aclose(self) -> None:
        """Stop the timer, let an in-flight pass finish, then close the provider."""
        if self.orchestrator is not None:
            await self.orchestrator.stop()
            await self.orchestrator.wait_idle()
        if self.provider is not None:
            await self.provider.aclose()


def build_knowledge_base(
    settings: Settings,
    provider: RepositoryContentProvider | None = None,
) -> KnowledgeBase:
    """Build every subsystem, degrading instead of failing.

    - Unreadable configuration: no orchestrator, sync is unavailable
    - Unreadable ledger: blocklist operations are unavailable
    - Unreadable specification: get_specification is unavailable
    - No GitHub token and no provider given: sync is unavailable

    Search works in every case, on an empty index if need be.
    """
    factory = RepositoryFactory(settings)
    index = factory.get_document_index()
    unavailable: dict[str, str] = {}

    config_loaded = True
    try:
        factory.config_store.load()
    except (ConfigError, OSError) as e:
        config_loaded = False
        unavailable["sync"] = f"Configuration unavailable: {e}"
        logger.error("Configuration unavailable", error=str(e))

    ledger: BlocklistLedger | None = None
    try:
        ledger = factory.get_blocklist_ledger()
    except (ConfigError, OSError) as e:
        unavailable["blocklist"] = f"Blocklist unavailable: {e}"
        logger.error("Blocklist unavailable", error=str(e))

    specification: SpecificationStore | None = None
    try:
        specification = factory.get_specification_store()
    except (ConfigError, OSError) as e:
        unavailable["specification"] = f"Specification unavailable: {e}"
        logger.error("Specification unavailable", error=str(e))

    if provider is None:
        token = settings.resolve_github_token()
        if token:
            provider = GitHubContentProvider(
                token=token,
                api_url=settings.github_api_url,
                timeout=settings.provider_timeout_seconds,
                max_retries=settings.provider_max_retries,
            )
        else:
            unavailable.setdefault("sync", "No GitHub token configured")
            logger.warning("No GitHub token configured, sync disabled")

    orchestrator: SyncOrchestrator | None = None
    if provider is not None and config_loaded:
        orchestrator = SyncOrchestrator(
            provider=provider,
            index=index,
            config_store=factory.config_store,
            ledger=ledger,
            cache=factory.get_content_cache(),
            discovery_user=settings.github_user,
        )

    service = KnowledgeBaseService(
        index=index,
        retrieval=RetrievalService(index, URLResolver(settings.github_web_url)),
        specification=specification,
        ledger=ledger,
        orchestrator=orchestrator,
        unavailable=unavailable,
    )
    logger.info(
        "Knowledge base ready",
        base_dir=settings.base_dir,
        sync_available=orchestrator is not None,
        unavailable=sorted(unavailable),
    )
    return KnowledgeBase(
        service=service,
        factory=factory,
        provider=provider,
        orchestrator=orchestrator,
        unavailable=unavailable,
    )
