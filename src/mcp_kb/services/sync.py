"""Sync orchestration: repository resolution, periodic timer, single-flight."""

import asyncio
import time
from functools import partial

import structlog

from mcp_kb.core.models.config import KnowledgeBaseConfig
from mcp_kb.core.models.repository import RepositoryDescriptor
from mcp_kb.core.models.sync import SyncState, SyncStats
from mcp_kb.pipelines.indexation import RepositoryIndexer
from mcp_kb.repositories.blocklist import BlocklistLedger
from mcp_kb.repositories.config_store import ConfigStore
from mcp_kb.repositories.content_cache import ContentCache
from mcp_kb.repositories.document_index import DocumentIndex
from mcp_kb.sources.catalog import (
    COMMUNITY_REPOSITORIES,
    MARKER_DIRECTORY,
    OFFICIAL_REPOSITORIES,
    descriptor_for_discovered,
)
from mcp_kb.sources.provider import RepositoryContentProvider

logger = structlog.get_logger(__name__)


def _resolve_future(future: asyncio.Future, task: asyncio.Task) -> None:
    if future.done():
        return
    if task.cancelled():
        future.cancel()
    elif task.exception() is not None:
        future.set_exception(task.exception())
    else:
        future.set_result(task.result())


class SyncOrchestrator:
    """Keeps the document index in step with the configured repositories.

    At most one pass runs at a time. Requests arriving while a pass is
    running are coalesced into a single queued pass, forced if any of
    them asked for it, and all of them receive its stats. Scheduled
    ticks that find a pass running are skipped instead of queued.

    Non-forced passes upsert each repository's batch into the live
    index as it completes and keep documents of repositories that are
    no longer configured. Forced passes fetch everything into a staging
    index that replaces the live one when the pass ends.
    """

    def __init__(
        self,
        provider: RepositoryContentProvider,
        index: DocumentIndex,
        config_store: ConfigStore,
        ledger: BlocklistLedger | None = None,
        cache: ContentCache | None = None,
        discovery_user: str | None = None,
    ) -> None:
        self._provider = provider
        self._index = index
        self._config_store = config_store
        self._ledger = ledger
        self._indexer = RepositoryIndexer(provider, cache)
        self._discovery_user = discovery_user

        self._current: asyncio.Task | None = None
        self._queued: asyncio.Future | None = None
        self._queued_force = False
        self._timer: asyncio.Task | None = None
        self.last_stats: SyncStats | None = None

    @property
    def state(self) -> SyncState:
        return SyncState.RUNNING if self.running else SyncState.IDLE

    @property
    def running(self) -> bool:
        # Cleared by _on_pass_done, not when the task finishes, so a request
        # landing between the two still joins the queue.
        return self._current is not None

    @property
    def scheduled(self) -> bool:
        return self._timer is not None and not self._timer.done()

    async def sync(self, force: bool = False) -> SyncStats:
        """Run a sync pass, or join the pass queued behind the running one."""
        if not self.running:
            return await asyncio.shield(self._start_pass(force))

        if self._queued is None:
            self._queued = asyncio.get_running_loop().create_future()
            self._queued_force = force
        else:
            self._queued_force = self._queued_force or force
        logger.info("Sync already running, request queued", force=self._queued_force)
        return await asyncio.shield(self._queued)

    def _start_pass(self, force: bool) -> asyncio.Task:
        task = asyncio.create_task(self._run_pass(force), name="kb_sync_pass")
        self._current = task
        task.add_done_callback(self._on_pass_done)
        return task

    def _on_pass_done(self, task: asyncio.Task) -> None:
        if self._current is not task:
            return
        self._current = None
        queued, self._queued = self._queued, None
        force, self._queued_force = self._queued_force, False
        if queued is None:
            return
        self._start_pass(force).add_done_callback(partial(_resolve_future, queued))

    async def _run_pass(self, force: bool) -> SyncStats:
        started = time.monotonic()
        stats = SyncStats(forced=force)
        config = self._config_store.load()
        repositories = await self.resolve_repositories(config)
        extra_excludes = self._blocked_patterns(config)

        logger.info(
            "Starting sync",
            forced=force,
            repositories=len(repositories),
            blocked_patterns=len(extra_excludes),
        )

        target = DocumentIndex() if force else self._index
        previous = None if force else self._index

        for descriptor in repositories:
            try:
                documents, result = await self._indexer.index_repository(
                    descriptor, extra_excludes=extra_excludes, previous=previous
                )
            except Exception as e:
                stats.repositories_failed += 1
                logger.error(
                    "Repository sync failed",
                    repo=descriptor.full_name,
                    branch=descriptor.branch,
                    error=str(e),
                )
                continue

            target.add_documents(documents)
            stats.record(result)
            logger.info(
                "Repository synced",
                repo=descriptor.full_name,
                documents=result.documents_indexed,
                unchanged=result.documents_unchanged,
                failed=result.files_failed,
            )

        if force:
            self._index.replace_with(target)

        stats.duration_seconds = time.monotonic() - started
        self.last_stats = stats
        logger.info(
            "Sync completed",
            forced=force,
            documents=stats.documents_indexed,
            repositories=stats.repositories_touched,
            repositories_failed=stats.repositories_failed,
            total_documents=len(self._index),
            duration_seconds=round(stats.duration_seconds, 3),
        )
        return stats

    async def resolve_repositories(self, config: KnowledgeBaseConfig) -> list[RepositoryDescriptor]:
        """Ordered, de-duplicated repositories for one pass.

        Order is explicit, discovered, official, community; the first
        descriptor seen for an identity wins.
        """
        candidates: list[RepositoryDescriptor] = [
            r for r in config.repositories if r.indexing_enabled
        ]
        if config.sync.auto_discover_user_repos:
            candidates.extend(await self._discover())
        if config.sync.include_official_repos:
            candidates.extend(OFFICIAL_REPOSITORIES)
        if config.sync.include_community_repos:
            candidates.extend(COMMUNITY_REPOSITORIES)

        resolved: dict[tuple[str, str, str], RepositoryDescriptor] = {}
        for descriptor in candidates:
            resolved.setdefault(descriptor.identity, descriptor)
        return list(resolved.values())

    async def _discover(self) -> list[RepositoryDescriptor]:
        try:
            stubs = await self._provider.discover_user_repositories(self._discovery_user)
        except Exception as e:
            logger.error("Repository discovery failed", user=self._discovery_user, error=str(e))
            return []

        discovered = []
        for stub in stubs:
            try:
                marked = await self._provider.has_marker(stub.owner, stub.name, MARKER_DIRECTORY)
            except Exception as e:
                logger.warning(
                    "Marker probe failed, skipping repository",
                    repo=f"{stub.owner}/{stub.name}",
                    error=str(e),
                )
                continue
            if marked:
                discovered.append(descriptor_for_discovered(stub))

        logger.info("Discovered user repositories", candidates=len(stubs), marked=len(discovered))
        return discovered

    def _blocked_patterns(self, config: KnowledgeBaseConfig) -> list[str]:
        if self._ledger is None or not config.blocklist.enabled:
            return []
        return self._ledger.blocked_patterns()

    def start(self, run_initial: bool = True) -> bool:
        """Schedule periodic syncs. Returns False when sync is disabled.

        Raises ConfigError when the configuration cannot be loaded.
        """
        if self.scheduled:
            return True
        sync_config = self._config_store.load().sync
        if not sync_config.enabled:
            logger.info("Periodic sync disabled")
            return False

        interval = sync_config.interval_minutes * 60
        self._timer = asyncio.create_task(
            self._periodic(interval, run_initial), name="kb_sync_timer"
        )
        logger.info("Periodic sync scheduled", interval_minutes=sync_config.interval_minutes)
        return True

    async def stop(self) -> None:
        """Cancel the timer. A pass already running is left to finish."""
        if self._timer is None:
            return
        timer, self._timer = self._timer, None
        if not timer.done():
            timer.cancel()
        try:
            await timer
        except asyncio.CancelledError:
            pass
        logger.info("Periodic sync stopped")

    async def wait_idle(self) -> None:
        """Wait for the running pass and any pass queued behind it.

        Failures stay with the callers of sync(); this never raises them.
        """
        while self._current is not None:
            await asyncio.wait([self._current])

    async def _periodic(self, interval: float, run_initial: bool) -> None:
        if run_initial:
            await self._tick()
        while True:
            await asyncio.sleep(interval)
            await self._tick()

    async def _tick(self) -> None:
        if self.running:
            logger.info("Sync pass still running, skipping scheduled sync")
            return
        try:
            await self.sync(force=False)
        except Exception as e:
            logger.error("Scheduled sync failed", error=str(e))
