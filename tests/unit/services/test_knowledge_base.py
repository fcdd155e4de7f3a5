"""Tests for the knowledge-base operations facade."""

import pytest

from factories import IndexedDocumentFactory, RepositoryDescriptorFactory
from fakes import FakeContentProvider
from mcp_kb.repositories.blocklist import BlocklistLedger
from mcp_kb.repositories.config_store import ConfigStore
from mcp_kb.repositories.document_index import DocumentIndex
from mcp_kb.repositories.specification import SpecificationStore
from mcp_kb.services.knowledge_base import KnowledgeBaseService
from mcp_kb.services.retrieval import RetrievalService
from mcp_kb.services.sync import SyncOrchestrator


@pytest.fixture
def specification(config_store: ConfigStore) -> SpecificationStore:
    store = SpecificationStore(config_store.paths.specification_path)
    store.initialize()
    return store


@pytest.fixture
def service(
    index: DocumentIndex,
    ledger: BlocklistLedger,
    specification: SpecificationStore,
    config_store: ConfigStore,
    provider: FakeContentProvider,
) -> KnowledgeBaseService:
    config_store.add_repository(
        RepositoryDescriptorFactory(owner="acme", name="docs", include_patterns=["*.md", "**/*.md"])
    )
    orchestrator = SyncOrchestrator(provider=provider, index=index, config_store=config_store, ledger=ledger)
    return KnowledgeBaseService(
        index=index,
        retrieval=RetrievalService(index),
        specification=specification,
        ledger=ledger,
        orchestrator=orchestrator,
    )


@pytest.fixture
def degraded(index: DocumentIndex) -> KnowledgeBaseService:
    return KnowledgeBaseService(
        index=index,
        retrieval=RetrievalService(index),
        unavailable={"blocklist": "Blocklist unavailable: corrupt", "sync": "No GitHub token configured"},
    )


@pytest.mark.unit
class TestSearch:
    """Tests for the search operation."""

    async def test_search(self, service: KnowledgeBaseService, index: DocumentIndex) -> None:
        index.add_documents(
            [IndexedDocumentFactory(owner="acme", name="docs", path="a.md", content="Use MCP tools")]
        )
        result = await service.search("mcp tools")

        assert result.ok
        assert result.data["query"] == "mcp tools"
        assert result.data["results_count"] == 1
        hit = result.data["results"][0]
        assert hit["repository"] == "acme/docs"
        assert hit["file"] == "a.md"
        assert hit["url"] == "https://github.com/acme/docs/blob/main/a.md"
        assert hit["score"] == pytest.approx(0.1)
        assert result.data["processing_time_ms"] >= 0

    async def test_short_query(self, service: KnowledgeBaseService) -> None:
        result = await service.search(" a ")
        assert not result.ok
        assert result.error.code == "invalid_arguments"

    @pytest.mark.parametrize("max_results", [0, 51])
    async def test_max_results_bounds(self, service: KnowledgeBaseService, max_results: int) -> None:
        result = await service.search("mcp", max_results=max_results)
        assert not result.ok
        assert result.error.code == "invalid_arguments"
        assert result.error.details["errors"][0]["loc"] == ("max_results",)

    async def test_search_on_empty_index_when_degraded(self, degraded: KnowledgeBaseService) -> None:
        result = await degraded.search("anything")
        assert result.ok
        assert result.data["results"] == []


@pytest.mark.unit
class TestBlocklistOperations:
    """Tests for blocklist operations."""

    async def test_add_and_check_server(self, service: KnowledgeBaseService) -> None:
        added = await service.add_blocklist_entry(kind="server", server_name="X", reason="  leaks tokens ")
        assert added.ok
        assert added.data["serverName"] == "X"
        assert added.data["reason"] == "leaks tokens"
        assert added.data["hash"].startswith("sha256:")

        checked = await service.check_blocklist(server_name="X")
        assert checked.data == {"blocked": True, "reason": "leaks tokens"}

        clean = await service.check_blocklist(server_name="Y")
        assert clean.data == {"blocked": False}

    async def test_add_pattern(self, service: KnowledgeBaseService) -> None:
        result = await service.add_blocklist_entry(kind="file_pattern", pattern="**/secrets/**", reason="creds")
        assert result.ok
        assert (await service.check_blocklist(pattern="**/secrets/**")).data["blocked"]

    @pytest.mark.parametrize(
        "arguments",
        [
            {"kind": "server", "reason": "missing name"},
            {"kind": "file_pattern", "reason": "missing pattern"},
            {"kind": "file_pattern", "pattern": "[unterminated", "reason": "bad glob"},
            {"kind": "server", "server_name": "X", "reason": "   "},
            {"kind": "tool", "server_name": "X", "reason": "unknown kind"},
        ],
    )
    async def test_add_rejects_invalid_arguments(
        self, service: KnowledgeBaseService, ledger: BlocklistLedger, arguments: dict
    ) -> None:
        result = await service.add_blocklist_entry(**arguments)
        assert not result.ok
        assert result.error.code == "invalid_arguments"
        assert ledger.entries == ()

    async def test_check_requires_an_argument(self, service: KnowledgeBaseService) -> None:
        result = await service.check_blocklist()
        assert result.error.code == "invalid_arguments"

    async def test_unavailable_ledger(self, degraded: KnowledgeBaseService) -> None:
        added = await degraded.add_blocklist_entry(kind="server", server_name="X", reason="r")
        assert added.error.code == "blocklist_unavailable"
        assert added.error.message == "Blocklist unavailable: corrupt"

        checked = await degraded.check_blocklist(server_name="X")
        assert checked.error.code == "blocklist_unavailable"


@pytest.mark.unit
class TestOtherOperations:
    """Tests for repositories, specification, sync and stats."""

    async def test_get_specification(self, service: KnowledgeBaseService) -> None:
        result = await service.get_specification()
        assert result.ok
        assert result.data["version"] == "2025-03-26"

    async def test_specification_unavailable(self, degraded: KnowledgeBaseService) -> None:
        result = await degraded.get_specification()
        assert result.error.code == "specification_unavailable"

    async def test_trigger_sync_and_list(self, service: KnowledgeBaseService) -> None:
        synced = await service.trigger_sync()
        assert synced.ok
        assert synced.data["documents_indexed"] == 2
        assert synced.data["total_documents"] == 2

        listed = await service.list_repositories()
        assert listed.data == {
            "total_repositories": 1,
            "repositories": [{"owner": "acme", "name": "docs", "file_count": 2}],
        }

    async def test_sync_unavailable(self, degraded: KnowledgeBaseService) -> None:
        result = await degraded.trigger_sync(force=True)
        assert result.error.code == "sync_unavailable"
        assert result.error.message == "No GitHub token configured"

    async def test_sync_config_error(self, service: KnowledgeBaseService, config_store: ConfigStore) -> None:
        config_store.paths.config_path.write_text("not json")
        result = await service.trigger_sync()
        assert result.error.code == "config_error"

    async def test_stats(self, service: KnowledgeBaseService, ledger: BlocklistLedger) -> None:
        await service.trigger_sync()
        await service.add_blocklist_entry(kind="server", server_name="X", reason="r")

        result = await service.get_stats()
        assert result.data["total_documents"] == 2
        assert result.data["repositories"] == ["acme/docs"]
        assert result.data["file_types"] == {"md": 2}
        assert result.data["sync_state"] == "idle"
        assert result.data["last_sync"]["documents_indexed"] == 2
        assert result.data["blocklist_entries"] == 1
        assert result.data["integrity_violations"] == 0

    async def test_stats_when_degraded(self, degraded: KnowledgeBaseService) -> None:
        result = await degraded.get_stats()
        assert result.ok
        assert result.data["sync_state"] is None
        assert sorted(result.data["unavailable"]) == ["blocklist", "sync"]

    async def test_unexpected_error_is_internal(
        self, service: KnowledgeBaseService, index: DocumentIndex, monkeypatch
    ) -> None:
        def explode():
            raise RuntimeError("boom")

        monkeypatch.setattr(index, "list_repositories", explode)
        result = await service.list_repositories()
        assert result.error.code == "internal_error"
        assert result.error.message == "boom"
