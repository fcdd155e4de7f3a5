"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from fakes import FakeContentProvider
from mcp_kb.config.settings import Settings
from mcp_kb.core.models.config import KnowledgeBaseConfig, SyncConfiguration
from mcp_kb.repositories.blocklist import BlocklistLedger
from mcp_kb.repositories.config_store import ConfigStore
from mcp_kb.repositories.content_cache import ContentCache
from mcp_kb.repositories.document_index import DocumentIndex


@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Storage root for one test."""
    return tmp_path / "kb"


@pytest.fixture
def settings(base_dir: Path, tmp_path: Path) -> Settings:
    """Settings rooted in the test's temporary directory, without a token."""
    return Settings(
        _env_file=None,
        base_dir=str(base_dir),
        github_token=None,
        claude_credentials_path=str(tmp_path / "missing-credentials.json"),
    )


@pytest.fixture
def config_store(base_dir: Path) -> ConfigStore:
    """Config store with discovery and the built-in catalogs switched off."""
    store = ConfigStore(base_dir)
    store.paths.ensure_directories()
    store.save(
        KnowledgeBaseConfig(
            sync=SyncConfiguration(
                auto_discover_user_repos=False,
                include_official_repos=False,
                include_community_repos=False,
            )
        )
    )
    return store


@pytest.fixture
def ledger(config_store: ConfigStore) -> BlocklistLedger:
    ledger = BlocklistLedger(config_store.paths.blocklist_path)
    ledger.initialize()
    return ledger


@pytest.fixture
def content_cache(config_store: ConfigStore) -> ContentCache:
    return ContentCache(config_store.paths.repos_dir)


@pytest.fixture
def index() -> DocumentIndex:
    return DocumentIndex()


@pytest.fixture
def provider() -> FakeContentProvider:
    """Provider serving one repository, acme/docs@main."""
    provider = FakeContentProvider()
    provider.add_repository(
        "acme",
        "docs",
        {
            "README.md": "# Acme docs\n\nThe acme server speaks MCP over stdio.",
            "guide/setup.md": "Install the server, then configure MCP clients.",
            "packages/node_modules/pkg/README.md": "Vendored MCP package.",
            "src/server.ts": "export const mcp = true;",
        },
    )
    return provider
