"""Repository factory for creating the persisted stores."""

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from mcp_kb.repositories.blocklist import BlocklistLedger
from mcp_kb.repositories.config_store import ConfigStore
from mcp_kb.repositories.content_cache import ContentCache
from mcp_kb.repositories.document_index import DocumentIndex
from mcp_kb.repositories.specification import SpecificationStore

if TYPE_CHECKING:
    from mcp_kb.config.settings import Settings

logger = structlog.get_logger(__name__)


class RepositoryFactory:
    """Creates and caches the stores rooted at ``settings.base_dir``.

    The config store and content cache never fail to construct. The
    ledger and specification store are initialized on first access and
    raise ConfigError when their files exist but cannot be parsed.
    """

    def __init__(self, settings: "Settings") -> None:
        self._settings = settings
        self._config_store = ConfigStore(Path(settings.base_dir))
        self._config_store.paths.ensure_directories()
        self._index: DocumentIndex | None = None
        self._ledger: BlocklistLedger | None = None
        self._specification: SpecificationStore | None = None
        self._cache: ContentCache | None = None

    @property
    def config_store(self) -> ConfigStore:
        return self._config_store

    def get_document_index(self) -> DocumentIndex:
        if self._index is None:
            self._index = DocumentIndex()
        return self._index

    def get_content_cache(self) -> ContentCache:
        if self._cache is None:
            self._cache = ContentCache(self._config_store.paths.repos_dir)
        return self._cache

    def get_blocklist_ledger(self) -> BlocklistLedger:
        """Get or create the ledger."""
        if self._ledger is None:
            ledger = BlocklistLedger(self._config_store.paths.blocklist_path)
            ledger.initialize()
            self._ledger = ledger
            logger.info("Blocklist ledger created", path=str(ledger.path))
        return self._ledger

    def get_specification_store(self) -> SpecificationStore:
        """Get or create the specification store."""
        if self._specification is None:
            store = SpecificationStore(self._config_store.paths.specification_path)
            store.initialize()
            self._specification = store
        return self._specification
