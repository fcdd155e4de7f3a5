"""Repository indexation pipeline."""

from typing import Iterable

import structlog

from mcp_kb.core.exceptions import ProviderError
from mcp_kb.core.models.document import IndexedDocument, make_document_id
from mcp_kb.core.models.repository import RepositoryDescriptor, TreeEntry, TreeEntryKind
from mcp_kb.core.models.sync import RepositorySyncResult
from mcp_kb.repositories.content_cache import ContentCache
from mcp_kb.repositories.document_index import DocumentIndex
from mcp_kb.sources.patterns import PatternSet
from mcp_kb.sources.provider import RepositoryContentProvider

logger = structlog.get_logger(__name__)


class RepositoryIndexer:
    """Turns one remote repository into a batch of indexed documents.

    Orchestrates the per-repository unit of work:
    1. List the repository tree at the descriptor's branch
    2. Keep blobs eligible under the include/exclude patterns
    3. Reuse documents whose content hash is unchanged
    4. Fetch the remaining blobs and mirror them in the content cache
    5. Build IndexedDocument records

    A tree listing failure propagates to the caller. A single file
    failure is logged and skipped; on a transient fetch failure the
    cached copy is used when there is one.
    """

    def __init__(
        self,
        provider: RepositoryContentProvider,
        cache: ContentCache | None = None,
    ) -> None:
        self._provider = provider
        self._cache = cache

    async def index_repository(
        self,
        descriptor: RepositoryDescriptor,
        extra_excludes: Iterable[str] = (),
        previous: DocumentIndex | None = None,
    ) -> tuple[list[IndexedDocument], RepositorySyncResult]:
        """Index all eligible files of a repository.

        ``previous`` is the index consulted for unchanged documents;
        pass None to fetch everything.
        """
        tree = await self._provider.list_tree(
            descriptor.owner, descriptor.name, descriptor.branch
        )
        patterns = PatternSet(
            descriptor.include_patterns,
            descriptor.exclude_patterns,
            shared_excludes=extra_excludes,
        )
        matching = [
            entry
            for entry in tree
            if entry.kind is TreeEntryKind.BLOB and patterns.is_eligible(entry.path)
        ]

        logger.info(
            "Indexing repository",
            repo=descriptor.full_name,
            branch=descriptor.branch,
            tree_entries=len(tree),
            files=len(matching),
        )

        result = RepositorySyncResult(
            repository=descriptor.full_name,
            branch=descriptor.branch,
            files_matched=len(matching),
        )
        documents: list[IndexedDocument] = []
        for entry in matching:
            existing = None
            if previous is not None:
                existing = previous.get_document(
                    make_document_id(
                        descriptor.owner, descriptor.name, descriptor.branch, entry.path
                    )
                )
            if existing is not None and existing.content_hash == entry.content_hash:
                documents.append(existing)
                result.documents_unchanged += 1
                continue

            document = await self._fetch_document(descriptor, entry, result)
            if document is not None:
                documents.append(document)

        result.documents_indexed = len(documents)
        return documents, result

    async def _fetch_document(
        self,
        descriptor: RepositoryDescriptor,
        entry: TreeEntry,
        result: RepositorySyncResult,
    ) -> IndexedDocument | None:
        try:
            raw = await self._provider.fetch_blob(
                descriptor.owner, descriptor.name, entry.content_hash
            )
        except ProviderError as e:
            content = self._read_cached(descriptor, entry.path) if e.transient else None
            if content is None:
                result.files_failed += 1
                logger.warning(
                    "Failed to fetch file",
                    repo=descriptor.full_name,
                    path=entry.path,
                    error=e.message,
                    transient=e.transient,
                )
                return None
            result.files_from_cache += 1
            logger.info(
                "Using cached content",
                repo=descriptor.full_name,
                path=entry.path,
                error=e.message,
            )
        except Exception as e:
            result.files_failed += 1
            logger.error(
                "Failed to index file",
                repo=descriptor.full_name,
                path=entry.path,
                error=str(e),
            )
            return None
        else:
            content = raw.decode("utf-8", errors="replace")
            self._write_cached(descriptor, entry.path, content)

        return IndexedDocument.create(
            owner=descriptor.owner,
            name=descriptor.name,
            branch=descriptor.branch,
            path=entry.path,
            content=content,
            content_hash=entry.content_hash,
            size=entry.size or None,
        )

    def _read_cached(self, descriptor: RepositoryDescriptor, path: str) -> str | None:
        if self._cache is None:
            return None
        try:
            return self._cache.read(descriptor.owner, descriptor.name, path)
        except (OSError, ValueError) as e:
            logger.warning("Unreadable cache entry", repo=descriptor.full_name, path=path, error=str(e))
            return None

    def _write_cached(self, descriptor: RepositoryDescriptor, path: str, content: str) -> None:
        if self._cache is None:
            return
        try:
            self._cache.write(descriptor.owner, descriptor.name, path, content)
        except (OSError, ValueError) as e:
            logger.warning("Failed to cache file", repo=descriptor.full_name, path=path, error=str(e))
