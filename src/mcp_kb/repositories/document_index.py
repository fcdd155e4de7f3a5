"""In-memory document index with keyword search."""

import re
from collections import Counter
from typing import Iterable

import structlog

from mcp_kb.core.exceptions import QueryTooShortError
from mcp_kb.core.models.document import (
    IndexedDocument,
    IndexStats,
    RepositorySummary,
    SearchResult,
)
from mcp_kb.utils.text import extract_snippet, relevance_score

logger = structlog.get_logger(__name__)

# Shorter queries are contained in nearly every document
MIN_QUERY_LENGTH = 2


class DocumentIndex:
    """Documents keyed by composite id, in insertion order.

    Upserts overwrite in place. All mutations are synchronous, so on a
    single event loop they never interleave with a running search.
    """

    def __init__(self) -> None:
        self._documents: dict[str, IndexedDocument] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    def add_documents(self, documents: Iterable[IndexedDocument]) -> int:
        """Upsert each document by id. Returns the batch size."""
        count = 0
        for document in documents:
            self._documents[document.id] = document
            count += 1
        logger.debug("Documents indexed", batch=count, total=len(self._documents))
        return count

    def get_document(self, document_id: str) -> IndexedDocument | None:
        return self._documents.get(document_id)

    def documents(self) -> list[IndexedDocument]:
        return list(self._documents.values())

    def search(self, query: str, max_results: int = 10) -> list[SearchResult]:
        """Case-insensitive keyword search.

        The stripped query must be at least MIN_QUERY_LENGTH characters;
        matching uses the query as given. Score is the non-overlapping
        occurrence count over 10, capped at 1.0. Equal scores keep index
        order.
        """
        if len(query.strip()) < MIN_QUERY_LENGTH:
            raise QueryTooShortError(
                f"Query must be at least {MIN_QUERY_LENGTH} characters",
                details={"query": query, "min_length": MIN_QUERY_LENGTH},
            )
        needle = re.compile(re.escape(query), re.IGNORECASE)

        results: list[SearchResult] = []
        for document in self._documents.values():
            matches = needle.finditer(document.content)
            first = next(matches, None)
            if first is None:
                continue
            occurrences = 1 + sum(1 for _ in matches)
            results.append(
                SearchResult(
                    document=document,
                    score=relevance_score(occurrences),
                    snippet=extract_snippet(document.content, first.start(), first.end() - first.start()),
                )
            )

        # sorted() is stable, also with reverse=True
        results = sorted(results, key=lambda r: r.score, reverse=True)
        return results[:max_results]

    def get_stats(self) -> IndexStats:
        repositories: set[str] = set()
        file_types: Counter[str] = Counter()
        for document in self._documents.values():
            repositories.add(document.repository)
            file_types[document.file_type] += 1
        return IndexStats(
            total_documents=len(self._documents),
            repositories=repositories,
            file_types=dict(file_types),
        )

    def list_repositories(self) -> list[RepositorySummary]:
        """Document counts per (owner, name), in first-seen order."""
        counts: dict[tuple[str, str], int] = {}
        for document in self._documents.values():
            key = (document.owner, document.name)
            counts[key] = counts.get(key, 0) + 1
        return [
            RepositorySummary(owner=owner, name=name, file_count=count)
            for (owner, name), count in counts.items()
        ]

    def clear(self) -> None:
        self._documents = {}

    def replace_with(self, other: "DocumentIndex") -> None:
        """Swap in another index's documents in one step."""
        self._documents = dict(other._documents)
        logger.info("Index replaced", total=len(self._documents))
