"""Retrieval service."""

import time

from mcp_kb.core.models.search import DocumentReference, SearchResponse
from mcp_kb.repositories.document_index import DocumentIndex
from mcp_kb.sources.url_resolver import URLResolver


class RetrievalService:
    """Service for keyword search over the index.

    Returns DocumentReference objects with URLs instead of raw content.
    """

    def __init__(self, index: DocumentIndex, url_resolver: URLResolver | None = None) -> None:
        self._index = index
        self._url_resolver = url_resolver or URLResolver()

    def search(self, query: str, limit: int = 10) -> SearchResponse:
        """Execute a keyword query. Raises QueryTooShortError."""
        started = time.perf_counter()
        hits = self._index.search(query, max_results=limit)
        references = [
            DocumentReference(
                repository=hit.document.repository,
                file=hit.document.path,
                url=self._url_resolver.resolve(hit.document),
                score=hit.score,
                snippet=hit.snippet,
            )
            for hit in hits
        ]
        return SearchResponse(
            query=query,
            results_count=len(references),
            results=references,
            processing_time_ms=(time.perf_counter() - started) * 1000,
        )
