"""Tests for URL resolver."""

import pytest

from factories import IndexedDocumentFactory
from mcp_kb.sources.url_resolver import URLResolver


@pytest.mark.unit
class TestURLResolver:
    """Tests for URLResolver."""

    def test_resolve(self) -> None:
        document = IndexedDocumentFactory(owner="org", name="repo", branch="main", path="docs/entity.md")
        url = URLResolver().resolve(document)
        assert url == "https://github.com/org/repo/blob/main/docs/entity.md"

    def test_custom_web_url(self) -> None:
        document = IndexedDocumentFactory(owner="org", name="repo", branch="develop", path="README.md")
        url = URLResolver("https://github.example.com/").resolve(document)
        assert url == "https://github.example.com/org/repo/blob/develop/README.md"

    def test_resolve_quotes_path(self) -> None:
        document = IndexedDocumentFactory(owner="org", name="repo", path="docs/my page.md")
        assert URLResolver().resolve(document).endswith("/blob/main/docs/my%20page.md")
