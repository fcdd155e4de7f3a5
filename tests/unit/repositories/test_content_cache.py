"""Tests for the local content cache."""

import pytest

from mcp_kb.repositories.content_cache import ContentCache


@pytest.mark.unit
class TestContentCache:
    """Tests for ContentCache."""

    def test_write_and_read(self, tmp_path) -> None:
        cache = ContentCache(tmp_path / "repos")
        target = cache.write("acme", "docs", "guide/setup.md", "# Setup")

        assert target == (tmp_path / "repos" / "acme" / "docs" / "guide" / "setup.md").resolve()
        assert cache.read("acme", "docs", "guide/setup.md") == "# Setup"

    def test_read_missing_returns_none(self, tmp_path) -> None:
        assert ContentCache(tmp_path / "repos").read("acme", "docs", "nope.md") is None

    @pytest.mark.parametrize("path", ["../../escape.md", "../other/file.md"])
    def test_rejects_paths_outside_repository(self, tmp_path, path: str) -> None:
        cache = ContentCache(tmp_path / "repos")
        with pytest.raises(ValueError):
            cache.write("acme", "docs", path, "x")
