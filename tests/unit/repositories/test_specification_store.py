"""Tests for the specification store."""

import json

import pytest

from mcp_kb.core.exceptions import ConfigError
from mcp_kb.repositories.specification import SpecificationStore


@pytest.mark.unit
class TestSpecificationStore:
    """Tests for SpecificationStore."""

    def test_initialize_writes_default(self, tmp_path) -> None:
        store = SpecificationStore(tmp_path / "specification.json")
        store.initialize()

        specification = store.load()
        assert specification["version"] == "2025-03-26"
        assert [t["name"] for t in specification["transports"]] == ["stdio", "http"]

    def test_initialize_keeps_existing(self, tmp_path) -> None:
        path = tmp_path / "specification.json"
        path.write_text(json.dumps({"version": "custom", "extra": [1, 2]}))

        store = SpecificationStore(path)
        store.initialize()
        assert store.load() == {"version": "custom", "extra": [1, 2]}

    def test_non_object_raises(self, tmp_path) -> None:
        path = tmp_path / "specification.json"
        path.write_text("[]")
        with pytest.raises(ConfigError):
            SpecificationStore(path).load()
