"""Tests for the append-only blocklist ledger."""

import json

import pytest

from factories import PatternEntryFactory, ServerEntryFactory
from mcp_kb.core.exceptions import ConfigError
from mcp_kb.repositories.blocklist import BlocklistLedger


@pytest.mark.unit
class TestBlocklistLedger:
    """Tests for BlocklistLedger."""

    def test_initialize_creates_empty_ledger(self, tmp_path) -> None:
        path = tmp_path / "data" / "blocklist.json"
        ledger = BlocklistLedger(path)
        ledger.initialize()

        data = json.loads(path.read_text())
        assert data["version"] == "1.0.0"
        assert data["entries"] == []
        assert "lastUpdated" in data
        assert ledger.entries == ()

    def test_append_hashes_and_persists(self, ledger: BlocklistLedger) -> None:
        stored = ledger.append(ServerEntryFactory(server_name="evil-server", reason="exfiltrates data"))

        assert stored.integrity_hash.startswith("sha256:")
        assert stored.verify()

        data = json.loads(ledger.path.read_text())
        assert len(data["entries"]) == 1
        persisted = data["entries"][0]
        assert persisted["type"] == "server"
        assert persisted["serverName"] == "evil-server"
        assert persisted["hash"] == stored.integrity_hash
        assert persisted["allowOverride"] is False
        assert "pattern" not in persisted

    def test_append_updates_last_updated(self, ledger: BlocklistLedger) -> None:
        ledger.append(ServerEntryFactory())
        data = json.loads(ledger.path.read_text())
        assert data["lastUpdated"] == ledger.last_updated

    def test_hash_survives_reload(self, ledger: BlocklistLedger) -> None:
        stored = ledger.append(ServerEntryFactory(version="1.2.0"))

        reloaded = BlocklistLedger(ledger.path)
        reloaded.load()
        assert reloaded.violations == []
        assert reloaded.entries[0].integrity_hash == stored.integrity_hash
        assert reloaded.entries[0].compute_hash() == stored.integrity_hash

    def test_is_blocked_server(self, ledger: BlocklistLedger) -> None:
        ledger.append(ServerEntryFactory(server_name="X", reason="bad"))
        assert ledger.is_blocked(server_name="X").model_dump() == {"blocked": True, "reason": "bad"}
        assert not ledger.is_blocked(server_name="Y").blocked

    def test_first_entry_wins(self, ledger: BlocklistLedger) -> None:
        ledger.append(ServerEntryFactory(server_name="X", reason="first"))
        ledger.append(ServerEntryFactory(server_name="X", reason="second"))
        assert ledger.is_blocked(server_name="X").reason == "first"
        assert len(ledger.entries) == 2

    def test_pattern_is_string_equality(self, ledger: BlocklistLedger) -> None:
        ledger.append(PatternEntryFactory(pattern="**/secrets/**", reason="credentials"))
        assert ledger.is_blocked(pattern="**/secrets/**").blocked
        assert not ledger.is_blocked(pattern="a/secrets/b").blocked
        assert ledger.blocked_patterns() == ["**/secrets/**"]

    def test_server_entries_do_not_match_patterns(self, ledger: BlocklistLedger) -> None:
        ledger.append(ServerEntryFactory(server_name="same"))
        assert not ledger.is_blocked(pattern="same").blocked

    def test_tampered_entry_is_reported_not_dropped(self, ledger: BlocklistLedger) -> None:
        ledger.append(ServerEntryFactory(server_name="X", reason="original"))
        ledger.append(ServerEntryFactory(server_name="Y", reason="untouched"))

        data = json.loads(ledger.path.read_text())
        data["entries"][0]["reason"] = "edited by hand"
        ledger.path.write_text(json.dumps(data))

        reloaded = BlocklistLedger(ledger.path)
        reloaded.load()
        assert len(reloaded.violations) == 1
        assert reloaded.violations[0].details["position"] == 0
        assert reloaded.is_blocked(server_name="X").reason == "edited by hand"
        assert reloaded.is_blocked(server_name="Y").blocked

    def test_malformed_ledger_raises_config_error(self, tmp_path) -> None:
        path = tmp_path / "blocklist.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            BlocklistLedger(path).load()

    def test_invalid_entry_raises_config_error(self, tmp_path) -> None:
        path = tmp_path / "blocklist.json"
        path.write_text(json.dumps({"version": "1.0.0", "entries": [{"type": "nope"}]}))
        with pytest.raises(ConfigError):
            BlocklistLedger(path).load()
