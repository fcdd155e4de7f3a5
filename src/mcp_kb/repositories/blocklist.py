"""Append-only blocklist ledger."""

from pathlib import Path

import pydantic
import structlog

from mcp_kb.core.exceptions import ConfigError, IntegrityError
from mcp_kb.core.models.blocklist import (
    Blocklist,
    BlocklistEntry,
    BlocklistKind,
    BlockStatus,
    utc_timestamp,
)
from mcp_kb.repositories.jsonfile import read_json, write_json

logger = structlog.get_logger(__name__)


class BlocklistLedger:
    """Hash-verified, append-only log of exclusion decisions.

    Entries are never edited or removed; a correction is a new entry.
    Lookups go through an index of the first matching entry per server
    name and per pattern, rebuilt on load and extended on append. The
    entry list stays the source of truth.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._blocklist = Blocklist()
        self._servers: dict[str, BlocklistEntry] = {}
        self._patterns: dict[str, BlocklistEntry] = {}
        self.violations: list[IntegrityError] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def entries(self) -> tuple[BlocklistEntry, ...]:
        return tuple(self._blocklist.entries)

    @property
    def last_updated(self) -> str:
        return self._blocklist.last_updated

    def initialize(self) -> None:
        """Create an empty ledger file if none exists, then load it."""
        if not self._path.exists():
            write_json(self._path, Blocklist().to_json_dict())
            logger.info("Created empty blocklist", path=str(self._path))
        self.load()

    def load(self) -> Blocklist:
        """Load the ledger and verify every entry's hash.

        Mismatches are collected in ``violations`` and logged; the load
        itself proceeds so the rest of the ledger stays usable.
        """
        data = read_json(self._path)
        try:
            blocklist = Blocklist.model_validate(data)
        except pydantic.ValidationError as e:
            raise ConfigError(
                f"Invalid blocklist in {self._path}: {e.error_count()} error(s)",
                details={"path": str(self._path), "errors": e.error_count()},
            ) from e

        violations = []
        for position, entry in enumerate(blocklist.entries):
            computed = entry.compute_hash()
            if entry.integrity_hash != computed:
                violation = IntegrityError(
                    "Blocklist entry does not match its integrity hash",
                    details={
                        "position": position,
                        "stored_hash": entry.integrity_hash,
                        "computed_hash": computed,
                    },
                )
                violations.append(violation)
                logger.warning(violation.message, path=str(self._path), **violation.details)

        self._blocklist = blocklist
        self.violations = violations
        self._rebuild_index()
        logger.info(
            "Blocklist loaded",
            entries=len(blocklist.entries),
            integrity_violations=len(violations),
        )
        return blocklist

    def append(self, entry: BlocklistEntry) -> BlocklistEntry:
        """Hash and persist a new entry. Returns the stored entry."""
        stored = entry.with_hash()
        updated = Blocklist(
            version=self._blocklist.version,
            last_updated=utc_timestamp(),
            entries=[*self._blocklist.entries, stored],
        )
        write_json(self._path, updated.to_json_dict())

        self._blocklist = updated
        self._index_entry(stored)
        logger.info(
            "Blocklist entry appended",
            kind=stored.kind.value,
            server_name=stored.server_name,
            pattern=stored.pattern,
        )
        return stored

    def is_blocked(self, server_name: str | None = None, pattern: str | None = None) -> BlockStatus:
        """First entry in ledger order wins; later duplicates are shadowed.

        Patterns are compared as strings, not evaluated as globs.
        """
        if server_name:
            entry = self._servers.get(server_name)
            if entry is not None:
                return BlockStatus(blocked=True, reason=entry.reason)
        if pattern:
            entry = self._patterns.get(pattern)
            if entry is not None:
                return BlockStatus(blocked=True, reason=entry.reason)
        return BlockStatus(blocked=False)

    def blocked_patterns(self) -> list[str]:
        """Distinct file patterns in ledger order."""
        return list(self._patterns)

    def _rebuild_index(self) -> None:
        self._servers = {}
        self._patterns = {}
        for entry in self._blocklist.entries:
            self._index_entry(entry)

    def _index_entry(self, entry: BlocklistEntry) -> None:
        if entry.kind is BlocklistKind.SERVER and entry.server_name:
            self._servers.setdefault(entry.server_name, entry)
        elif entry.kind is BlocklistKind.FILE_PATTERN and entry.pattern:
            self._patterns.setdefault(entry.pattern, entry)
