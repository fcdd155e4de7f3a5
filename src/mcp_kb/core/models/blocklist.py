"""Blocklist ledger models."""

import hashlib
import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

LEDGER_VERSION = "1.0.0"
HASH_PREFIX = "sha256:"


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and ``Z``."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class BlocklistKind(str, Enum):
    """What a ledger entry blocks."""

    SERVER = "server"
    FILE_PATTERN = "file_pattern"


class BlocklistSource(str, Enum):
    """Who recorded a ledger entry."""

    USER = "user"
    SYSTEM = "system"
    COMMUNITY = "community"


class BlocklistEntry(BaseModel):
    """One immutable exclusion decision.

    The timestamp is kept as the exact string that was hashed so the
    hash stays reproducible across load/save cycles.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: str = Field(default_factory=utc_timestamp)
    kind: BlocklistKind = Field(alias="type")
    server_name: str | None = Field(default=None, alias="serverName")
    version: str | None = None
    pattern: str | None = None
    reason: str
    integrity_hash: str = Field(default="", alias="hash")
    allow_override: bool = Field(default=False, alias="allowOverride")
    source: BlocklistSource = BlocklistSource.USER

    def hashed_fields(self) -> dict[str, Any]:
        """Persisted fields covered by the integrity hash."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"integrity_hash"},
        )

    def compute_hash(self) -> str:
        """Hash of every persisted field except the hash itself.

        Keys are sorted and the JSON is compact, so the result only
        depends on the field values.
        """
        canonical = json.dumps(
            self.hashed_fields(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return HASH_PREFIX + hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def with_hash(self) -> "BlocklistEntry":
        return self.model_copy(update={"integrity_hash": self.compute_hash()})

    def verify(self) -> bool:
        return self.integrity_hash == self.compute_hash()

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Blocklist(BaseModel):
    """Root of ``data/blocklist.json``."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = LEDGER_VERSION
    last_updated: str = Field(default_factory=utc_timestamp, alias="lastUpdated")
    entries: list[BlocklistEntry] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "lastUpdated": self.last_updated,
            "entries": [entry.to_json_dict() for entry in self.entries],
        }


class BlockStatus(BaseModel):
    """Answer of a blocklist check."""

    blocked: bool
    reason: str | None = None
