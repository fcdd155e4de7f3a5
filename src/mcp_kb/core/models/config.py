"""Persisted knowledge-base configuration models.

Field aliases match the keys of ``config.json``.
"""

from pydantic import BaseModel, ConfigDict, Field

from mcp_kb.core.models.repository import RepositoryDescriptor

CONFIG_VERSION = "1.0.0"
MIN_INTERVAL_MINUTES = 5
MAX_INTERVAL_MINUTES = 1440


class SyncConfiguration(BaseModel):
    """Periodic sync behaviour and repository discovery flags."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    enabled: bool = True
    interval_minutes: int = Field(
        default=30, ge=MIN_INTERVAL_MINUTES, le=MAX_INTERVAL_MINUTES, alias="intervalMinutes"
    )
    auto_discover_user_repos: bool = Field(default=True, alias="autoDiscoverUserRepos")
    include_official_repos: bool = Field(default=True, alias="includeOfficialMCPRepos")
    include_community_repos: bool = Field(default=True, alias="includeCommunityRepos")


class StorageConfiguration(BaseModel):
    """Local storage settings.

    ``max_index_size_mb`` is persisted for compatibility; capacity is
    not enforced.
    """

    model_config = ConfigDict(populate_by_name=True)

    cache_dir: str = Field(default="~/.claude-kb", alias="cacheDir")
    max_index_size_mb: int = Field(default=1000, alias="maxIndexSizeMB")


class BlocklistSettings(BaseModel):
    """Blocklist behaviour."""

    enabled: bool = True
    strict: bool = True


class KnowledgeBaseConfig(BaseModel):
    """Root of ``config.json``."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = CONFIG_VERSION
    repositories: list[RepositoryDescriptor] = Field(default_factory=list)
    sync: SyncConfiguration = Field(default_factory=SyncConfiguration)
    storage: StorageConfiguration = Field(default_factory=StorageConfiguration)
    blocklist: BlocklistSettings = Field(default_factory=BlocklistSettings)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
