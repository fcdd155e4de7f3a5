"""Persisted knowledge-base configuration."""

from dataclasses import dataclass
from pathlib import Path

import pydantic
import structlog

from mcp_kb.core.exceptions import ConfigError
from mcp_kb.core.models.config import KnowledgeBaseConfig, StorageConfiguration
from mcp_kb.core.models.repository import RepositoryDescriptor
from mcp_kb.repositories.jsonfile import read_json, write_json

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StoragePaths:
    """On-disk layout under the storage root."""

    base_dir: Path

    @property
    def config_path(self) -> Path:
        return self.base_dir / "config.json"

    @property
    def data_dir(self) -> Path:
        return self.base_dir / "data"

    @property
    def blocklist_path(self) -> Path:
        return self.data_dir / "blocklist.json"

    @property
    def specification_path(self) -> Path:
        return self.data_dir / "specification.json"

    @property
    def repos_dir(self) -> Path:
        return self.base_dir / "repos"

    def ensure_directories(self) -> None:
        for directory in (self.base_dir, self.data_dir, self.repos_dir):
            directory.mkdir(parents=True, exist_ok=True)


class ConfigStore:
    """Loads and saves ``config.json``.

    A missing file is replaced by the default configuration on first
    load. A present but unparseable file raises ConfigError; callers
    decide whether that is fatal.
    """

    def __init__(self, base_dir: str | Path) -> None:
        self._paths = StoragePaths(Path(base_dir).expanduser())

    @property
    def paths(self) -> StoragePaths:
        return self._paths

    def default_config(self) -> KnowledgeBaseConfig:
        return KnowledgeBaseConfig(
            storage=StorageConfiguration(cache_dir=str(self._paths.base_dir)),
        )

    def load(self) -> KnowledgeBaseConfig:
        path = self._paths.config_path
        if not path.exists():
            config = self.default_config()
            self.save(config)
            logger.info("Created default configuration", path=str(path))
            return config

        data = read_json(path)
        try:
            return KnowledgeBaseConfig.model_validate(data)
        except pydantic.ValidationError as e:
            raise ConfigError(
                f"Invalid configuration in {path}: {e.error_count()} error(s)",
                details={"path": str(path), "errors": e.error_count()},
            ) from e

    def save(self, config: KnowledgeBaseConfig) -> None:
        write_json(self._paths.config_path, config.to_json_dict())

    def add_repository(self, descriptor: RepositoryDescriptor) -> KnowledgeBaseConfig:
        """Add or replace an explicit repository (matched by identity)."""
        config = self.load()
        repositories = [r for r in config.repositories if r.identity != descriptor.identity]
        repositories.append(descriptor)
        config = config.model_copy(update={"repositories": repositories})
        self.save(config)
        logger.info("Repository added to configuration", repo=descriptor.full_name)
        return config

    def remove_repository(self, owner: str, name: str, branch: str = "main") -> bool:
        """Remove an explicit repository. Returns False if it was absent."""
        config = self.load()
        repositories = [r for r in config.repositories if r.identity != (owner, name, branch)]
        if len(repositories) == len(config.repositories):
            return False
        self.save(config.model_copy(update={"repositories": repositories}))
        logger.info("Repository removed from configuration", repo=f"{owner}/{name}")
        return True
