"""Repository descriptor and tree listing models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_INCLUDE_PATTERNS = [".claude/**/*.md", "**/*.mcp.json"]
DEFAULT_EXCLUDE_PATTERNS = ["**/node_modules/**", "**/.git/**"]


class RepositoryClassification(str, Enum):
    """Where a repository descriptor came from."""

    USER = "user"
    OFFICIAL = "official"
    COMMUNITY = "community"


class RepositoryDescriptor(BaseModel):
    """A remote repository to index, with its path filters.

    Identity is (owner, name, branch). Persisted with the camelCase keys
    of the config file (``repo`` for the name, ``type`` for the class).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    owner: str = Field(min_length=1)
    name: str = Field(min_length=1, alias="repo")
    branch: str = "main"
    include_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE_PATTERNS), alias="includePatterns"
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS), alias="excludePatterns"
    )
    indexing_enabled: bool = Field(default=True, alias="indexingEnabled")
    classification: RepositoryClassification = Field(
        default=RepositoryClassification.USER, alias="type"
    )

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.owner, self.name, self.branch)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class RepositoryStub(BaseModel):
    """A repository returned by user discovery, before filtering."""

    owner: str
    name: str
    default_branch: str = "main"


class TreeEntryKind(str, Enum):
    """Kind of an entry in a tree listing."""

    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"


class TreeEntry(BaseModel):
    """One entry of a flat repository tree listing."""

    path: str
    kind: TreeEntryKind = TreeEntryKind.BLOB
    size: int = 0
    content_hash: str
