"""Built-in repository sets and discovery defaults."""

from mcp_kb.core.models.repository import (
    RepositoryClassification,
    RepositoryDescriptor,
    RepositoryStub,
)

# A user repository takes part in auto-discovery only if it has this path
MARKER_DIRECTORY = ".claude"

USER_INCLUDE_PATTERNS = [".claude/**/*.md", "**/*.mcp.json"]
OFFICIAL_INCLUDE_PATTERNS = ["**/*.md", "**/package.json"]
COMMUNITY_INCLUDE_PATTERNS = ["**/*.md"]
CATALOG_EXCLUDE_PATTERNS = ["**/node_modules/**"]

OFFICIAL_REPOSITORIES: tuple[RepositoryDescriptor, ...] = tuple(
    RepositoryDescriptor(
        owner="modelcontextprotocol",
        name=name,
        include_patterns=OFFICIAL_INCLUDE_PATTERNS,
        exclude_patterns=CATALOG_EXCLUDE_PATTERNS,
        classification=RepositoryClassification.OFFICIAL,
    )
    for name in ("servers", "typescript-sdk", "specification")
)

COMMUNITY_REPOSITORIES: tuple[RepositoryDescriptor, ...] = tuple(
    RepositoryDescriptor(
        owner=owner,
        name="awesome-mcp-servers",
        include_patterns=COMMUNITY_INCLUDE_PATTERNS,
        exclude_patterns=CATALOG_EXCLUDE_PATTERNS,
        classification=RepositoryClassification.COMMUNITY,
    )
    for owner in ("punkpeye", "wong2")
)


def descriptor_for_discovered(stub: RepositoryStub) -> RepositoryDescriptor:
    """Descriptor used to index a discovered user repository."""
    return RepositoryDescriptor(
        owner=stub.owner,
        name=stub.name,
        branch=stub.default_branch,
        include_patterns=USER_INCLUDE_PATTERNS,
        exclude_patterns=CATALOG_EXCLUDE_PATTERNS,
        classification=RepositoryClassification.USER,
    )
