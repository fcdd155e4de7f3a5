"""Repository content provider interface."""

from typing import Protocol, runtime_checkable

from mcp_kb.core.models.repository import RepositoryStub, TreeEntry


@runtime_checkable
class RepositoryContentProvider(Protocol):
    """Remote repository host as seen by the sync orchestrator.

    Every method may raise ProviderError. Retries, backoff and auth are
    the provider's responsibility; callers only isolate failures.
    """

    async def list_tree(self, owner: str, name: str, ref: str) -> list[TreeEntry]:
        """Flat listing of every entry of the repository at ``ref``."""
        ...

    async def fetch_blob(self, owner: str, name: str, content_hash: str) -> bytes:
        """Raw content of the blob with the given content address."""
        ...

    async def discover_user_repositories(self, user: str | None = None) -> list[RepositoryStub]:
        """Repositories owned by ``user`` (the authenticated user when None)."""
        ...

    async def has_marker(self, owner: str, name: str, marker_path: str) -> bool:
        """Whether ``marker_path`` exists on the default branch."""
        ...

    async def aclose(self) -> None:
        ...
